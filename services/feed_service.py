from __future__ import annotations
from typing import List, Optional
from sqlalchemy import and_, or_
from sqlmodel import Session, select

from config.settings import settings
from models import Recommendation, RecommendationFeedback
from services.errors import ValidationError
from services.scoring import EXCLUDED_FROM_FEED
from utils.logger import setup_logger
from utils.request_context import RequestContext

logger = setup_logger(__name__)


class FeedService:
    def get_personalized_feed(
        self,
        db_session: Session,
        ctx: RequestContext,
        category: Optional[str],
        limit: Optional[int] = None
    ) -> List[Recommendation]:
        """
        Public items in a category the user has not favorited or suppressed.

        Items closest to resurfacing come first; an item the user never
        reacted to comes before every item with feedback, even one already due.
        Ties go to the higher overall weight.
        """
        if not category or not category.strip():
            raise ValidationError("category parameter is required")

        if limit is None:
            limit = settings.FEED_DEFAULT_LIMIT
        if limit < 1:
            raise ValidationError("limit must be a positive integer")
        limit = min(limit, settings.FEED_MAX_LIMIT)

        logger.debug(
            "Fetching personalized feed",
            extra=ctx.log_extra(category=category, limit=limit)
        )

        statement = (
            select(Recommendation)
            .outerjoin(
                RecommendationFeedback,
                and_(
                    RecommendationFeedback.recommendation_id == Recommendation.id,
                    RecommendationFeedback.user_id == ctx.user_id
                )
            )
            .where(Recommendation.category == category)
            .where(Recommendation.is_public == True)  # noqa: E712
            .where(or_(
                RecommendationFeedback.last_interaction_type == None,  # noqa: E711
                RecommendationFeedback.last_interaction_type.not_in(sorted(EXCLUDED_FROM_FEED))
            ))
            .order_by(
                RecommendationFeedback.reminder_countdown_hours.asc().nulls_first(),
                Recommendation.overall_weight.desc()
            )
            .limit(limit)
        )

        results = list(db_session.exec(statement).all())

        logger.info(
            "Personalized feed retrieved",
            extra=ctx.log_extra(category=category, count=len(results))
        )

        return results
