from __future__ import annotations
from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional
from sqlmodel import Session, select

from models import Recommendation, RecommendationFeedback, InteractionType
from services.scoring import favorite_expires_at
from utils.clock import as_utc, utc_now
from utils.logger import setup_logger
from utils.request_context import RequestContext

logger = setup_logger(__name__)


@dataclass
class FavoriteItem:
    recommendation: Recommendation
    interaction_weight: float
    expires_at: datetime


class FavoritesService:
    """Favorites stay listed for a window that grows with their weight."""

    def get_favorites(
        self,
        db_session: Session,
        ctx: RequestContext,
        category: Optional[str] = None,
        now: Optional[datetime] = None
    ) -> List[FavoriteItem]:
        now = as_utc(now) if now else utc_now()

        statement = (
            select(Recommendation, RecommendationFeedback)
            .join(RecommendationFeedback, RecommendationFeedback.recommendation_id == Recommendation.id)
            .where(RecommendationFeedback.user_id == ctx.user_id)
            .where(RecommendationFeedback.last_interaction_type == InteractionType.FAVORITE.value)
        )
        if category:
            statement = statement.where(Recommendation.category == category)

        favorites: List[FavoriteItem] = []
        for recommendation, feedback in db_session.exec(statement).all():
            expires_at = favorite_expires_at(as_utc(feedback.updated_at), feedback.interaction_weight)
            if expires_at is None or expires_at < now:
                continue
            favorites.append(FavoriteItem(
                recommendation=recommendation,
                interaction_weight=feedback.interaction_weight,
                expires_at=expires_at
            ))

        favorites.sort(key=lambda f: (-f.interaction_weight, f.recommendation.title))

        logger.info(
            "Fetched user favorites",
            extra=ctx.log_extra(category=category, count=len(favorites))
        )

        return favorites
