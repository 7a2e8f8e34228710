from __future__ import annotations
from typing import Any, Dict, List, Optional
from uuid import UUID
from sqlalchemy import delete
from sqlmodel import Session, select

from models import Recommendation, RecommendationFeedback
from services.errors import ForbiddenError, NotFoundError, ValidationError
from utils.clock import utc_now
from utils.logger import setup_logger
from utils.request_context import RequestContext
from utils.transaction import scoped_transaction

logger = setup_logger(__name__)

MAX_IMAGE_URLS = 50

UPDATABLE_FIELDS = {"title", "description", "category", "image_urls", "is_public"}


class RecommendationService:
    """Owner-side management of catalog items. overall_weight is never set here."""

    def create_recommendation(
        self,
        db_session: Session,
        ctx: RequestContext,
        title: str,
        category: str,
        description: Optional[str] = None,
        image_urls: Optional[List[str]] = None,
        is_public: bool = True
    ) -> Recommendation:
        if not title or not title.strip():
            raise ValidationError("title is required")

        if not category or not category.strip():
            raise ValidationError("category is required")

        image_urls = list(image_urls or [])
        if len(image_urls) > MAX_IMAGE_URLS:
            raise ValidationError(f"at most {MAX_IMAGE_URLS} image urls are allowed")

        recommendation = Recommendation(
            user_id=ctx.user_id,
            title=title,
            description=description,
            category=category,
            image_urls=image_urls,
            is_public=is_public
        )

        with scoped_transaction(db_session, ctx, "create_recommendation"):
            db_session.add(recommendation)

        db_session.refresh(recommendation)

        logger.info(
            "Recommendation created",
            extra=ctx.log_extra(recommendation_id=str(recommendation.id), category=category)
        )

        return recommendation

    def update_recommendation(
        self,
        db_session: Session,
        ctx: RequestContext,
        recommendation_id: UUID,
        fields: Dict[str, Any]
    ) -> Recommendation:
        recommendation = self._get_owned(db_session, ctx, recommendation_id)

        changes = {key: value for key, value in fields.items() if key in UPDATABLE_FIELDS}
        if not changes:
            raise ValidationError("No fields to update")

        for key in ("title", "category"):
            if key in changes and (changes[key] is None or not str(changes[key]).strip()):
                raise ValidationError(f"{key} cannot be empty")

        if "image_urls" in changes:
            changes["image_urls"] = list(changes["image_urls"] or [])
            if len(changes["image_urls"]) > MAX_IMAGE_URLS:
                raise ValidationError(f"at most {MAX_IMAGE_URLS} image urls are allowed")

        with scoped_transaction(db_session, ctx, "update_recommendation"):
            for key, value in changes.items():
                setattr(recommendation, key, value)
            recommendation.updated_at = utc_now()
            db_session.add(recommendation)

        db_session.refresh(recommendation)

        logger.info(
            "Recommendation updated",
            extra=ctx.log_extra(recommendation_id=str(recommendation_id), fields=sorted(changes))
        )

        return recommendation

    def delete_recommendation(
        self,
        db_session: Session,
        ctx: RequestContext,
        recommendation_id: UUID
    ) -> None:
        recommendation = self._get_owned(db_session, ctx, recommendation_id)

        with scoped_transaction(db_session, ctx, "delete_recommendation"):
            db_session.execute(
                delete(RecommendationFeedback)
                .where(RecommendationFeedback.recommendation_id == recommendation_id)
            )
            db_session.delete(recommendation)

        logger.info(
            "Recommendation deleted",
            extra=ctx.log_extra(recommendation_id=str(recommendation_id))
        )

    def get_my_recommendations(self, db_session: Session, ctx: RequestContext) -> List[Recommendation]:
        results = list(db_session.exec(
            select(Recommendation)
            .where(Recommendation.user_id == ctx.user_id)
            .order_by(Recommendation.created_at.desc())
        ).all())

        logger.info("Fetched own recommendations", extra=ctx.log_extra(count=len(results)))

        return results

    def _get_owned(self, db_session: Session, ctx: RequestContext, recommendation_id: UUID) -> Recommendation:
        recommendation = db_session.get(Recommendation, recommendation_id)
        if recommendation is None:
            raise NotFoundError("Recommendation not found")

        if recommendation.user_id != ctx.user_id:
            logger.warning(
                "Forbidden attempt to modify recommendation",
                extra=ctx.log_extra(recommendation_id=str(recommendation_id))
            )
            raise ForbiddenError("Forbidden")

        return recommendation
