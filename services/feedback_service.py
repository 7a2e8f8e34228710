from __future__ import annotations
from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Union
from uuid import UUID
from sqlalchemy import update
from sqlmodel import Session, select

from models import Recommendation, RecommendationFeedback, InteractionType
from services.errors import NotFoundError, ValidationError
from services.scoring import apply_interaction
from utils.clock import as_utc, utc_now
from utils.logger import setup_logger
from utils.request_context import RequestContext
from utils.transaction import scoped_transaction

logger = setup_logger(__name__)


@dataclass
class FeedbackResult:
    feedback: RecommendationFeedback
    old_weight: float
    delta: float


def parse_interaction_type(value: Union[InteractionType, str, None]) -> InteractionType:
    if value is None or value == "":
        raise ValidationError("interactionType is required")
    try:
        return InteractionType(value)
    except ValueError:
        allowed = ", ".join(t.value for t in InteractionType)
        raise ValidationError(f"interactionType must be one of: {allowed}")


class FeedbackService:
    """
    Applies a user's reaction to a recommendation.

    The feedback upsert and the recommendation's overall_weight delta are
    committed together or not at all. Sending the same reaction twice applies
    it twice (a second "like" adds another point); there is no deduplication,
    so a double-submitted request reinforces rather than being ignored.
    """

    def handle_feedback(
        self,
        db_session: Session,
        ctx: RequestContext,
        recommendation_id: UUID,
        interaction_type: Union[InteractionType, str, None],
        comment: Optional[str] = None,
        now: Optional[datetime] = None
    ) -> FeedbackResult:
        if not recommendation_id:
            raise ValidationError("recommendationId is required")

        interaction = parse_interaction_type(interaction_type)
        now = as_utc(now) if now else utc_now()

        if db_session.get(Recommendation, recommendation_id) is None:
            raise NotFoundError(f"Recommendation {recommendation_id} not found")

        existing = db_session.exec(
            select(RecommendationFeedback)
            .where(RecommendationFeedback.user_id == ctx.user_id)
            .where(RecommendationFeedback.recommendation_id == recommendation_id)
        ).first()

        old_weight = existing.interaction_weight if existing else 0.0
        score = apply_interaction(
            interaction,
            old_weight=old_weight,
            existing_countdown=existing.reminder_countdown_hours if existing else None
        )

        logger.debug(
            "Calculated weight delta for feedback",
            extra=ctx.log_extra(
                recommendation_id=str(recommendation_id),
                interaction_type=interaction.value,
                old_weight=old_weight,
                new_weight=score.weight,
                delta=score.delta,
                countdown_hours=score.countdown_hours
            )
        )

        with scoped_transaction(db_session, ctx, "handle_feedback"):
            feedback = existing or RecommendationFeedback(
                user_id=ctx.user_id,
                recommendation_id=recommendation_id,
                created_at=now
            )
            feedback.comment = comment
            feedback.interaction_weight = score.weight
            feedback.reminder_countdown_hours = score.countdown_hours
            feedback.last_interaction_type = interaction.value
            feedback.last_recalculated_at = now
            feedback.updated_at = now
            db_session.add(feedback)

            self._apply_overall_delta(db_session, recommendation_id, score.delta)

        db_session.refresh(feedback)

        if interaction == InteractionType.REPORT:
            self.on_report(ctx, feedback)

        logger.info(
            "Feedback processed",
            extra=ctx.log_extra(
                recommendation_id=str(recommendation_id),
                interaction_type=interaction.value,
                interaction_weight=feedback.interaction_weight,
                delta=score.delta,
                new_entry=existing is None
            )
        )

        return FeedbackResult(feedback=feedback, old_weight=old_weight, delta=score.delta)

    def _apply_overall_delta(self, db_session: Session, recommendation_id: UUID, delta: float) -> None:
        # Increment in SQL so concurrent deltas from other users are not lost
        result = db_session.execute(
            update(Recommendation)
            .where(Recommendation.id == recommendation_id)
            .values(overall_weight=Recommendation.overall_weight + delta)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            raise NotFoundError(f"Recommendation {recommendation_id} not found")

    def on_report(self, ctx: RequestContext, feedback: RecommendationFeedback) -> None:
        """
        Extension point for moderation. A report is scored exactly like a
        dislike; no moderation queue exists, so the default only logs it.
        """
        logger.warning(
            "Recommendation reported, no moderation queue configured",
            extra=ctx.log_extra(recommendation_id=str(feedback.recommendation_id))
        )
