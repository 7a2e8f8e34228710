from __future__ import annotations
from typing import Optional
from datetime import datetime
from enum import Enum
from uuid import uuid4, UUID
from sqlmodel import SQLModel, Field
from sqlalchemy import DateTime, UniqueConstraint

from utils.clock import utc_now


class InteractionType(str, Enum):
    FAVORITE = "favorite"
    LIKE = "like"
    INDIFFERENT = "indifferent"
    DISLIKE = "dislike"
    REPORT = "report"  # scored like dislike, see FeedbackService.on_report


class RecommendationFeedback(SQLModel, table=True):
    """
    One user's standing preference for one recommendation.

    Written only by feedback ingestion and the decay pass; the feed and the
    favorites view read it.
    """
    __tablename__ = "recommendation_feedbacks"
    __table_args__ = (
        UniqueConstraint("user_id", "recommendation_id", name="uq_feedback_user_recommendation"),
    )

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    user_id: str = Field(index=True)
    recommendation_id: UUID = Field(foreign_key="recommendations.id", index=True)

    comment: Optional[str] = None

    interaction_weight: float = 0.0  # always within [-100, 100]
    reminder_countdown_hours: float = 0.0  # never negative
    last_interaction_type: Optional[str] = None

    last_recalculated_at: datetime = Field(default_factory=utc_now, sa_type=DateTime(timezone=True))
    created_at: datetime = Field(default_factory=utc_now, sa_type=DateTime(timezone=True))
    # Advanced by ingestion only, favorites expire relative to it
    updated_at: datetime = Field(default_factory=utc_now, sa_type=DateTime(timezone=True))
