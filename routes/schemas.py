from __future__ import annotations
from datetime import datetime
from typing import List, Optional
from uuid import UUID
from pydantic import BaseModel, ConfigDict, Field, HttpUrl
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """JSON bodies use camelCase keys, Python code uses snake_case."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class FeedbackRequest(CamelModel):
    recommendation_id: UUID
    interaction_type: Optional[str] = None  # validated by FeedbackService
    comment: Optional[str] = None


class FeedbackResponse(CamelModel):
    success: bool = True
    interaction_type: str
    interaction_weight: float
    reminder_countdown_hours: float
    delta: float


class RecalculateResponse(CamelModel):
    success: bool = True
    updated: int


class RecommendationRead(CamelModel):
    id: UUID
    user_id: str
    title: str
    description: Optional[str] = None
    category: str
    image_urls: List[str] = []
    is_public: bool
    overall_weight: float
    created_at: datetime
    updated_at: datetime


class FavoriteRead(RecommendationRead):
    interaction_weight: float
    expires_at: datetime


class CreateRecommendationRequest(CamelModel):
    title: str = Field(..., min_length=1)
    description: Optional[str] = None
    category: str = Field(..., min_length=1)
    image_urls: Optional[List[HttpUrl]] = Field(None, max_length=50)
    is_public: bool = True


class UpdateRecommendationRequest(CamelModel):
    title: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    category: Optional[str] = Field(None, min_length=1)
    image_urls: Optional[List[HttpUrl]] = Field(None, max_length=50)
    is_public: Optional[bool] = None


class CreateRecommendationResponse(CamelModel):
    success: bool = True
    id: UUID


class SuccessResponse(CamelModel):
    success: bool = True
