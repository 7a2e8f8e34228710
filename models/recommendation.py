from __future__ import annotations
from typing import List, Optional
from datetime import datetime
from uuid import uuid4, UUID
from sqlmodel import SQLModel, Field
from sqlalchemy import Column, DateTime, JSON

from utils.clock import utc_now


class Recommendation(SQLModel, table=True):
    """A public catalog item that users react to from the discover feed."""
    __tablename__ = "recommendations"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    user_id: str = Field(index=True)  # owner, as issued by the auth service

    title: str
    description: Optional[str] = None
    category: str = Field(index=True)
    image_urls: List[str] = Field(default_factory=list, sa_column=Column(JSON))
    is_public: bool = Field(default=True, index=True)

    # Running sum of every user's weight delta on this item
    overall_weight: float = 0.0

    created_at: datetime = Field(default_factory=utc_now, sa_type=DateTime(timezone=True))
    updated_at: datetime = Field(default_factory=utc_now, sa_type=DateTime(timezone=True))
