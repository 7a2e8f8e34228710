from __future__ import annotations
from fastapi import APIRouter, Depends, Query
from typing import List, Optional
from sqlmodel import Session

from config.database import get_session
from routes.dependencies import get_request_context
from routes.schemas import (
    FavoriteRead,
    FeedbackRequest,
    FeedbackResponse,
    RecalculateResponse,
    RecommendationRead,
)
from services.decay_service import DecayService
from services.favorites_service import FavoritesService
from services.feed_service import FeedService
from services.feedback_service import FeedbackService
from utils.request_context import RequestContext

router = APIRouter(prefix="/discover", tags=["discover"])


@router.post("/feedbacks", response_model=FeedbackResponse)
def submit_feedback(
    request: FeedbackRequest,
    ctx: RequestContext = Depends(get_request_context),
    db: Session = Depends(get_session)
):
    result = FeedbackService().handle_feedback(
        db_session=db,
        ctx=ctx,
        recommendation_id=request.recommendation_id,
        interaction_type=request.interaction_type,
        comment=request.comment
    )

    return FeedbackResponse(
        interaction_type=result.feedback.last_interaction_type,
        interaction_weight=result.feedback.interaction_weight,
        reminder_countdown_hours=result.feedback.reminder_countdown_hours,
        delta=result.delta
    )


@router.post("/recalculate", response_model=RecalculateResponse)
def recalculate_feed_countdown(
    ctx: RequestContext = Depends(get_request_context),
    db: Session = Depends(get_session)
):
    updated = DecayService().recalculate_feed_countdown(db_session=db, ctx=ctx)
    return RecalculateResponse(updated=updated)


@router.get("/feed", response_model=List[RecommendationRead])
def get_personalized_feed(
    category: Optional[str] = Query(None),
    limit: Optional[int] = Query(None),
    ctx: RequestContext = Depends(get_request_context),
    db: Session = Depends(get_session)
):
    items = FeedService().get_personalized_feed(db_session=db, ctx=ctx, category=category, limit=limit)
    return [RecommendationRead.model_validate(item) for item in items]


@router.get("/favorites", response_model=List[FavoriteRead])
def get_favorites(
    category: Optional[str] = Query(None),
    ctx: RequestContext = Depends(get_request_context),
    db: Session = Depends(get_session)
):
    favorites = FavoritesService().get_favorites(db_session=db, ctx=ctx, category=category)
    return [
        FavoriteRead(
            **RecommendationRead.model_validate(favorite.recommendation).model_dump(),
            interaction_weight=favorite.interaction_weight,
            expires_at=favorite.expires_at
        )
        for favorite in favorites
    ]
