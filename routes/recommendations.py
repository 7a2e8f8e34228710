from __future__ import annotations
from fastapi import APIRouter, Depends, Response
from typing import List
from uuid import UUID
from sqlmodel import Session

from config.database import get_session
from routes.dependencies import get_request_context
from routes.schemas import (
    CreateRecommendationRequest,
    CreateRecommendationResponse,
    RecommendationRead,
    SuccessResponse,
    UpdateRecommendationRequest,
)
from services.recommendation_service import RecommendationService
from utils.request_context import RequestContext

router = APIRouter(prefix="/recommendations", tags=["recommendations"])


@router.post("", response_model=CreateRecommendationResponse, status_code=201)
def create_recommendation(
    request: CreateRecommendationRequest,
    ctx: RequestContext = Depends(get_request_context),
    db: Session = Depends(get_session)
):
    recommendation = RecommendationService().create_recommendation(
        db_session=db,
        ctx=ctx,
        title=request.title,
        category=request.category,
        description=request.description,
        image_urls=[str(url) for url in request.image_urls or []],
        is_public=request.is_public
    )
    return CreateRecommendationResponse(id=recommendation.id)


@router.get("/my", response_model=List[RecommendationRead])
def get_my_recommendations(
    ctx: RequestContext = Depends(get_request_context),
    db: Session = Depends(get_session)
):
    items = RecommendationService().get_my_recommendations(db_session=db, ctx=ctx)
    return [RecommendationRead.model_validate(item) for item in items]


@router.put("/{recommendation_id}", response_model=SuccessResponse)
def update_recommendation(
    recommendation_id: UUID,
    request: UpdateRecommendationRequest,
    ctx: RequestContext = Depends(get_request_context),
    db: Session = Depends(get_session)
):
    fields = request.model_dump(exclude_unset=True)
    if fields.get("image_urls") is not None:
        fields["image_urls"] = [str(url) for url in fields["image_urls"]]

    RecommendationService().update_recommendation(
        db_session=db,
        ctx=ctx,
        recommendation_id=recommendation_id,
        fields=fields
    )
    return SuccessResponse()


@router.delete("/{recommendation_id}", status_code=204)
def delete_recommendation(
    recommendation_id: UUID,
    ctx: RequestContext = Depends(get_request_context),
    db: Session = Depends(get_session)
):
    RecommendationService().delete_recommendation(db_session=db, ctx=ctx, recommendation_id=recommendation_id)
    return Response(status_code=204)
