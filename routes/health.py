from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlmodel import Session, select, func
from typing import Dict, Any
from datetime import datetime, timezone

from config.database import get_session
from models import Recommendation, RecommendationFeedback
from utils.logger import setup_logger

logger = setup_logger(__name__)

router = APIRouter(prefix="/health", tags=["health"])

SERVICE_NAME = "discover-api"


@router.get("")
def health_check():
    return {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "service": SERVICE_NAME
    }


@router.get("/ready")
def readiness_check(session: Session = Depends(get_session)):
    checks: Dict[str, Any] = {}
    ready = True

    try:
        recommendations = session.exec(select(func.count()).select_from(Recommendation)).one()
        feedbacks = session.exec(select(func.count()).select_from(RecommendationFeedback)).one()
        checks["database"] = {
            "status": "ready",
            "recommendations_count": recommendations,
            "feedbacks_count": feedbacks
        }
    except Exception as e:
        logger.error("Database readiness check failed", extra={"error": str(e)})
        checks["database"] = {"status": "not_ready", "error": str(e)}
        ready = False

    body = {
        "ready": ready,
        "checks": checks,
        "timestamp": datetime.now(timezone.utc).isoformat()
    }
    return JSONResponse(status_code=200 if ready else 503, content=body)


@router.get("/live")
def liveness_check():
    return {
        "alive": True,
        "timestamp": datetime.now(timezone.utc).isoformat()
    }
