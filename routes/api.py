from fastapi import APIRouter

from routes.discover import router as discover_router
from routes.health import router as health_router
from routes.recommendations import router as recommendations_router


router = APIRouter()

router.include_router(health_router)
router.include_router(discover_router)
router.include_router(recommendations_router)
