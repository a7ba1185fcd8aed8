from fastapi import APIRouter

from .score import score_router
from .health import health_router

router = APIRouter()

router.include_router(health_router, tags=["Health"])
router.include_router(score_router, tags=["Score"])
