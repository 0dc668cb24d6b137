"""API routes and controllers for StreamGuide"""

from fastapi import APIRouter

from .channels import router as channels_router
from .guide import router as guide_router
from .health import router as health_router
from .programs import router as programs_router
from .videos import router as videos_router

# Create the main API router
api_router = APIRouter(prefix="/api")

api_router.include_router(channels_router, tags=["Channels"])
api_router.include_router(programs_router, tags=["Programs"])
api_router.include_router(guide_router, tags=["Guide"])
api_router.include_router(videos_router, tags=["Videos"])
api_router.include_router(health_router, tags=["Health"])

__all__ = ["api_router"]
