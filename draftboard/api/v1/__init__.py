"""API v1 module.

Contains all v1 API routes.
"""

from fastapi import APIRouter

from draftboard.api.v1.auth import router as auth_router
from draftboard.api.v1.images import router as images_router
from draftboard.api.v1.notifications import router as notifications_router
from draftboard.api.v1.posts import router as posts_router

router = APIRouter(prefix="/api/v1")
router.include_router(posts_router)
router.include_router(images_router)
router.include_router(notifications_router)
router.include_router(auth_router)

__all__ = ["router"]
