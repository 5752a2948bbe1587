"""
API v1 Router
"""

from fastapi import APIRouter

from fanhub.api.v1 import admin, auth, comments, fanworks, media, tags, users

router = APIRouter()

# Include all endpoint routers
router.include_router(admin.router)
router.include_router(auth.router)
router.include_router(fanworks.router)
router.include_router(comments.router)
router.include_router(users.router)
router.include_router(tags.router)
router.include_router(media.router)

__all__ = ["router"]
