"""API v1 router configuration."""

from fastapi import APIRouter

from api.v1.routes.posts import router as posts_router

router = APIRouter()
router.include_router(posts_router)
