"""Dependency injection factories for API v1."""

from functools import lru_cache
from typing import Callable

from domain.services.feed_service import FeedService
from domain.services.like_service import LikeService
from domain.services.post_service import PostService
from domain.services.profile_service import ProfileService
from infrastructure.database.session import async_session_factory
from infrastructure.database.sqlalchemy_uow import SQLAlchemyUnitOfWork


def get_uow_factory() -> Callable[[], SQLAlchemyUnitOfWork]:
    """Factory for creating Unit of Work instances."""

    def factory() -> SQLAlchemyUnitOfWork:
        return SQLAlchemyUnitOfWork(async_session_factory)

    return factory


@lru_cache
def get_feed_service() -> FeedService:
    """Get Feed service instance."""
    return FeedService(get_uow_factory())


@lru_cache
def get_post_service() -> PostService:
    """Get Post service instance."""
    return PostService(get_uow_factory(), profile_service=ProfileService())


@lru_cache
def get_like_service() -> LikeService:
    """Get Like service instance."""
    return LikeService(get_uow_factory())
