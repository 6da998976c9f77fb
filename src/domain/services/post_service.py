"""Post service layer: create, read, edit and delete posts."""

from collections.abc import Callable
from typing import Optional
from uuid import UUID

import structlog

from core.exceptions import AuthorizationError, PostNotFoundError
from domain.entities.post import UNKNOWN_AUTHOR, FeedItem, Post
from domain.repositories.unit_of_work import IUnitOfWork
from domain.services.feed_service import annotate_posts
from domain.services.profile_service import ProfileService
from domain.validation import validate_content

logger = structlog.get_logger()


class PostService:
    """Service layer for Post business logic."""

    def __init__(
        self,
        uow_factory: Callable[[], IUnitOfWork],
        profile_service: Optional[ProfileService] = None,
    ) -> None:
        self._uow_factory = uow_factory
        self._profiles = profile_service or ProfileService()

    async def get(self, post_id: UUID, viewer_id: UUID) -> FeedItem:
        """Get a single post annotated for the viewer."""
        async with self._uow_factory() as uow:
            post = await uow.posts.get(post_id)
            if not post:
                raise PostNotFoundError(str(post_id))
            items = await annotate_posts(uow, [post], viewer_id)
            return items[0]

    async def create(self, user_id: UUID, email: str | None, content: str) -> FeedItem:
        """Create a post, provisioning the author's profile if needed."""
        content = validate_content(content)

        async with self._uow_factory() as uow:
            profile = await self._profiles.ensure_profile(uow, user_id, email)

            created = await uow.posts.create(Post(author_id=user_id, content=content))
            await uow.commit()

        logger.info("post_created", post_id=str(created.id), author_id=str(user_id))
        return FeedItem(
            post=created,
            author_username=profile.username or UNKNOWN_AUTHOR,
            likes_count=0,
            is_liked=False,
        )

    async def update(self, post_id: UUID, user_id: UUID, content: str) -> FeedItem:
        """Replace the content of a post owned by ``user_id``."""
        content = validate_content(content)

        async with self._uow_factory() as uow:
            post = await self._get_owned(uow, post_id, user_id)

            post.edit(content)
            updated = await uow.posts.update(post)
            await uow.commit()

            items = await annotate_posts(uow, [updated], user_id)

        logger.info("post_updated", post_id=str(post_id), author_id=str(user_id))
        return items[0]

    async def delete(self, post_id: UUID, user_id: UUID) -> None:
        """Delete a post owned by ``user_id``; its likes are removed with it."""
        async with self._uow_factory() as uow:
            await self._get_owned(uow, post_id, user_id)

            await uow.posts.delete(post_id)
            await uow.commit()

        logger.info("post_deleted", post_id=str(post_id), author_id=str(user_id))

    async def _get_owned(self, uow: IUnitOfWork, post_id: UUID, user_id: UUID) -> Post:
        post = await uow.posts.get(post_id)
        if not post:
            raise PostNotFoundError(str(post_id))
        if post.author_id != user_id:
            raise AuthorizationError("Access denied")
        return post
