"""Like service layer."""

from collections.abc import Callable
from uuid import UUID

from core.exceptions import AlreadyLikedError, PostNotFoundError
from domain.entities.like import Like
from domain.repositories.unit_of_work import IUnitOfWork


class LikeService:
    """Service layer for liking and unliking posts."""

    def __init__(self, uow_factory: Callable[[], IUnitOfWork]) -> None:
        self._uow_factory = uow_factory

    async def like(self, post_id: UUID, user_id: UUID) -> None:
        """Like a post.

        Liking twice is a precondition failure, not a no-op. The lookup below
        is only a fast path; the (post_id, user_id) primary key decides races
        and the repository reports a lost race as ``AlreadyLikedError`` too.
        """
        async with self._uow_factory() as uow:
            post = await uow.posts.get(post_id)
            if not post:
                raise PostNotFoundError(str(post_id))

            if await uow.likes.exists(post_id, user_id):
                raise AlreadyLikedError(str(post_id))

            await uow.likes.create(Like(post_id=post_id, user_id=user_id))
            await uow.commit()

    async def unlike(self, post_id: UUID, user_id: UUID) -> None:
        """Remove the caller's like; succeeds even when there is none."""
        async with self._uow_factory() as uow:
            await uow.likes.delete(post_id, user_id)
            await uow.commit()
