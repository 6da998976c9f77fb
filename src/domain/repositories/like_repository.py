"""Like repository protocol."""

from typing import Protocol
from uuid import UUID

from domain.entities.like import Like


class ILikeRepository(Protocol):
    """Repository interface for Like rows."""

    async def exists(self, post_id: UUID, user_id: UUID) -> bool:
        """Check whether the user already liked the post."""
        ...

    async def create(self, like: Like) -> Like:
        """Insert a like.

        Raises:
            AlreadyLikedError: If the (post, user) pair already exists.
        """
        ...

    async def delete(self, post_id: UUID, user_id: UUID) -> bool:
        """Delete a like; returns False when there was nothing to delete."""
        ...

    async def count_for_posts(self, post_ids: list[UUID]) -> dict[UUID, int]:
        """Get like counts for multiple posts in a single query."""
        ...

    async def liked_post_ids(self, user_id: UUID, post_ids: list[UUID]) -> set[UUID]:
        """Get which of the given posts the user liked, in a single query."""
        ...
