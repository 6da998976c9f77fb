"""Post repository protocol."""

from datetime import datetime
from typing import Protocol
from uuid import UUID

from domain.entities.post import Post


class IPostRepository(Protocol):
    """Repository interface for Post entities."""

    async def get(self, id: UUID) -> Post | None:
        """Get a post by ID (with author username when resolvable)."""
        ...

    async def list_page(
        self,
        *,
        fetch: int,
        author_id: UUID | None = None,
        search: str | None = None,
        before: datetime | None = None,
    ) -> list[Post]:
        """Get up to ``fetch`` posts, newest first.

        ``author_id`` restricts to one author, ``search`` is a case-insensitive
        substring match on content and ``before`` keeps only posts created
        strictly earlier than the given timestamp.
        """
        ...

    async def create(self, post: Post) -> Post:
        """Create a new post."""
        ...

    async def update(self, post: Post) -> Post:
        """Persist content and updated_at of an existing post."""
        ...

    async def delete(self, id: UUID) -> bool:
        """Delete a post (likes cascade) and return success status."""
        ...
