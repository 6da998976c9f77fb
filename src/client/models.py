"""Client-side views of the API's JSON payloads."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict


class Author(BaseModel):
    """Post author as embedded in feed items."""

    model_config = ConfigDict(frozen=True)

    id: str
    username: str


class FeedPost(BaseModel):
    """A post as the API returns it, annotated for the current user.

    Frozen: local changes go through ``model_copy(update=...)`` so the
    previous value stays intact for rollback.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    author_id: str
    content: str
    created_at: datetime
    updated_at: datetime
    is_edited: bool = False
    author: Author
    likes_count: int = 0
    is_liked: bool = False


class FeedPageData(BaseModel):
    """One page of ``GET /posts``.

    ``next_cursor`` stays the server's string so it round-trips exactly.
    """

    posts: list[FeedPost]
    has_more: bool
    next_cursor: str | None = None
