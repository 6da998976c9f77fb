"""Post domain entities and derived feed views."""

from dataclasses import dataclass, field
from datetime import datetime
from uuid import UUID, uuid4

MAX_CONTENT_LENGTH = 280
UNKNOWN_AUTHOR = "Unknown"


@dataclass
class Post:
    """Domain entity for a short text post."""

    author_id: UUID
    content: str
    id: UUID = field(default_factory=uuid4)
    created_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: datetime | None = None
    author_username: str | None = None

    def __post_init__(self) -> None:
        """A fresh post has identical created/updated timestamps."""
        if self.updated_at is None or self.updated_at < self.created_at:
            self.updated_at = self.created_at

    @property
    def is_edited(self) -> bool:
        return self.updated_at != self.created_at

    def edit(self, content: str) -> None:
        """Replace the content and bump ``updated_at``."""
        self.content = content
        self.updated_at = datetime.utcnow()


@dataclass(frozen=True, slots=True)
class FeedItem:
    """A post annotated relative to the requesting identity."""

    post: Post
    author_username: str
    likes_count: int
    is_liked: bool


@dataclass(frozen=True, slots=True)
class FeedPage:
    """One page of the feed plus the keyset cursor for the next one."""

    items: list[FeedItem]
    has_more: bool
    next_cursor: datetime | None
