"""Like domain entity."""

from dataclasses import dataclass, field
from datetime import datetime
from uuid import UUID


@dataclass(frozen=True)
class Like:
    """A single (post, user) like. The pair is the natural key."""

    post_id: UUID
    user_id: UUID
    created_at: datetime = field(default_factory=datetime.utcnow)
