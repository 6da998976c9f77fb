"""Profile domain entity."""

from dataclasses import dataclass, field
from datetime import datetime
from uuid import UUID


@dataclass
class Profile:
    """Public profile of an identity (created lazily on first post)."""

    id: UUID
    username: str
    created_at: datetime = field(default_factory=datetime.utcnow)
