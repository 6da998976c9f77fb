"""Feed query parameters."""

from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum


class FeedFilter(StrEnum):
    """Which authors the feed includes."""

    ALL = "all"
    MINE = "mine"


@dataclass(frozen=True, slots=True)
class FeedQuery:
    """Normalized feed request: search term, cursor, filter and page size."""

    limit: int
    filter: FeedFilter = FeedFilter.ALL
    search: str | None = None
    cursor: datetime | None = None
