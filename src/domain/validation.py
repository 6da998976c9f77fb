"""Input validation shared by the HTTP layer and the services."""

from datetime import datetime, timezone
from typing import Any
from uuid import UUID

from core.exceptions import InvalidInputError
from domain.entities.feed import FeedFilter
from domain.entities.post import MAX_CONTENT_LENGTH


def validate_content(raw: Any) -> str:
    """Return trimmed post content or raise ``InvalidInputError``."""
    if not isinstance(raw, str):
        raise InvalidInputError("Post content must be a string", field="content")

    content = raw.strip()
    if not content:
        raise InvalidInputError("Post content cannot be empty", field="content")
    if len(content) > MAX_CONTENT_LENGTH:
        raise InvalidInputError(
            f"Post content cannot exceed {MAX_CONTENT_LENGTH} characters",
            field="content",
        )
    return content


def validate_post_id(raw: str) -> UUID:
    """Parse a post identifier, rejecting anything that is not a UUID."""
    try:
        return UUID(raw)
    except (TypeError, ValueError, AttributeError):
        raise InvalidInputError("Invalid post ID", field="id") from None


def validate_filter(raw: str | None) -> FeedFilter:
    if raw is None or raw == "":
        return FeedFilter.ALL
    try:
        return FeedFilter(raw)
    except ValueError:
        raise InvalidInputError("Filter must be 'all' or 'mine'", field="filter") from None


def validate_limit(raw: str | None, *, default: int, maximum: int) -> int:
    if raw is None or raw == "":
        return default
    try:
        limit = int(raw)
    except ValueError:
        raise InvalidInputError("Limit must be an integer", field="limit") from None
    if limit < 1 or limit > maximum:
        raise InvalidInputError(f"Limit must be between 1 and {maximum}", field="limit")
    return limit


def validate_cursor(raw: str | None) -> datetime | None:
    """Parse an ISO-8601 cursor into a naive UTC datetime."""
    if raw is None or raw.strip() == "":
        return None
    value = raw.strip()
    # fromisoformat on older interpreters rejects the trailing Z
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    try:
        cursor = datetime.fromisoformat(value)
    except ValueError:
        raise InvalidInputError("Cursor must be an ISO-8601 timestamp", field="cursor") from None
    if cursor.tzinfo is not None:
        cursor = cursor.astimezone(timezone.utc).replace(tzinfo=None)
    return cursor


def normalize_search(raw: str | None) -> str | None:
    if raw is None:
        return None
    term = raw.strip()
    return term or None
