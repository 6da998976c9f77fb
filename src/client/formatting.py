"""Display helpers for post cards."""

from datetime import datetime, timezone

MINUTE = 60
HOUR = 60 * MINUTE
DAY = 24 * HOUR
MONTH = 30 * DAY


def _as_utc(value: datetime | str) -> datetime:
    if isinstance(value, str):
        value = datetime.fromisoformat(value.replace("Z", "+00:00"))
    # The API emits naive UTC timestamps
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _plural(count: int, unit: str) -> str:
    return f"{count} {unit}{'s' if count > 1 else ''} ago"


def format_relative_time(value: datetime | str, now: datetime | None = None) -> str:
    """Render a timestamp as "just now", "5 minutes ago", "2 days ago" ...

    Anything 30 days or older falls back to the calendar date.
    """
    then = _as_utc(value)
    current = _as_utc(now) if now is not None else datetime.now(timezone.utc)
    seconds = int((current - then).total_seconds())

    if seconds < MINUTE:
        return "just now"
    if seconds < HOUR:
        return _plural(seconds // MINUTE, "minute")
    if seconds < DAY:
        return _plural(seconds // HOUR, "hour")
    if seconds < MONTH:
        return _plural(seconds // DAY, "day")
    return then.date().isoformat()


def truncate_text(text: str, max_length: int) -> str:
    """Cut ``text`` to ``max_length`` characters, marking the cut with "..."."""
    if len(text) <= max_length:
        return text
    return text[:max_length] + "..."
