"""Time helpers shared by the registry and the presentation layer."""

from datetime import datetime, timezone
from typing import Callable

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    """Current time as a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


def isoformat_z(dt: datetime) -> str:
    """Format a datetime as ISO-8601 UTC with milliseconds and a Z suffix.

    Args:
        dt: Datetime to format (naive values are taken as UTC)

    Returns:
        String like 2024-01-01T12:00:00.000Z
    """
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")
