"""Wall-clock helpers shared by the services."""

from collections.abc import Callable
from datetime import UTC, datetime
from zoneinfo import ZoneInfo

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    """Return the current time as an aware UTC datetime."""
    return datetime.now(tz=UTC)


def ensure_aware(value: datetime, timezone_name: str) -> datetime:
    """Attach the school timezone to naive datetimes."""
    if value.tzinfo is None:
        return value.replace(tzinfo=ZoneInfo(timezone_name))
    return value


def to_local(value: datetime, timezone_name: str) -> datetime:
    """Convert an aware datetime into the school timezone."""
    return value.astimezone(ZoneInfo(timezone_name))


def format_when(value: datetime, timezone_name: str) -> str:
    """Render a timestamp for notification and audit text."""
    return to_local(value, timezone_name).strftime("%Y-%m-%d %H:%M")
