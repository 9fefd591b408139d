"""Parsing helpers for plain-data command payloads."""

from datetime import datetime
from enum import StrEnum
from typing import TypeVar
from uuid import UUID

from drivetime_scheduler.clock import ensure_aware
from drivetime_scheduler.domain.errors import ValidationError

E = TypeVar("E", bound=StrEnum)


def parse_datetime(value: object, field: str, timezone_name: str) -> datetime | None:
    """Accept a datetime or an ISO-8601 string; naive values use the school zone."""
    if value is None:
        return None
    if isinstance(value, str):
        try:
            value = datetime.fromisoformat(value)
        except ValueError as exc:
            raise ValidationError(f"Invalid {field}: {value!r}.") from exc
    if not isinstance(value, datetime):
        raise ValidationError(f"Invalid {field}: {value!r}.")
    return ensure_aware(value, timezone_name)


def parse_uuid(value: object, field: str) -> UUID | None:
    if value is None or value == "":
        return None
    if isinstance(value, UUID):
        return value
    try:
        return UUID(str(value))
    except ValueError as exc:
        raise ValidationError(f"Invalid {field}: {value!r}.") from exc


def parse_enum(value: object, enum: type[E], field: str) -> E | None:
    if value is None:
        return None
    try:
        return enum(value)
    except ValueError as exc:
        allowed = ", ".join(member.value for member in enum)
        raise ValidationError(f"Invalid {field}: expected one of {allowed}.") from exc


def parse_limit(value: object, field: str) -> int | None:
    """Parse an optional non-negative integer; 0 and None both mean no limit."""
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise ValidationError(f"{field} must be a non-negative integer.")
    return value or None
