"""Domain models for the session audit trail."""

from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum
from uuid import UUID


class SessionAction(StrEnum):
    """State-changing actions recorded against a session."""

    CREATE = "CREATE"
    BOOK = "BOOK"
    CANCEL = "CANCEL"
    RESCHEDULE = "RESCHEDULE"
    VEHICLE_CHANGE = "VEHICLE_CHANGE"
    STATUS_CHANGE = "STATUS_CHANGE"
    FINISH = "FINISH"


SYSTEM_ACTOR_NAME = "System"


@dataclass(frozen=True)
class AuditMetadata:
    """Structured before/after values attached to an entry."""

    old_start: datetime | None = None
    new_start: datetime | None = None
    old_vehicle: str | None = None
    new_vehicle: str | None = None
    reason: str | None = None


@dataclass(frozen=True)
class AuditLogEntry:
    """Immutable record of one action on a session."""

    id: UUID
    session_id: UUID
    action: SessionAction
    timestamp: datetime
    actor_name: str
    details: str
    metadata: AuditMetadata | None = None
