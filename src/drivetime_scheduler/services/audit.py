"""Audit logging service."""

from dataclasses import dataclass
from typing import Protocol
from uuid import UUID, uuid4

from drivetime_scheduler.clock import Clock, utc_now
from drivetime_scheduler.domain.audit import (
    SYSTEM_ACTOR_NAME,
    AuditLogEntry,
    AuditMetadata,
    SessionAction,
)
from drivetime_scheduler.domain.users import User


class AuditRepository(Protocol):
    """Persistence interface for audit entries."""

    def prepend(self, entry: AuditLogEntry) -> None:
        """Store an entry ahead of every older one."""

    def list_for_session(self, session_id: UUID) -> list[AuditLogEntry]:
        """Return the entries recorded for a session, newest first."""

    def delete_for_session(self, session_id: UUID) -> int:
        """Drop every entry of a session and return how many were removed."""


@dataclass
class AuditService:
    """Append-only log of state-changing session actions."""

    repository: AuditRepository
    clock: Clock = utc_now

    def append(
        self,
        session_id: UUID,
        action: SessionAction,
        actor: User | None,
        details: str,
        metadata: AuditMetadata | None = None,
    ) -> AuditLogEntry:
        """Record an action; ``actor=None`` stands for the system."""
        entry = AuditLogEntry(
            id=uuid4(),
            session_id=session_id,
            action=action,
            timestamp=self.clock(),
            actor_name=actor.name if actor is not None else SYSTEM_ACTOR_NAME,
            details=details,
            metadata=metadata,
        )
        self.repository.prepend(entry)
        return entry

    def get_log(self, session_id: UUID) -> list[AuditLogEntry]:
        """Return a session's history sorted newest first."""
        entries = self.repository.list_for_session(session_id)
        return sorted(entries, key=lambda entry: entry.timestamp, reverse=True)

    def purge(self, session_id: UUID) -> int:
        """Remove the history of a session that no longer exists."""
        return self.repository.delete_for_session(session_id)
