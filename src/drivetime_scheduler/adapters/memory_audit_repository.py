"""In-memory audit repository."""

from collections import deque
from dataclasses import dataclass, field
from uuid import UUID

from drivetime_scheduler.domain.audit import AuditLogEntry
from drivetime_scheduler.services.audit import AuditRepository


@dataclass
class InMemoryAuditRepository(AuditRepository):
    """Newest-first audit store."""

    entries: deque[AuditLogEntry] = field(default_factory=deque)

    def prepend(self, entry: AuditLogEntry) -> None:
        self.entries.appendleft(entry)

    def list_for_session(self, session_id: UUID) -> list[AuditLogEntry]:
        return [entry for entry in self.entries if entry.session_id == session_id]

    def delete_for_session(self, session_id: UUID) -> int:
        kept = deque(entry for entry in self.entries if entry.session_id != session_id)
        removed = len(self.entries) - len(kept)
        self.entries = kept
        return removed
