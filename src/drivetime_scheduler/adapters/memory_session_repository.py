"""In-memory session repository."""

from dataclasses import dataclass, field
from uuid import UUID

from drivetime_scheduler.domain.sessions import Session
from drivetime_scheduler.services.repositories import SessionRepository


@dataclass
class InMemorySessionRepository(SessionRepository):
    """Dictionary-backed session store; iteration follows creation order."""

    sessions: dict[UUID, Session] = field(default_factory=dict)

    def add(self, session: Session) -> None:
        self.sessions[session.id] = session

    def save(self, session: Session) -> None:
        self.sessions[session.id] = session

    def get(self, session_id: UUID) -> Session | None:
        return self.sessions.get(session_id)

    def delete(self, session_id: UUID) -> None:
        self.sessions.pop(session_id, None)

    def list_all(self) -> list[Session]:
        return list(self.sessions.values())

    def list_for_teacher(self, teacher_id: UUID) -> list[Session]:
        return [s for s in self.sessions.values() if s.teacher_id == teacher_id]

    def list_for_learner(self, learner_id: UUID) -> list[Session]:
        return [s for s in self.sessions.values() if learner_id in s.learner_ids]

    def list_for_vehicle(self, vehicle_id: UUID) -> list[Session]:
        return [s for s in self.sessions.values() if s.vehicle_id == vehicle_id]
