"""Domain models for teaching sessions."""

from dataclasses import dataclass, replace
from datetime import datetime
from enum import StrEnum
from uuid import UUID


class SessionStatus(StrEnum):
    """States of the session lifecycle."""

    AVAILABLE = "Available"
    BOOKED = "Booked"
    FULL = "Full"
    IN_PROGRESS = "In Progress"
    FINISHED = "Finished"
    CANCELLED_BY_LEARNER = "Cancelled (Learner)"
    CANCELLED_BY_TEACHER = "Cancelled (Teacher)"
    CANCELLED_UNBOOKED = "Cancelled (Unbooked)"


class SessionType(StrEnum):
    """Kinds of lessons a teacher can offer."""

    PRACTICE = "Practice"
    THEORY = "Theory"


TERMINAL_STATUSES = frozenset(
    {
        SessionStatus.FINISHED,
        SessionStatus.CANCELLED_BY_LEARNER,
        SessionStatus.CANCELLED_BY_TEACHER,
        SessionStatus.CANCELLED_UNBOOKED,
    }
)

# Statuses under which a session holds its vehicle.
VEHICLE_HOLDING_STATUSES = frozenset(
    {SessionStatus.BOOKED, SessionStatus.IN_PROGRESS}
)


def intervals_overlap(
    a_start: datetime, a_end: datetime, b_start: datetime, b_end: datetime
) -> bool:
    """Return True when two half-open intervals share any instant."""
    return max(a_start, b_start) < min(a_end, b_end)


@dataclass(frozen=True)
class Session:
    """A scheduled teaching slot."""

    id: UUID
    teacher_id: UUID
    teacher_name: str
    learner_ids: tuple[UUID, ...]
    learner_names: tuple[str, ...]
    start: datetime
    end: datetime
    status: SessionStatus
    created_at: datetime
    cancellation_reason: str | None
    requires_vehicle: bool
    vehicle_id: UUID | None
    type: SessionType
    capacity: int | None = None

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATUSES

    @property
    def seat_limit(self) -> int:
        """Maximum number of learners; practice sessions are one-on-one."""
        if self.type == SessionType.PRACTICE:
            return 1
        return self.capacity or 0

    def overlaps(self, start: datetime, end: datetime) -> bool:
        return intervals_overlap(self.start, self.end, start, end)

    def has_learner(self, learner_id: UUID) -> bool:
        return learner_id in self.learner_ids

    def with_learner(self, learner_id: UUID, learner_name: str) -> "Session":
        """Return a copy with the learner appended and the status recomputed."""
        if self.type == SessionType.PRACTICE:
            return replace(
                self,
                learner_ids=(learner_id,),
                learner_names=(learner_name,),
                status=SessionStatus.BOOKED,
            )
        learner_ids = (*self.learner_ids, learner_id)
        learner_names = (*self.learner_names, learner_name)
        status = (
            SessionStatus.FULL
            if len(learner_ids) == self.seat_limit
            else SessionStatus.BOOKED
        )
        return replace(
            self, learner_ids=learner_ids, learner_names=learner_names, status=status
        )

    def without_learner(self, learner_id: UUID) -> "Session":
        """Return a copy with the learner removed and the seat reopened.

        Practice sessions revert to Available; theory sessions drop from Full
        to Booked, or to Available once nobody is left. A session already in
        progress keeps its status.
        """
        index = self.learner_ids.index(learner_id)
        learner_ids = self.learner_ids[:index] + self.learner_ids[index + 1 :]
        learner_names = self.learner_names[:index] + self.learner_names[index + 1 :]
        if self.status == SessionStatus.IN_PROGRESS:
            status = self.status
        elif self.type == SessionType.PRACTICE or not learner_ids:
            status = SessionStatus.AVAILABLE
        elif self.status == SessionStatus.FULL:
            status = SessionStatus.BOOKED
        else:
            status = self.status
        return replace(
            self,
            learner_ids=learner_ids,
            learner_names=learner_names,
            status=status,
            cancellation_reason=None,
        )

    def renamed(self, user_id: UUID, name: str) -> "Session":
        """Return a copy with the cached participant names refreshed."""
        teacher_name = name if self.teacher_id == user_id else self.teacher_name
        learner_names = tuple(
            name if learner_id == user_id else learner_name
            for learner_id, learner_name in zip(
                self.learner_ids, self.learner_names, strict=True
            )
        )
        return replace(self, teacher_name=teacher_name, learner_names=learner_names)
