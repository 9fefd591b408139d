"""Domain models for smart booking suggestions."""

from dataclasses import dataclass, field
from enum import StrEnum

from drivetime_scheduler.domain.sessions import Session

ANY_TEACHER = "any"


class TimeOfDay(StrEnum):
    """Preferred time band; hours are local to the school."""

    MORNING = "Morning"
    AFTERNOON = "Afternoon"
    EVENING = "Evening"
    ANY = "Any"


# Inclusive start hour, exclusive end hour.
TIME_BANDS: dict[TimeOfDay, tuple[int, int]] = {
    TimeOfDay.MORNING: (6, 12),
    TimeOfDay.AFTERNOON: (12, 17),
    TimeOfDay.EVENING: (17, 24),
}


@dataclass(frozen=True)
class SmartBookingPreferences:
    """What a learner asks the matcher for.

    ``preferred_days`` uses 0 for Sunday through 6 for Saturday.
    """

    session_count: int
    preferred_time: TimeOfDay = TimeOfDay.ANY
    preferred_teacher_id: str = ANY_TEACHER
    preferred_days: frozenset[int] = field(default_factory=frozenset)


@dataclass(frozen=True)
class ScoredSession:
    """A candidate session with its preference score."""

    session: Session
    score: float
    match_reasons: tuple[str, ...]
