"""Smart booking: preference scoring and greedy non-overlapping selection."""

import random
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from uuid import UUID

from drivetime_scheduler.clock import Clock, to_local, utc_now
from drivetime_scheduler.domain.booking import (
    ANY_TEACHER,
    TIME_BANDS,
    ScoredSession,
    SmartBookingPreferences,
    TimeOfDay,
)
from drivetime_scheduler.domain.errors import NotFoundError, ValidationError
from drivetime_scheduler.domain.sessions import (
    Session,
    SessionStatus,
    SessionType,
    intervals_overlap,
)
from drivetime_scheduler.services.repositories import (
    SessionRepository,
    UserRepository,
)

MAX_SESSION_COUNT = 5
TEACHER_WEIGHT = 30
DAY_WEIGHT = 20
TIME_WEIGHT = 50
JITTER = 10.0


@dataclass
class SmartBookingMatcher:
    """Suggests practice sessions that fit a learner's preferences."""

    session_repository: SessionRepository
    user_repository: UserRepository
    timezone: str = "UTC"
    window: timedelta = timedelta(days=7)
    clock: Clock = utc_now
    rng: random.Random = field(default_factory=random.Random)

    def suggest(
        self,
        learner_id: UUID,
        preferences: SmartBookingPreferences,
        now: datetime | None = None,
    ) -> list[ScoredSession]:
        """Return up to ``session_count`` non-overlapping sessions, best first."""
        _validate(preferences)
        if self.user_repository.get(learner_id) is None:
            raise NotFoundError("Learner not found.")
        now = now or self.clock()
        horizon = now + self.window

        bookings = [
            session
            for session in self.session_repository.list_for_learner(learner_id)
            if not session.is_terminal
        ]
        scored = [
            self._score(session, preferences)
            for session in self.session_repository.list_all()
            if session.type == SessionType.PRACTICE
            and session.status == SessionStatus.AVAILABLE
            and now < session.start <= horizon
            and not _overlaps_any(session, bookings)
        ]
        scored.sort(key=lambda item: item.score, reverse=True)

        selected: list[ScoredSession] = []
        for candidate in scored:
            if len(selected) >= preferences.session_count:
                break
            if _overlaps_any(candidate.session, [item.session for item in selected]):
                continue
            selected.append(candidate)
        return selected

    def _score(
        self, session: Session, preferences: SmartBookingPreferences
    ) -> ScoredSession:
        local_start = to_local(session.start, self.timezone)
        score = 0.0
        reasons: list[str] = []

        if (
            preferences.preferred_teacher_id != ANY_TEACHER
            and str(session.teacher_id) == preferences.preferred_teacher_id
        ):
            score += TEACHER_WEIGHT
            reasons.append("Preferred Teacher")

        if _sunday_based_weekday(local_start) in preferences.preferred_days:
            score += DAY_WEIGHT
            reasons.append("Preferred Day")

        band = TIME_BANDS.get(preferences.preferred_time)
        if band is not None and band[0] <= local_start.hour < band[1]:
            score += TIME_WEIGHT
            reasons.append(f"Matches {preferences.preferred_time} preference")

        score += self.rng.uniform(0, JITTER)
        return ScoredSession(session=session, score=score, match_reasons=tuple(reasons))


def _validate(preferences: SmartBookingPreferences) -> None:
    if not 1 <= preferences.session_count <= MAX_SESSION_COUNT:
        raise ValidationError(
            f"session_count must be between 1 and {MAX_SESSION_COUNT}."
        )
    if any(day not in range(7) for day in preferences.preferred_days):
        raise ValidationError("preferred_days must contain values from 0 to 6.")
    if preferences.preferred_time not in set(TimeOfDay):
        raise ValidationError("Unknown preferred_time.")


def _sunday_based_weekday(value: datetime) -> int:
    """Map Python's Monday=0 weekday onto 0=Sunday .. 6=Saturday."""
    return (value.weekday() + 1) % 7


def _overlaps_any(session: Session, others: list[Session]) -> bool:
    return any(
        intervals_overlap(other.start, other.end, session.start, session.end)
        for other in others
    )
