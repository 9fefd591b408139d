"""Teacher-defined booking limits."""

from dataclasses import dataclass
from datetime import date

from drivetime_scheduler.clock import to_local
from drivetime_scheduler.domain.errors import LimitExceededError
from drivetime_scheduler.domain.sessions import Session
from drivetime_scheduler.domain.users import User
from drivetime_scheduler.services.repositories import SessionRepository


@dataclass
class ConstraintEngine:
    """Enforces how often one learner may book with a teacher.

    Days and ISO weeks are evaluated in the school timezone.
    """

    session_repository: SessionRepository
    timezone: str = "UTC"

    def check_limits(self, teacher: User, learner: User, candidate: Session) -> None:
        """Raise ``LimitExceededError`` when booking ``candidate`` breaks a cap."""
        limits = teacher.teacher_constraints
        daily = limits.max_sessions_per_learner_daily
        weekly = limits.max_sessions_per_learner_weekly
        if not daily and not weekly:
            return

        booked_days = [
            self._local_day(session)
            for session in self.session_repository.list_for_learner(learner.id)
            if session.teacher_id == teacher.id
            and not session.is_terminal
            and session.id != candidate.id
        ]
        target_day = self._local_day(candidate)

        if daily:
            same_day = sum(1 for day in booked_days if day == target_day)
            if same_day >= daily:
                raise LimitExceededError(
                    f"You have reached the daily limit ({daily}) for booking "
                    f"sessions with {teacher.name}.",
                    kind="daily",
                )

        if weekly:
            target_week = _iso_week(target_day)
            same_week = sum(1 for day in booked_days if _iso_week(day) == target_week)
            if same_week >= weekly:
                raise LimitExceededError(
                    f"You have reached the weekly limit ({weekly}) for booking "
                    f"sessions with {teacher.name}.",
                    kind="weekly",
                )

    def _local_day(self, session: Session) -> date:
        return to_local(session.start, self.timezone).date()


def _iso_week(day: date) -> tuple[int, int]:
    iso = day.isocalendar()
    return iso.year, iso.week
