"""Shared test fixtures."""

import random
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from uuid import UUID

import pytest

from drivetime_scheduler.config import Settings
from drivetime_scheduler.containers import AppContainer, build_container
from drivetime_scheduler.domain.sessions import Session, SessionType
from drivetime_scheduler.domain.users import Role, TeacherConstraints, User
from drivetime_scheduler.domain.vehicles import Vehicle
from drivetime_scheduler.services.users import hash_password

# Wednesday, so "tomorrow" and "the day after" stay inside one ISO week.
START_OF_TEST = datetime(2026, 10, 14, 8, 0, tzinfo=UTC)


@dataclass
class FrozenClock:
    """Clock the tests move by hand."""

    now: datetime = START_OF_TEST

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


@dataclass
class Factory:
    """Builds users, vehicles and sessions directly through the container."""

    container: AppContainer
    clock: FrozenClock
    counter: list[int] = field(default_factory=lambda: [0])

    def user(
        self,
        role: Role,
        name: str | None = None,
        password: str = "password",
        constraints: TeacherConstraints | None = None,
    ) -> User:
        self.counter[0] += 1
        number = self.counter[0]
        user = User(
            id=UUID(int=number),
            name=name or f"{role.value.title()} {number}",
            email=f"{role.value.lower()}{number}@drivetime.test",
            password_hash=hash_password(password),
            role=role,
            is_active=True,
            registered_at=self.clock(),
            teacher_constraints=constraints or TeacherConstraints(),
        )
        self.container.user_service.repository.add(user)
        return user

    def admin(self) -> User:
        return self.user(Role.ADMIN, name="Admin User")

    def teacher(self, name: str | None = None, **kwargs) -> User:
        return self.user(Role.TEACHER, name=name, **kwargs)

    def learner(self, name: str | None = None) -> User:
        return self.user(Role.LEARNER, name=name)

    def vehicle(
        self, name: str = "Toyota Corolla", plate: str | None = None
    ) -> Vehicle:
        self.counter[0] += 1
        return self.container.vehicle_service.create_vehicle(
            {"name": name, "plate": plate or f"ABC-{self.counter[0]:03d}"},
            self.admin(),
        )

    def session(
        self,
        teacher: User,
        start: datetime,
        minutes: int = 60,
        session_type: SessionType = SessionType.PRACTICE,
        **payload: object,
    ) -> Session:
        return self.container.session_service.create(
            {
                "start": start,
                "end": start + timedelta(minutes=minutes),
                "type": session_type,
                **payload,
            },
            teacher,
        )

    def at(self, days: int = 1, hour: int = 10, minute: int = 0) -> datetime:
        """Return a wall-clock time ``days`` after the current test day."""
        base = self.clock().replace(hour=hour, minute=minute, second=0, microsecond=0)
        return base + timedelta(days=days)

    def store(self, session: Session) -> Session:
        """Overwrite a stored session, for states the public API cannot reach."""
        self.container.session_service.session_repository.save(session)
        return session


@pytest.fixture
def settings() -> Settings:
    return Settings(timezone="UTC", sweep_enabled=False)


@pytest.fixture
def clock() -> FrozenClock:
    return FrozenClock()


@pytest.fixture
def container(settings: Settings, clock: FrozenClock) -> AppContainer:
    return build_container(settings, clock=clock, rng=random.Random(7))


@pytest.fixture
def factory(container: AppContainer, clock: FrozenClock) -> Factory:
    return Factory(container=container, clock=clock)
