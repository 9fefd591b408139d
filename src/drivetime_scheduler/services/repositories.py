"""Persistence interfaces for the entities the services share."""

from typing import Protocol
from uuid import UUID

from drivetime_scheduler.domain.sessions import Session
from drivetime_scheduler.domain.users import User
from drivetime_scheduler.domain.vehicles import Vehicle


class UserRepository(Protocol):
    """Persistence interface for user accounts."""

    def add(self, user: User) -> None:
        """Store a new user."""

    def save(self, user: User) -> None:
        """Replace a stored user with an updated record."""

    def get(self, user_id: UUID) -> User | None:
        """Return a user by id, if present."""

    def get_by_email(self, email: str) -> User | None:
        """Return a user by email, compared case-insensitively."""

    def delete(self, user_id: UUID) -> None:
        """Remove a user."""

    def list_all(self) -> list[User]:
        """Return every user in registration order."""


class VehicleRepository(Protocol):
    """Persistence interface for vehicles."""

    def add(self, vehicle: Vehicle) -> None:
        """Store a new vehicle."""

    def save(self, vehicle: Vehicle) -> None:
        """Replace a stored vehicle with an updated record."""

    def get(self, vehicle_id: UUID) -> Vehicle | None:
        """Return a vehicle by id, if present."""

    def get_by_plate(self, plate: str) -> Vehicle | None:
        """Return a vehicle by plate, compared case-insensitively."""

    def delete(self, vehicle_id: UUID) -> None:
        """Remove a vehicle."""

    def list_all(self) -> list[Vehicle]:
        """Return every vehicle."""


class SessionRepository(Protocol):
    """Persistence interface for sessions."""

    def add(self, session: Session) -> None:
        """Store a new session."""

    def save(self, session: Session) -> None:
        """Replace a stored session with an updated record."""

    def get(self, session_id: UUID) -> Session | None:
        """Return a session by id, if present."""

    def delete(self, session_id: UUID) -> None:
        """Remove a session."""

    def list_all(self) -> list[Session]:
        """Return every session in creation order."""

    def list_for_teacher(self, teacher_id: UUID) -> list[Session]:
        """Return the sessions a teacher owns."""

    def list_for_learner(self, learner_id: UUID) -> list[Session]:
        """Return the sessions a learner is booked on."""

    def list_for_vehicle(self, vehicle_id: UUID) -> list[Session]:
        """Return the sessions referencing a vehicle."""
