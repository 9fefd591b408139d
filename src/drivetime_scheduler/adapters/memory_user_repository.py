"""In-memory user repository."""

from dataclasses import dataclass, field
from uuid import UUID

from drivetime_scheduler.domain.users import User
from drivetime_scheduler.services.repositories import UserRepository


@dataclass
class InMemoryUserRepository(UserRepository):
    """Dictionary-backed user store."""

    users: dict[UUID, User] = field(default_factory=dict)

    def add(self, user: User) -> None:
        self.users[user.id] = user

    def save(self, user: User) -> None:
        self.users[user.id] = user

    def get(self, user_id: UUID) -> User | None:
        return self.users.get(user_id)

    def get_by_email(self, email: str) -> User | None:
        wanted = email.strip().lower()
        for user in self.users.values():
            if user.email.lower() == wanted:
                return user
        return None

    def delete(self, user_id: UUID) -> None:
        self.users.pop(user_id, None)

    def list_all(self) -> list[User]:
        return list(self.users.values())
