"""Notification service."""

from dataclasses import dataclass, field
from threading import RLock
from typing import Protocol
from uuid import UUID, uuid4

from drivetime_scheduler.clock import Clock, utc_now
from drivetime_scheduler.domain.notifications import Notification


class NotificationRepository(Protocol):
    """Persistence interface for notifications."""

    def prepend(self, notification: Notification) -> None:
        """Store a notification ahead of every older one."""

    def list_for_user(self, user_id: UUID) -> list[Notification]:
        """Return a user's notifications, newest first."""

    def mark_read(self, user_id: UUID) -> int:
        """Flag every unread notification of a user and return the count."""


@dataclass
class NotificationService:
    """Service for user-facing messages."""

    repository: NotificationRepository
    clock: Clock = utc_now
    lock: RLock = field(default_factory=RLock)

    def notify(self, user_id: UUID, message: str) -> Notification:
        """Queue a message for a user."""
        notification = Notification(
            id=uuid4(),
            user_id=user_id,
            message=message,
            read=False,
            timestamp=self.clock(),
        )
        with self.lock:
            self.repository.prepend(notification)
        return notification

    def notify_many(self, user_ids: tuple[UUID, ...], message: str) -> None:
        """Send the same message to every listed user."""
        for user_id in user_ids:
            self.notify(user_id, message)

    def list_for_user(self, user_id: UUID) -> list[Notification]:
        """Return a user's notifications."""
        return self.repository.list_for_user(user_id)

    def unread_count(self, user_id: UUID) -> int:
        """Return how many notifications the user has not read."""
        items = self.repository.list_for_user(user_id)
        return sum(1 for item in items if not item.read)

    def mark_all_read(self, user_id: UUID) -> int:
        """Mark all of a user's notifications as read."""
        with self.lock:
            return self.repository.mark_read(user_id)
