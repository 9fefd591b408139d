"""In-memory notification repository."""

from collections import deque
from dataclasses import dataclass, field, replace
from uuid import UUID

from drivetime_scheduler.domain.notifications import Notification
from drivetime_scheduler.services.notifications import NotificationRepository


@dataclass
class InMemoryNotificationRepository(NotificationRepository):
    """Newest-first notification store."""

    notifications: deque[Notification] = field(default_factory=deque)

    def prepend(self, notification: Notification) -> None:
        self.notifications.appendleft(notification)

    def list_for_user(self, user_id: UUID) -> list[Notification]:
        return [item for item in self.notifications if item.user_id == user_id]

    def mark_read(self, user_id: UUID) -> int:
        marked = 0
        updated: deque[Notification] = deque()
        for item in self.notifications:
            if item.user_id == user_id and not item.read:
                item = replace(item, read=True)
                marked += 1
            updated.append(item)
        self.notifications = updated
        return marked
