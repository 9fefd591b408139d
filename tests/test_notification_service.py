"""Tests for notification service."""

from uuid import uuid4

from drivetime_scheduler.adapters.memory_notification_repository import (
    InMemoryNotificationRepository,
)
from drivetime_scheduler.services.notifications import NotificationService
from tests.conftest import FrozenClock


def test_notify_and_list_newest_first() -> None:
    clock = FrozenClock()
    service = NotificationService(InMemoryNotificationRepository(), clock=clock)
    user_id = uuid4()

    service.notify(user_id, "first")
    clock.advance(minutes=1)
    service.notify(user_id, "second")
    service.notify(uuid4(), "someone else")

    messages = [item.message for item in service.list_for_user(user_id)]
    assert messages == ["second", "first"]
    assert service.unread_count(user_id) == 2


def test_notify_many_sends_one_per_user() -> None:
    service = NotificationService(InMemoryNotificationRepository(), clock=FrozenClock())
    users = (uuid4(), uuid4())

    service.notify_many(users, "Session cancelled")

    for user_id in users:
        assert [n.message for n in service.list_for_user(user_id)] == [
            "Session cancelled"
        ]


def test_mark_all_read_only_touches_that_user() -> None:
    service = NotificationService(InMemoryNotificationRepository(), clock=FrozenClock())
    reader = uuid4()
    other = uuid4()
    service.notify(reader, "one")
    service.notify(reader, "two")
    service.notify(other, "three")

    marked = service.mark_all_read(reader)

    assert marked == 2
    assert service.unread_count(reader) == 0
    assert service.unread_count(other) == 1
    assert service.mark_all_read(reader) == 0
