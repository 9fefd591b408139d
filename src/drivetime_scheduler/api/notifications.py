"""Notification endpoints."""

from fastapi import APIRouter, Depends

from drivetime_scheduler.api.dependencies import current_user, get_container
from drivetime_scheduler.api.serializers import serialize_notification
from drivetime_scheduler.containers import AppContainer
from drivetime_scheduler.domain.users import User

router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.get("")
async def list_notifications(
    actor: User = Depends(current_user),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    """Return the caller's notifications, newest first."""
    service = container.notification_service
    items = service.list_for_user(actor.id)
    return {
        "unread": service.unread_count(actor.id),
        "notifications": [serialize_notification(item) for item in items],
    }


@router.post("/read")
async def mark_read(
    actor: User = Depends(current_user),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    marked = container.notification_service.mark_all_read(actor.id)
    return {"marked": marked}
