"""Session endpoints."""

from uuid import UUID

from fastapi import APIRouter, Depends, Response, status

from drivetime_scheduler.api.dependencies import current_user, get_container
from drivetime_scheduler.api.schemas import (
    CancelRequest,
    SessionCreateRequest,
    SessionUpdateRequest,
    SmartBookingRequest,
)
from drivetime_scheduler.api.serializers import (
    serialize_log,
    serialize_scored,
    serialize_session,
)
from drivetime_scheduler.containers import AppContainer
from drivetime_scheduler.domain.booking import SmartBookingPreferences
from drivetime_scheduler.domain.errors import AuthorizationError
from drivetime_scheduler.domain.users import Role, User
from drivetime_scheduler.services.permissions import require_role

router = APIRouter(tags=["sessions"])


@router.get("/sessions")
async def list_sessions(
    mine: bool = False,
    actor: User = Depends(current_user),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    """Return all sessions, or only the caller's with ``?mine=true``."""
    service = container.session_service
    sessions = service.list_for_user(actor) if mine else service.list_sessions()
    return {"sessions": [serialize_session(session) for session in sessions]}


@router.post("/sessions", status_code=status.HTTP_201_CREATED)
async def create_session(
    body: SessionCreateRequest,
    actor: User = Depends(current_user),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    """Create a session as the calling teacher."""
    session = container.session_service.create(body.model_dump(), actor)
    return serialize_session(session)


@router.post("/sessions/sweep")
async def run_sweep(
    actor: User = Depends(current_user),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    """Run the status sweep immediately."""
    require_role(actor, Role.ADMIN, "Only admins can trigger the status sweep.")
    report = container.scheduler.run_once()
    return {"changed": report.changed, "transitions": len(report.transitions)}


@router.get("/sessions/{session_id}")
async def get_session(
    session_id: UUID,
    actor: User = Depends(current_user),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    return serialize_session(container.session_service.get_session(session_id))


@router.patch("/sessions/{session_id}")
async def update_session(
    session_id: UUID,
    body: SessionUpdateRequest,
    actor: User = Depends(current_user),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    """Apply the fields present in the body."""
    payload = body.model_dump(exclude_unset=True)
    session = container.session_service.update(session_id, payload, actor)
    return serialize_session(session)


@router.delete("/sessions/{session_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_session(
    session_id: UUID,
    actor: User = Depends(current_user),
    container: AppContainer = Depends(get_container),
) -> Response:
    container.session_service.delete(session_id, actor)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/sessions/{session_id}/book")
async def book_session(
    session_id: UUID,
    actor: User = Depends(current_user),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    return serialize_session(container.session_service.book(session_id, actor))


@router.post("/sessions/{session_id}/cancel")
async def cancel_session(
    session_id: UUID,
    body: CancelRequest,
    actor: User = Depends(current_user),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    session = container.session_service.cancel(session_id, actor, body.reason)
    return serialize_session(session)


@router.post("/sessions/{session_id}/finish")
async def finish_session(
    session_id: UUID,
    actor: User = Depends(current_user),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    session = container.session_service.mark_finished(session_id, actor)
    return serialize_session(session)


@router.get("/sessions/{session_id}/logs")
async def session_logs(
    session_id: UUID,
    actor: User = Depends(current_user),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    """Return the session history, newest first."""
    entries = container.session_service.history(session_id)
    return {"logs": [serialize_log(entry) for entry in entries]}


@router.post("/smart-booking/suggestions")
async def smart_booking(
    body: SmartBookingRequest,
    actor: User = Depends(current_user),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    """Suggest practice sessions for the calling learner."""
    if actor.role != Role.LEARNER:
        raise AuthorizationError("Only learners can request smart booking.")
    preferences = SmartBookingPreferences(
        session_count=body.session_count,
        preferred_time=body.preferred_time,
        preferred_teacher_id=body.preferred_teacher_id,
        preferred_days=frozenset(body.preferred_days),
    )
    suggestions = container.matcher.suggest(actor.id, preferences)
    return {"suggestions": [serialize_scored(item) for item in suggestions]}
