"""Request-scoped dependencies."""

from uuid import UUID

from fastapi import Depends, Header, HTTPException, Request, status

from drivetime_scheduler.containers import AppContainer
from drivetime_scheduler.domain.errors import NotFoundError
from drivetime_scheduler.domain.users import User


def get_container(request: Request) -> AppContainer:
    return request.app.state.container


def current_user(
    x_user_id: str | None = Header(default=None),
    container: AppContainer = Depends(get_container),
) -> User:
    """Resolve the acting user from the ``X-User-Id`` header."""
    if not x_user_id:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED)
    try:
        user_id = UUID(x_user_id)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED) from exc
    try:
        user = container.user_service.get_user(user_id)
    except NotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED) from exc
    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Your account has been disabled.",
        )
    return user
