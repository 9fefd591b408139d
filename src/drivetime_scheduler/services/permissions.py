"""Role checks shared by the services."""

from drivetime_scheduler.domain.errors import AuthorizationError
from drivetime_scheduler.domain.sessions import Session
from drivetime_scheduler.domain.users import Role, User


def require_role(user: User, role: Role, message: str) -> None:
    """Reject users that do not hold ``role`` or whose account is disabled."""
    if user.role != role:
        raise AuthorizationError(message)
    require_active(user)


def require_active(user: User) -> None:
    if not user.is_active:
        raise AuthorizationError("Your account has been disabled.")


def require_owner(session: Session, user: User) -> None:
    """Reject teachers acting on another teacher's session."""
    if session.teacher_id != user.id:
        raise AuthorizationError("You can only manage your own sessions.")
