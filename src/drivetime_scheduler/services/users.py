"""User accounts: registration, authentication and admin lifecycle actions."""

import logging
from dataclasses import dataclass, field, replace
from threading import RLock
from uuid import UUID, uuid4

from passlib.context import CryptContext

from drivetime_scheduler.clock import Clock, utc_now
from drivetime_scheduler.domain.errors import (
    AuthorizationError,
    ConflictError,
    NotFoundError,
    ValidationError,
)
from drivetime_scheduler.domain.users import Role, TeacherConstraints, User
from drivetime_scheduler.services.notifications import NotificationService
from drivetime_scheduler.services.payloads import parse_enum, parse_limit
from drivetime_scheduler.services.permissions import require_role
from drivetime_scheduler.services.repositories import UserRepository
from drivetime_scheduler.services.sessions import SessionService

logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


def hash_password(password: str) -> str:
    """Return a salted hash suitable for storage."""
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Check a password against a stored hash."""
    try:
        return bool(pwd_context.verify(plain_password, hashed_password))
    except ValueError:
        logger.warning("Stored password hash could not be parsed")
        return False


@dataclass
class UserService:
    """Application service for user lifecycle actions."""

    repository: UserRepository
    session_service: SessionService
    notification_service: NotificationService
    admin_contact_email: str = "admin@drivetime.com"
    clock: Clock = utc_now
    lock: RLock = field(default_factory=RLock)

    def list_users(self) -> list[User]:
        """Return every account."""
        return self.repository.list_all()

    def get_user(self, user_id: UUID) -> User:
        """Return a user or raise ``NotFoundError``."""
        user = self.repository.get(user_id)
        if user is None:
            raise NotFoundError("User not found.")
        return user

    def register(self, name: str, email: str, password: str) -> User:
        """Self-service sign-up; new accounts are always learners."""
        with self.lock:
            user = self._build_user(name, email, password, Role.LEARNER)
            self.repository.add(user)
            self.notification_service.notify(
                user.id, "Welcome! You have successfully registered."
            )
            logger.info("Registered learner %s", user.id)
            return user

    def authenticate(self, email: str, password: str) -> User | None:
        """Return the user for valid credentials, or None."""
        user = self.repository.get_by_email(email)
        if user is None or not verify_password(password, user.password_hash):
            return None
        if not user.is_active:
            raise AuthorizationError(
                "Your account has been disabled. Please contact admin at "
                f"{self._admin_email()}."
            )
        return user

    def update_profile(  # noqa: PLR0912
        self, user_id: UUID, payload: dict[str, object], actor: User
    ) -> User:
        """Apply profile edits made by the user themselves or an admin."""
        with self.lock:
            if actor.id != user_id and actor.role != Role.ADMIN:
                raise AuthorizationError("You can only edit your own profile.")
            user = self.get_user(user_id)
            changes: dict[str, object] = {}

            if payload.get("name") is not None:
                changes["name"] = _clean_name(payload["name"])
            if payload.get("email") is not None:
                email = _clean_email(payload["email"])
                existing = self.repository.get_by_email(email)
                if existing is not None and existing.id != user.id:
                    raise ConflictError(
                        "This email address is already in use by another account."
                    )
                changes["email"] = email
            if payload.get("password") is not None:
                changes["password_hash"] = hash_password(
                    _clean_password(payload["password"])
                )
            constraints = payload.get("teacher_constraints")
            if constraints is not None:
                if user.role != Role.TEACHER:
                    raise ValidationError("Only teachers can set booking limits.")
                if not isinstance(constraints, dict):
                    raise ValidationError("teacher_constraints must be an object.")
                changes["teacher_constraints"] = _merge_constraints(
                    user.teacher_constraints, constraints
                )

            updated = replace(user, **changes)
            self.repository.save(updated)
            if updated.name != user.name:
                self.session_service.rename_participant(updated)
            return updated

    def admin_create_user(self, payload: dict[str, object], admin: User) -> User:
        """Create an account with any role on behalf of an admin."""
        with self.lock:
            require_role(admin, Role.ADMIN, "Only admins can create accounts.")
            role = parse_enum(payload.get("role"), Role, "role")
            if role is None:
                raise ValidationError("Missing required field: role.")
            user = self._build_user(
                payload.get("name"), payload.get("email"), payload.get("password"), role
            )
            self.repository.add(user)
            logger.info("Admin %s created %s account %s", admin.id, role, user.id)
            return user

    def set_active(self, user_id: UUID, active: bool, admin: User) -> User:
        """Enable or disable an account; disabling cascades into sessions."""
        with self.lock:
            require_role(admin, Role.ADMIN, "Only admins can change account status.")
            user = self.get_user(user_id)
            if user.role == Role.ADMIN:
                raise ConflictError("Cannot deactivate admin.")
            updated = replace(user, is_active=active)
            self.repository.save(updated)
            if not active:
                self._release_sessions(updated)
            return updated

    def delete_user(self, user_id: UUID, admin: User) -> None:
        """Delete an account after releasing its sessions."""
        with self.lock:
            require_role(admin, Role.ADMIN, "Only admins can delete accounts.")
            user = self.get_user(user_id)
            if user.role == Role.ADMIN:
                raise ConflictError("Cannot delete admin.")
            self._release_sessions(user)
            self.repository.delete(user.id)
            logger.info("Admin %s deleted account %s", admin.id, user.id)

    def _release_sessions(self, user: User) -> None:
        if user.role == Role.TEACHER:
            self.session_service.remove_teacher(user)
        elif user.role == Role.LEARNER:
            self.session_service.remove_learner(user)

    def _build_user(
        self, name: object, email: object, password: object, role: Role
    ) -> User:
        clean_email = _clean_email(email)
        if self.repository.get_by_email(clean_email) is not None:
            raise ConflictError("An account with this email already exists.")
        return User(
            id=uuid4(),
            name=_clean_name(name),
            email=clean_email,
            password_hash=hash_password(_clean_password(password)),
            role=role,
            is_active=True,
            registered_at=self.clock(),
        )

    def _admin_email(self) -> str:
        for user in self.repository.list_all():
            if user.role == Role.ADMIN:
                return user.email
        return self.admin_contact_email


def _clean_name(value: object) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError("Name is required.")
    return value.strip()


def _clean_email(value: object) -> str:
    if not isinstance(value, str) or "@" not in value:
        raise ValidationError("A valid email address is required.")
    return value.strip()


def _clean_password(value: object) -> str:
    if not isinstance(value, str) or not value:
        raise ValidationError("Password is required.")
    return value


def _merge_constraints(
    current: TeacherConstraints, updates: dict[str, object]
) -> TeacherConstraints:
    daily = current.max_sessions_per_learner_daily
    weekly = current.max_sessions_per_learner_weekly
    if "max_sessions_per_learner_daily" in updates:
        daily = parse_limit(
            updates["max_sessions_per_learner_daily"], "max_sessions_per_learner_daily"
        )
    if "max_sessions_per_learner_weekly" in updates:
        weekly = parse_limit(
            updates["max_sessions_per_learner_weekly"],
            "max_sessions_per_learner_weekly",
        )
    return TeacherConstraints(
        max_sessions_per_learner_daily=daily,
        max_sessions_per_learner_weekly=weekly,
    )
