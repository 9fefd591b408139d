"""Domain models for school users."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum
from uuid import UUID


class Role(StrEnum):
    """Roles a user can hold."""

    ADMIN = "ADMIN"
    TEACHER = "TEACHER"
    LEARNER = "LEARNER"


@dataclass(frozen=True)
class TeacherConstraints:
    """Per-learner booking caps a teacher applies to their own sessions."""

    max_sessions_per_learner_daily: int | None = None
    max_sessions_per_learner_weekly: int | None = None


@dataclass(frozen=True)
class User:
    """Represents an account stored in the user repository."""

    id: UUID
    name: str
    email: str
    password_hash: str
    role: Role
    is_active: bool
    registered_at: datetime
    teacher_constraints: TeacherConstraints = field(default_factory=TeacherConstraints)
