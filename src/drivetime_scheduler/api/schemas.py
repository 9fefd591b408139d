"""Request models for the HTTP API."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from drivetime_scheduler.domain.booking import ANY_TEACHER, TimeOfDay
from drivetime_scheduler.domain.sessions import SessionType
from drivetime_scheduler.domain.users import Role
from drivetime_scheduler.domain.vehicles import VehicleStatus


class RegisterRequest(BaseModel):
    name: str
    email: str
    password: str


class LoginRequest(BaseModel):
    email: str
    password: str


class TeacherConstraintsPayload(BaseModel):
    max_sessions_per_learner_daily: int | None = Field(default=None, ge=0)
    max_sessions_per_learner_weekly: int | None = Field(default=None, ge=0)


class UserCreateRequest(BaseModel):
    name: str
    email: str
    password: str
    role: Role


class UserUpdateRequest(BaseModel):
    name: str | None = None
    email: str | None = None
    password: str | None = None
    teacher_constraints: TeacherConstraintsPayload | None = None


class ActiveRequest(BaseModel):
    active: bool


class VehicleCreateRequest(BaseModel):
    name: str
    plate: str


class VehicleStatusRequest(BaseModel):
    status: VehicleStatus


class SessionCreateRequest(BaseModel):
    start: datetime
    end: datetime
    type: SessionType
    requires_vehicle: bool = False
    vehicle_id: UUID | None = None
    capacity: int | None = None


class SessionUpdateRequest(BaseModel):
    """Partial update; only fields present in the body are applied."""

    start: datetime | None = None
    end: datetime | None = None
    requires_vehicle: bool | None = None
    vehicle_id: UUID | None = None
    capacity: int | None = None


class CancelRequest(BaseModel):
    reason: str = ""


class SmartBookingRequest(BaseModel):
    session_count: int = Field(default=1, ge=1, le=5)
    preferred_time: TimeOfDay = TimeOfDay.ANY
    preferred_teacher_id: str = ANY_TEACHER
    preferred_days: list[int] = Field(default_factory=list)
