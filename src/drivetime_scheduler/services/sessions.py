"""Session lifecycle: creation, booking, cancellation and the status sweep."""

import logging
from dataclasses import dataclass, field, replace
from datetime import datetime, timedelta
from threading import RLock
from uuid import UUID, uuid4

from drivetime_scheduler.clock import Clock, format_when, utc_now
from drivetime_scheduler.domain.audit import AuditLogEntry, AuditMetadata, SessionAction
from drivetime_scheduler.domain.errors import (
    AuthorizationError,
    ConflictError,
    NotFoundError,
    TemporalError,
    ValidationError,
)
from drivetime_scheduler.domain.sessions import Session, SessionStatus, SessionType
from drivetime_scheduler.domain.users import Role, User
from drivetime_scheduler.domain.vehicles import Vehicle
from drivetime_scheduler.services.audit import AuditService
from drivetime_scheduler.services.availability import VehicleAvailabilityChecker
from drivetime_scheduler.services.constraints import ConstraintEngine
from drivetime_scheduler.services.notifications import NotificationService
from drivetime_scheduler.services.payloads import (
    parse_datetime,
    parse_enum,
    parse_uuid,
)
from drivetime_scheduler.services.permissions import require_owner, require_role
from drivetime_scheduler.services.repositories import (
    SessionRepository,
    UserRepository,
    VehicleRepository,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SweepTransition:
    """One status change applied by the sweep."""

    session_id: UUID
    old_status: SessionStatus
    new_status: SessionStatus


@dataclass(frozen=True)
class SweepReport:
    """Outcome of a status sweep."""

    transitions: tuple[SweepTransition, ...] = ()

    @property
    def changed(self) -> bool:
        return bool(self.transitions)


@dataclass
class SessionService:  # noqa: PLR0904
    """Owns the session collection and every transition of the state machine.

    Mutating methods run under ``lock`` and validate everything before the
    first repository write, so a raised error leaves the store untouched.
    """

    session_repository: SessionRepository
    user_repository: UserRepository
    vehicle_repository: VehicleRepository
    availability: VehicleAvailabilityChecker
    constraints: ConstraintEngine
    audit_service: AuditService
    notification_service: NotificationService
    timezone: str = "UTC"
    minimum_duration: timedelta = timedelta(minutes=30)
    default_theory_capacity: int = 10
    clock: Clock = utc_now
    lock: RLock = field(default_factory=RLock)

    # --- Queries ---

    def list_sessions(self) -> list[Session]:
        """Return every session."""
        return self.session_repository.list_all()

    def get_session(self, session_id: UUID) -> Session:
        """Return a session or raise ``NotFoundError``."""
        session = self.session_repository.get(session_id)
        if session is None:
            raise NotFoundError("Session not found.")
        return session

    def list_for_user(self, user: User) -> list[Session]:
        """Return the sessions relevant to a user's role."""
        if user.role == Role.TEACHER:
            return self.session_repository.list_for_teacher(user.id)
        if user.role == Role.LEARNER:
            return self.session_repository.list_for_learner(user.id)
        return self.session_repository.list_all()

    def history(self, session_id: UUID) -> list[AuditLogEntry]:
        """Return the audit trail of an existing session, newest first."""
        self.get_session(session_id)
        return self.audit_service.get_log(session_id)

    # --- Commands ---

    def create(self, payload: dict[str, object], creator: User) -> Session:
        """Create an available session owned by ``creator``."""
        with self.lock:
            require_role(creator, Role.TEACHER, "Only teachers can create sessions.")
            start = parse_datetime(payload.get("start"), "start", self.timezone)
            end = parse_datetime(payload.get("end"), "end", self.timezone)
            session_type = parse_enum(payload.get("type"), SessionType, "type")
            if start is None or end is None or session_type is None:
                raise ValidationError("Missing required fields: start, end and type.")
            if start < self.clock():
                raise TemporalError("Cannot create sessions in the past.")
            self._check_duration(start, end)
            self._check_teacher_free(creator.id, start, end)

            vehicle_id = parse_uuid(payload.get("vehicle_id"), "vehicle_id")
            requires_vehicle = bool(
                payload.get("requires_vehicle", vehicle_id is not None)
            )
            if vehicle_id is not None and not self.availability.is_available(
                vehicle_id, start, end
            ):
                raise ConflictError(
                    "The selected vehicle is not available during this time."
                )
            capacity = None
            if session_type == SessionType.THEORY:
                capacity = _parse_capacity(
                    payload.get("capacity"), self.default_theory_capacity
                )

            session = Session(
                id=uuid4(),
                teacher_id=creator.id,
                teacher_name=creator.name,
                learner_ids=(),
                learner_names=(),
                start=start,
                end=end,
                status=SessionStatus.AVAILABLE,
                created_at=self.clock(),
                cancellation_reason=None,
                requires_vehicle=requires_vehicle or vehicle_id is not None,
                vehicle_id=vehicle_id,
                type=session_type,
                capacity=capacity,
            )
            self.session_repository.add(session)
            self.audit_service.append(
                session.id,
                SessionAction.CREATE,
                creator,
                f"Session created by {creator.name}",
            )
            self.notification_service.notify(
                creator.id,
                f"You successfully created a {session.type} session for "
                f"{self._when(start)}.",
            )
            logger.info("Session %s created by teacher %s", session.id, creator.id)
            return session

    def update(  # noqa: PLR0912
        self, session_id: UUID, payload: dict[str, object], updater: User
    ) -> Session:
        """Reschedule a session, change its vehicle or resize a theory class."""
        with self.lock:
            require_role(updater, Role.TEACHER, "Only teachers can edit sessions.")
            session = self.get_session(session_id)
            require_owner(session, updater)
            if session.is_terminal:
                raise ConflictError("Finished or cancelled sessions cannot be edited.")
            if session.status == SessionStatus.IN_PROGRESS:
                raise ConflictError("Sessions in progress cannot be edited.")
            new_type = parse_enum(payload.get("type"), SessionType, "type")
            if new_type is not None and new_type != session.type:
                raise ValidationError("The type of a session cannot be changed.")

            start = (
                parse_datetime(payload.get("start"), "start", self.timezone)
                or session.start
            )
            end = (
                parse_datetime(payload.get("end"), "end", self.timezone)
                or session.end
            )
            start_changed = start != session.start
            time_changed = start_changed or end != session.end
            if time_changed:
                if start_changed and start < self.clock():
                    raise TemporalError("Cannot move a session into the past.")
                self._check_duration(start, end)
                self._check_teacher_free(updater.id, start, end, exclude=session.id)

            vehicle_id = session.vehicle_id
            if "vehicle_id" in payload:
                vehicle_id = parse_uuid(payload["vehicle_id"], "vehicle_id")
            vehicle_changed = vehicle_id != session.vehicle_id
            if (
                vehicle_id is not None
                and (vehicle_changed or time_changed)
                and not self.availability.is_available(
                    vehicle_id, start, end, exclude_session_id=session.id
                )
            ):
                raise ConflictError(
                    "The assigned vehicle is not available for the selected time slot."
                )

            capacity = session.capacity
            status = session.status
            if payload.get("capacity") is not None:
                if session.type != SessionType.THEORY:
                    raise ValidationError("Only theory sessions have a capacity.")
                capacity = _parse_capacity(payload["capacity"], capacity or 1)
                if capacity < len(session.learner_ids):
                    raise ConflictError(
                        "Capacity cannot be lower than the number of booked learners."
                    )
                if session.learner_ids and status in {
                    SessionStatus.BOOKED,
                    SessionStatus.FULL,
                }:
                    status = (
                        SessionStatus.FULL
                        if len(session.learner_ids) == capacity
                        else SessionStatus.BOOKED
                    )

            requires_vehicle = bool(
                payload.get("requires_vehicle", session.requires_vehicle)
            )
            updated = replace(
                session,
                start=start,
                end=end,
                vehicle_id=vehicle_id,
                requires_vehicle=requires_vehicle or vehicle_id is not None,
                capacity=capacity,
                status=status,
            )
            self.session_repository.save(updated)

            if start_changed:
                self.audit_service.append(
                    session.id,
                    SessionAction.RESCHEDULE,
                    updater,
                    f"Rescheduled from {self._when(session.start)} to "
                    f"{self._when(start)}",
                    AuditMetadata(old_start=session.start, new_start=start),
                )
            if vehicle_changed:
                old_name = self._vehicle_name(session.vehicle_id)
                new_name = self._vehicle_name(vehicle_id)
                self.audit_service.append(
                    session.id,
                    SessionAction.VEHICLE_CHANGE,
                    updater,
                    f"Vehicle changed from {old_name} to {new_name}",
                    AuditMetadata(old_vehicle=old_name, new_vehicle=new_name),
                )
            if time_changed:
                self.notification_service.notify_many(
                    updated.learner_ids,
                    f"Your session with {updated.teacher_name} has been rescheduled "
                    f"to {self._when(start)}.",
                )
            return updated

    def book(self, session_id: UUID, learner: User) -> Session:
        """Book ``learner`` onto a practice slot or a theory class."""
        with self.lock:
            require_role(learner, Role.LEARNER, "Only learners can book sessions.")
            session = self.get_session(session_id)
            if session.start <= self.clock():
                raise TemporalError("This session has already started.")
            if session.type == SessionType.PRACTICE:
                if session.status != SessionStatus.AVAILABLE:
                    raise ConflictError("Session is not available.")
            else:
                if session.status not in {
                    SessionStatus.AVAILABLE,
                    SessionStatus.BOOKED,
                }:
                    raise ConflictError("Session is not available.")
                if session.has_learner(learner.id):
                    raise ConflictError("You are already booked on this session.")
                if len(session.learner_ids) >= session.seat_limit:
                    raise ConflictError("Session full.")

            teacher = self.user_repository.get(session.teacher_id)
            if teacher is not None:
                self.constraints.check_limits(teacher, learner, session)
            if session.vehicle_id is not None and not self.availability.is_available(
                session.vehicle_id,
                session.start,
                session.end,
                exclude_session_id=session.id,
            ):
                raise ConflictError(
                    "The vehicle for this session is no longer available."
                )

            updated = session.with_learner(learner.id, learner.name)
            self.session_repository.save(updated)

            kind = session.type.lower()
            verb = "booked" if session.type == SessionType.PRACTICE else "joined"
            when = self._when(session.start)
            self.audit_service.append(
                session.id,
                SessionAction.BOOK,
                learner,
                f"{learner.name} {verb} the {kind} session",
            )
            self.notification_service.notify(
                session.teacher_id,
                f"New Booking: {learner.name} {verb} your {kind} session on {when}.",
            )
            self.notification_service.notify(
                learner.id,
                f"Booking Confirmed: {session.type} session with "
                f"{session.teacher_name} on {when}.",
            )
            return updated

    def cancel(self, session_id: UUID, user: User, reason: str = "") -> Session:
        """Cancel a booking (learner) or the whole session (teacher)."""
        with self.lock:
            session = self.get_session(session_id)
            if session.is_terminal:
                raise ConflictError("This session is already finished or cancelled.")
            if user.role == Role.LEARNER:
                updated = self._cancel_as_learner(session, user, reason)
            elif user.role == Role.TEACHER:
                updated = self._cancel_as_teacher(session, user, reason)
            else:
                raise AuthorizationError(
                    "Only the booked learner or the teacher can cancel a session."
                )
            self.notification_service.notify(
                user.id,
                f"You cancelled/left the session on {self._when(session.start)}.",
            )
            return updated

    def delete(self, session_id: UUID, teacher: User) -> None:
        """Remove an unbooked future session together with its history."""
        with self.lock:
            require_role(teacher, Role.TEACHER, "Only teachers can delete sessions.")
            session = self.get_session(session_id)
            require_owner(session, teacher)
            if session.status != SessionStatus.AVAILABLE or (
                session.start <= self.clock()
            ):
                raise ConflictError(
                    "Only available sessions that have not started can be deleted."
                )
            self.session_repository.delete(session.id)
            self.audit_service.purge(session.id)
            self.notification_service.notify(
                teacher.id, "Session deleted successfully."
            )
            logger.info("Session %s deleted by teacher %s", session.id, teacher.id)

    def mark_finished(self, session_id: UUID, teacher: User) -> Session:
        """Close a session early on the teacher's word."""
        with self.lock:
            require_role(teacher, Role.TEACHER, "Only teachers can finish sessions.")
            session = self.get_session(session_id)
            require_owner(session, teacher)
            if session.is_terminal:
                raise ConflictError("This session is already finished or cancelled.")
            updated = replace(session, status=SessionStatus.FINISHED)
            self.session_repository.save(updated)
            when = self._when(session.start)
            self.audit_service.append(
                session.id, SessionAction.FINISH, teacher, "Session marked as finished"
            )
            self.notification_service.notify_many(
                session.learner_ids,
                f"Session Finished: Your session at {when} has been marked as "
                "complete.",
            )
            self.notification_service.notify(
                teacher.id, f"Session Finished: The session at {when} is complete."
            )
            return updated

    def sweep(self, now: datetime | None = None) -> SweepReport:
        """Advance every session whose status lags behind the clock.

        Each session is stepped until no rule applies, so a booked session
        whose end passed while the sweep was not running goes through
        In Progress to Finished in a single call.
        """
        with self.lock:
            now = now or self.clock()
            transitions: list[SweepTransition] = []
            for session in self.session_repository.list_all():
                current = session
                steps: list[tuple[SessionStatus, SessionAction, str]] = []
                while (step := _next_sweep_step(current, now)) is not None:
                    steps.append(step)
                    current = replace(current, status=step[0])
                if not steps:
                    continue
                self.session_repository.save(current)
                previous = session.status
                for new_status, action, details in steps:
                    transitions.append(
                        SweepTransition(session.id, previous, new_status)
                    )
                    self.audit_service.append(session.id, action, None, details)
                    self._announce_sweep(current, new_status)
                    previous = new_status
            if transitions:
                logger.info("Status sweep applied %d transitions", len(transitions))
            return SweepReport(tuple(transitions))

    # --- Cascades from user and vehicle lifecycle ---

    def remove_teacher(self, teacher: User) -> int:
        """Hard-delete a departing teacher's future sessions."""
        with self.lock:
            now = self.clock()
            removed = 0
            for session in self.session_repository.list_for_teacher(teacher.id):
                if session.start <= now:
                    continue
                self.session_repository.delete(session.id)
                self.audit_service.purge(session.id)
                removed += 1
                if session.is_terminal:
                    continue
                self.notification_service.notify_many(
                    session.learner_ids,
                    f"Session Cancelled: Your session with {session.teacher_name} on "
                    f"{self._when(session.start)} has been cancelled because the "
                    "instructor account is no longer active.",
                )
            logger.info("Removed %d future sessions of teacher %s", removed, teacher.id)
            return removed

    def remove_learner(self, learner: User) -> int:
        """Take a departing learner off every future session."""
        with self.lock:
            now = self.clock()
            affected = 0
            for session in self.session_repository.list_for_learner(learner.id):
                if session.start <= now or session.is_terminal:
                    continue
                self.session_repository.save(session.without_learner(learner.id))
                affected += 1
                self.audit_service.append(
                    session.id,
                    SessionAction.CANCEL,
                    None,
                    f"Learner {learner.name} removed (Account Deactivated/Deleted)",
                )
                self.notification_service.notify(
                    session.teacher_id,
                    f"Update: {learner.name} was removed from your session on "
                    f"{self._when(session.start)} due to account deactivation.",
                )
            logger.info("Removed learner %s from %d sessions", learner.id, affected)
            return affected

    def rename_participant(self, user: User) -> int:
        """Refresh the cached teacher and learner names after a rename."""
        with self.lock:
            refreshed = 0
            for session in self.session_repository.list_all():
                if session.teacher_id != user.id and not session.has_learner(user.id):
                    continue
                renamed = session.renamed(user.id, user.name)
                if renamed != session:
                    self.session_repository.save(renamed)
                    refreshed += 1
            return refreshed

    def unassign_vehicle(self, vehicle: Vehicle, cause: str) -> int:
        """Detach a vehicle that left service from every future session."""
        with self.lock:
            now = self.clock()
            affected = 0
            for session in self.session_repository.list_for_vehicle(vehicle.id):
                if session.start <= now:
                    continue
                self.session_repository.save(replace(session, vehicle_id=None))
                affected += 1
                self.audit_service.append(
                    session.id,
                    SessionAction.VEHICLE_CHANGE,
                    None,
                    f"Vehicle {vehicle.name} unassigned ({cause})",
                    AuditMetadata(old_vehicle=vehicle.name, new_vehicle="None"),
                )
                self.notification_service.notify(
                    session.teacher_id,
                    f"Alert: Vehicle {vehicle.name} for your session on "
                    f"{self._when(session.start)} has been unassigned ({cause}). "
                    "Please assign a new vehicle.",
                )
            logger.info("Unassigned vehicle %s from %d sessions", vehicle.id, affected)
            return affected

    # --- Internals ---

    def _cancel_as_learner(
        self, session: Session, learner: User, reason: str
    ) -> Session:
        if not session.has_learner(learner.id):
            raise ConflictError("You are not booked on this session.")
        when = self._when(session.start)
        metadata = AuditMetadata(reason=reason or None)

        if session.type == SessionType.THEORY:
            updated = session.without_learner(learner.id)
            self.session_repository.save(updated)
            self.audit_service.append(
                session.id,
                SessionAction.CANCEL,
                learner,
                "Learner left theory session",
                metadata,
            )
            self.notification_service.notify(
                session.teacher_id,
                f"Cancellation: {learner.name} left your theory session on {when}.",
            )
            return updated

        if session.start > self.clock():
            updated = session.without_learner(learner.id)
            self.session_repository.save(updated)
            self.audit_service.append(
                session.id,
                SessionAction.CANCEL,
                learner,
                "Booking cancelled by learner (Reverted to Available)",
                metadata,
            )
            self.notification_service.notify(
                session.teacher_id,
                f"Update: {learner.name} cancelled their booking for {when}. "
                "The session is now available for others.",
            )
            return updated

        if not reason.strip():
            raise ValidationError(
                "A reason is required to cancel a session that has already started."
            )
        updated = replace(
            session,
            status=SessionStatus.CANCELLED_BY_LEARNER,
            cancellation_reason=reason,
        )
        self.session_repository.save(updated)
        self.audit_service.append(
            session.id,
            SessionAction.CANCEL,
            learner,
            "Session cancelled by learner",
            metadata,
        )
        self.notification_service.notify(
            session.teacher_id,
            f"Cancellation: {learner.name} cancelled the session on {when}. "
            f"Reason: {reason}",
        )
        return updated

    def _cancel_as_teacher(
        self, session: Session, teacher: User, reason: str
    ) -> Session:
        require_role(teacher, Role.TEACHER, "Only teachers can cancel sessions.")
        require_owner(session, teacher)
        updated = replace(
            session,
            status=SessionStatus.CANCELLED_BY_TEACHER,
            cancellation_reason=reason or None,
        )
        self.session_repository.save(updated)
        self.audit_service.append(
            session.id,
            SessionAction.CANCEL,
            teacher,
            "Session cancelled by Teacher",
            AuditMetadata(reason=reason or None),
        )
        self.notification_service.notify_many(
            session.learner_ids,
            f"Alert: Your session with {session.teacher_name} at "
            f"{self._when(session.start)} was cancelled by the instructor. "
            f"Reason: {reason}",
        )
        return updated

    def _check_duration(self, start: datetime, end: datetime) -> None:
        if end <= start:
            raise TemporalError("The session must end after it starts.")
        if end - start < self.minimum_duration:
            minutes = int(self.minimum_duration.total_seconds() // 60)
            raise TemporalError(f"Sessions must last at least {minutes} minutes.")

    def _check_teacher_free(
        self,
        teacher_id: UUID,
        start: datetime,
        end: datetime,
        exclude: UUID | None = None,
    ) -> None:
        for other in self.session_repository.list_for_teacher(teacher_id):
            if other.id == exclude or other.is_terminal:
                continue
            if other.overlaps(start, end):
                raise ConflictError(
                    "You already have a session scheduled during this time slot."
                )

    def _announce_sweep(self, session: Session, status: SessionStatus) -> None:
        when = self._when(session.start)
        if status == SessionStatus.CANCELLED_UNBOOKED:
            self.notification_service.notify(
                session.teacher_id,
                f"System: Your unbooked session at {when} has expired and was "
                "cancelled.",
            )
            return
        verb = "started" if status == SessionStatus.IN_PROGRESS else "finished"
        message = f"Your session at {when} has {verb}."
        self.notification_service.notify_many(session.learner_ids, message)
        self.notification_service.notify(session.teacher_id, message)

    def _vehicle_name(self, vehicle_id: UUID | None) -> str:
        if vehicle_id is None:
            return "None"
        vehicle = self.vehicle_repository.get(vehicle_id)
        return vehicle.name if vehicle else "None"

    def _when(self, value: datetime) -> str:
        return format_when(value, self.timezone)


def _next_sweep_step(
    session: Session, now: datetime
) -> tuple[SessionStatus, SessionAction, str] | None:
    if session.status == SessionStatus.IN_PROGRESS and now >= session.end:
        return (
            SessionStatus.FINISHED,
            SessionAction.FINISH,
            "Auto-finished by system time",
        )
    if (
        session.status in {SessionStatus.BOOKED, SessionStatus.FULL}
        and now >= session.start
    ):
        return (
            SessionStatus.IN_PROGRESS,
            SessionAction.STATUS_CHANGE,
            "Started (In Progress)",
        )
    if session.status == SessionStatus.AVAILABLE and now >= session.start:
        return (
            SessionStatus.CANCELLED_UNBOOKED,
            SessionAction.STATUS_CHANGE,
            "Expired (Cancelled Unbooked)",
        )
    return None


def _parse_capacity(value: object, default: int) -> int:
    if value is None:
        return default
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise ValidationError("Capacity must be a positive integer.")
    return value
