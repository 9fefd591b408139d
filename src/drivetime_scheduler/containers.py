"""Dependency container wiring for the application."""

import random
from dataclasses import dataclass
from datetime import timedelta
from threading import RLock

from drivetime_scheduler.adapters.memory_audit_repository import (
    InMemoryAuditRepository,
)
from drivetime_scheduler.adapters.memory_notification_repository import (
    InMemoryNotificationRepository,
)
from drivetime_scheduler.adapters.memory_session_repository import (
    InMemorySessionRepository,
)
from drivetime_scheduler.adapters.memory_user_repository import InMemoryUserRepository
from drivetime_scheduler.adapters.memory_vehicle_repository import (
    InMemoryVehicleRepository,
)
from drivetime_scheduler.clock import Clock, utc_now
from drivetime_scheduler.config import Settings
from drivetime_scheduler.services.audit import AuditService
from drivetime_scheduler.services.availability import VehicleAvailabilityChecker
from drivetime_scheduler.services.constraints import ConstraintEngine
from drivetime_scheduler.services.matching import SmartBookingMatcher
from drivetime_scheduler.services.notifications import NotificationService
from drivetime_scheduler.services.scheduler import StatusScheduler
from drivetime_scheduler.services.sessions import SessionService
from drivetime_scheduler.services.users import UserService
from drivetime_scheduler.services.vehicles import VehicleService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    audit_service: AuditService
    notification_service: NotificationService
    availability: VehicleAvailabilityChecker
    constraints: ConstraintEngine
    session_service: SessionService
    user_service: UserService
    vehicle_service: VehicleService
    matcher: SmartBookingMatcher
    scheduler: StatusScheduler


def build_container(
    settings: Settings | None = None,
    clock: Clock = utc_now,
    rng: random.Random | None = None,
) -> AppContainer:
    """Create the default dependency container.

    Every mutating service shares one re-entrant lock, which makes the store
    single-writer: cascades may call back into the session service while the
    lock is held.
    """
    resolved_settings = settings or Settings()
    lock = RLock()
    timezone = resolved_settings.timezone

    user_repository = InMemoryUserRepository()
    vehicle_repository = InMemoryVehicleRepository()
    session_repository = InMemorySessionRepository()

    audit_service = AuditService(InMemoryAuditRepository(), clock=clock)
    notification_service = NotificationService(
        InMemoryNotificationRepository(), clock=clock, lock=lock
    )
    availability = VehicleAvailabilityChecker(vehicle_repository, session_repository)
    constraints = ConstraintEngine(session_repository, timezone=timezone)
    session_service = SessionService(
        session_repository=session_repository,
        user_repository=user_repository,
        vehicle_repository=vehicle_repository,
        availability=availability,
        constraints=constraints,
        audit_service=audit_service,
        notification_service=notification_service,
        timezone=timezone,
        minimum_duration=timedelta(minutes=resolved_settings.minimum_session_minutes),
        default_theory_capacity=resolved_settings.default_theory_capacity,
        clock=clock,
        lock=lock,
    )
    user_service = UserService(
        repository=user_repository,
        session_service=session_service,
        notification_service=notification_service,
        admin_contact_email=resolved_settings.admin_contact_email,
        clock=clock,
        lock=lock,
    )
    vehicle_service = VehicleService(
        repository=vehicle_repository,
        availability=availability,
        session_service=session_service,
        lock=lock,
    )
    matcher = SmartBookingMatcher(
        session_repository=session_repository,
        user_repository=user_repository,
        timezone=timezone,
        window=timedelta(days=resolved_settings.smart_booking_window_days),
        clock=clock,
        rng=rng or random.Random(),
    )
    scheduler = StatusScheduler(
        session_service, interval_seconds=resolved_settings.sweep_interval_seconds
    )

    return AppContainer(
        settings=resolved_settings,
        audit_service=audit_service,
        notification_service=notification_service,
        availability=availability,
        constraints=constraints,
        session_service=session_service,
        user_service=user_service,
        vehicle_service=vehicle_service,
        matcher=matcher,
        scheduler=scheduler,
    )
