"""Vehicle fleet management."""

import logging
from dataclasses import dataclass, field, replace
from datetime import datetime
from threading import RLock
from uuid import UUID, uuid4

from drivetime_scheduler.domain.errors import (
    ConflictError,
    NotFoundError,
    ValidationError,
)
from drivetime_scheduler.domain.users import Role, User
from drivetime_scheduler.domain.vehicles import Vehicle, VehicleStatus
from drivetime_scheduler.services.availability import VehicleAvailabilityChecker
from drivetime_scheduler.services.payloads import parse_enum
from drivetime_scheduler.services.permissions import require_role
from drivetime_scheduler.services.repositories import VehicleRepository
from drivetime_scheduler.services.sessions import SessionService

logger = logging.getLogger(__name__)


@dataclass
class VehicleService:
    """Admin operations on vehicles and their knock-on effect on sessions."""

    repository: VehicleRepository
    availability: VehicleAvailabilityChecker
    session_service: SessionService
    lock: RLock = field(default_factory=RLock)

    def list_vehicles(self) -> list[Vehicle]:
        """Return the whole fleet."""
        return self.repository.list_all()

    def get_vehicle(self, vehicle_id: UUID) -> Vehicle:
        """Return a vehicle or raise ``NotFoundError``."""
        vehicle = self.repository.get(vehicle_id)
        if vehicle is None:
            raise NotFoundError("Vehicle not found.")
        return vehicle

    def available_vehicles(
        self,
        start: datetime,
        end: datetime,
        exclude_session_id: UUID | None = None,
    ) -> list[Vehicle]:
        """Return vehicles free for the window."""
        if end <= start:
            raise ValidationError("The window must end after it starts.")
        return self.availability.available_vehicles(start, end, exclude_session_id)

    def create_vehicle(self, payload: dict[str, object], admin: User) -> Vehicle:
        """Register a new active vehicle."""
        with self.lock:
            require_role(admin, Role.ADMIN, "Only admins can manage vehicles.")
            name = payload.get("name")
            plate = payload.get("plate")
            if not isinstance(name, str) or not name.strip():
                raise ValidationError("Vehicle name is required.")
            if not isinstance(plate, str) or not plate.strip():
                raise ValidationError("License plate is required.")
            if self.repository.get_by_plate(plate.strip()) is not None:
                raise ConflictError("Vehicle with this plate already exists.")
            vehicle = Vehicle(
                id=uuid4(),
                name=name.strip(),
                plate=plate.strip(),
                status=VehicleStatus.ACTIVE,
            )
            self.repository.add(vehicle)
            logger.info("Vehicle %s (%s) added", vehicle.id, vehicle.plate)
            return vehicle

    def update_status(
        self, vehicle_id: UUID, status: VehicleStatus | str, admin: User
    ) -> Vehicle:
        """Change a vehicle's status; leaving Active frees its future sessions."""
        with self.lock:
            require_role(admin, Role.ADMIN, "Only admins can manage vehicles.")
            new_status = parse_enum(status, VehicleStatus, "status")
            if new_status is None:
                raise ValidationError("Missing required field: status.")
            vehicle = self.get_vehicle(vehicle_id)
            updated = replace(vehicle, status=new_status)
            self.repository.save(updated)
            if new_status != VehicleStatus.ACTIVE:
                self.session_service.unassign_vehicle(
                    updated, f"Status: {new_status}"
                )
            return updated

    def delete_vehicle(self, vehicle_id: UUID, admin: User) -> None:
        """Remove a vehicle and detach it from future sessions."""
        with self.lock:
            require_role(admin, Role.ADMIN, "Only admins can manage vehicles.")
            vehicle = self.get_vehicle(vehicle_id)
            self.repository.delete(vehicle.id)
            self.session_service.unassign_vehicle(vehicle, "Deleted")
            logger.info("Vehicle %s deleted", vehicle.id)
