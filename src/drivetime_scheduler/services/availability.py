"""Vehicle availability checks."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from drivetime_scheduler.domain.sessions import VEHICLE_HOLDING_STATUSES
from drivetime_scheduler.domain.vehicles import Vehicle, VehicleStatus
from drivetime_scheduler.services.repositories import (
    SessionRepository,
    VehicleRepository,
)


@dataclass
class VehicleAvailabilityChecker:
    """Answers whether a vehicle is free for a time window."""

    vehicle_repository: VehicleRepository
    session_repository: SessionRepository

    def is_available(
        self,
        vehicle_id: UUID,
        start: datetime,
        end: datetime,
        exclude_session_id: UUID | None = None,
    ) -> bool:
        """Return True when the vehicle is active and not held by another session."""
        vehicle = self.vehicle_repository.get(vehicle_id)
        if vehicle is None or vehicle.status != VehicleStatus.ACTIVE:
            return False
        for session in self.session_repository.list_for_vehicle(vehicle_id):
            if session.id == exclude_session_id:
                continue
            if session.status not in VEHICLE_HOLDING_STATUSES:
                continue
            if session.overlaps(start, end):
                return False
        return True

    def available_vehicles(
        self,
        start: datetime,
        end: datetime,
        exclude_session_id: UUID | None = None,
    ) -> list[Vehicle]:
        """Return every vehicle that could be assigned to the window."""
        return [
            vehicle
            for vehicle in self.vehicle_repository.list_all()
            if self.is_available(vehicle.id, start, end, exclude_session_id)
        ]
