"""In-memory vehicle repository."""

from dataclasses import dataclass, field
from uuid import UUID

from drivetime_scheduler.domain.vehicles import Vehicle
from drivetime_scheduler.services.repositories import VehicleRepository


@dataclass
class InMemoryVehicleRepository(VehicleRepository):
    """Dictionary-backed vehicle store."""

    vehicles: dict[UUID, Vehicle] = field(default_factory=dict)

    def add(self, vehicle: Vehicle) -> None:
        self.vehicles[vehicle.id] = vehicle

    def save(self, vehicle: Vehicle) -> None:
        self.vehicles[vehicle.id] = vehicle

    def get(self, vehicle_id: UUID) -> Vehicle | None:
        return self.vehicles.get(vehicle_id)

    def get_by_plate(self, plate: str) -> Vehicle | None:
        wanted = plate.strip().upper()
        for vehicle in self.vehicles.values():
            if vehicle.plate.upper() == wanted:
                return vehicle
        return None

    def delete(self, vehicle_id: UUID) -> None:
        self.vehicles.pop(vehicle_id, None)

    def list_all(self) -> list[Vehicle]:
        return list(self.vehicles.values())
