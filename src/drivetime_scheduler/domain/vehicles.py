"""Domain models for school vehicles."""

from dataclasses import dataclass
from enum import StrEnum
from uuid import UUID


class VehicleStatus(StrEnum):
    """Lifecycle states of a vehicle."""

    ACTIVE = "Active"
    MAINTENANCE = "Maintenance"
    RETIRED = "Retired"


@dataclass(frozen=True)
class Vehicle:
    """A car that practice sessions can be assigned."""

    id: UUID
    name: str
    plate: str
    status: VehicleStatus
