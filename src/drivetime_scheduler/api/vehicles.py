"""Vehicle endpoints."""

from datetime import datetime
from uuid import UUID

from fastapi import APIRouter, Depends, Response, status

from drivetime_scheduler.api.dependencies import current_user, get_container
from drivetime_scheduler.api.schemas import VehicleCreateRequest, VehicleStatusRequest
from drivetime_scheduler.api.serializers import serialize_vehicle
from drivetime_scheduler.clock import ensure_aware
from drivetime_scheduler.containers import AppContainer
from drivetime_scheduler.domain.users import User

router = APIRouter(prefix="/vehicles", tags=["vehicles"])


@router.get("")
async def list_vehicles(
    actor: User = Depends(current_user),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    vehicles = container.vehicle_service.list_vehicles()
    return {"vehicles": [serialize_vehicle(vehicle) for vehicle in vehicles]}


@router.get("/available")
async def available_vehicles(
    start: datetime,
    end: datetime,
    exclude_session_id: UUID | None = None,
    actor: User = Depends(current_user),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    """Return vehicles free for the requested window."""
    timezone = container.settings.timezone
    vehicles = container.vehicle_service.available_vehicles(
        ensure_aware(start, timezone), ensure_aware(end, timezone), exclude_session_id
    )
    return {"vehicles": [serialize_vehicle(vehicle) for vehicle in vehicles]}


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_vehicle(
    body: VehicleCreateRequest,
    actor: User = Depends(current_user),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    vehicle = container.vehicle_service.create_vehicle(body.model_dump(), actor)
    return serialize_vehicle(vehicle)


@router.post("/{vehicle_id}/status")
async def update_vehicle_status(
    vehicle_id: UUID,
    body: VehicleStatusRequest,
    actor: User = Depends(current_user),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    vehicle = container.vehicle_service.update_status(vehicle_id, body.status, actor)
    return serialize_vehicle(vehicle)


@router.delete("/{vehicle_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_vehicle(
    vehicle_id: UUID,
    actor: User = Depends(current_user),
    container: AppContainer = Depends(get_container),
) -> Response:
    container.vehicle_service.delete_vehicle(vehicle_id, actor)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
