"""Maintenance request routes."""
from typing import List

from fastapi import APIRouter, Depends, status

from carrental.domain.models import MaintenanceRequest
from carrental.domain.schemas import MaintenanceRequestCreate
from carrental.services.maintenance_service import MaintenanceRequestService

from ..dependencies import get_maintenance_service
from ..security import Principal, guard

router = APIRouter(prefix="/maintenancerequests", tags=["maintenance"])


@router.post("", response_model=MaintenanceRequest, status_code=status.HTTP_201_CREATED)
async def report_issue(
    request: MaintenanceRequestCreate,
    principal: Principal = Depends(guard("maintenance.create")),
    service: MaintenanceRequestService = Depends(get_maintenance_service),
) -> MaintenanceRequest:
    return await service.create(principal.user_id, principal.role, request)


@router.patch("/{request_id}/resolve", response_model=MaintenanceRequest)
async def resolve(
    request_id: int,
    _: Principal = Depends(guard("maintenance.resolve")),
    service: MaintenanceRequestService = Depends(get_maintenance_service),
) -> MaintenanceRequest:
    return await service.resolve(request_id)


@router.get("/open", response_model=List[MaintenanceRequest])
async def open_requests(
    _: Principal = Depends(guard("maintenance.open")),
    service: MaintenanceRequestService = Depends(get_maintenance_service),
) -> List[MaintenanceRequest]:
    return await service.get_open()


@router.get("/car/{car_id}", response_model=List[MaintenanceRequest])
async def requests_for_car(
    car_id: int,
    _: Principal = Depends(guard("maintenance.by_car")),
    service: MaintenanceRequestService = Depends(get_maintenance_service),
) -> List[MaintenanceRequest]:
    return await service.get_by_car(car_id)


@router.get("/mine", response_model=List[MaintenanceRequest])
async def my_requests(
    principal: Principal = Depends(guard("maintenance.mine")),
    service: MaintenanceRequestService = Depends(get_maintenance_service),
) -> List[MaintenanceRequest]:
    return await service.get_mine(principal.user_id)


@router.get("/{request_id}", response_model=MaintenanceRequest)
async def get_request(
    request_id: int,
    _: Principal = Depends(guard("maintenance.get")),
    service: MaintenanceRequestService = Depends(get_maintenance_service),
) -> MaintenanceRequest:
    return await service.get_by_id(request_id)
