"""Pickup/dropoff location routes."""
from typing import List

from fastapi import APIRouter, Depends, Response, status

from carrental.domain.models import Location
from carrental.domain.schemas import LocationRequest
from carrental.services.location_service import LocationService

from ..dependencies import get_location_service
from ..security import Principal, guard

router = APIRouter(prefix="/locations", tags=["locations"])


@router.get("", response_model=List[Location])
async def list_locations(service: LocationService = Depends(get_location_service)):
    return await service.get_all()


@router.get("/{location_id}", response_model=Location)
async def get_location(location_id: int, service: LocationService = Depends(get_location_service)):
    return await service.get_by_id(location_id)


@router.post("", response_model=Location, status_code=status.HTTP_201_CREATED)
async def create_location(
    request: LocationRequest,
    _: Principal = Depends(guard("locations.create")),
    service: LocationService = Depends(get_location_service),
):
    return await service.create(request)


@router.put("/{location_id}", response_model=Location)
async def update_location(
    location_id: int,
    request: LocationRequest,
    _: Principal = Depends(guard("locations.update")),
    service: LocationService = Depends(get_location_service),
):
    return await service.update(location_id, request)


@router.delete("/{location_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_location(
    location_id: int,
    _: Principal = Depends(guard("locations.delete")),
    service: LocationService = Depends(get_location_service),
) -> Response:
    await service.delete(location_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
