"""Car inventory, search and availability routes."""
import logging
from datetime import datetime
from typing import List

from fastapi import APIRouter, Depends, Query, Response, status
from prometheus_client import Counter, Histogram

from carrental.domain.exceptions import CarUnavailableException
from carrental.domain.schemas import CarInfo, CarRequest, CarSearchRequest, CarStatusUpdateRequest
from carrental.services.car_service import CarService

from ..dependencies import get_car_service
from ..security import Principal, guard

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/cars", tags=["cars"])

# Prometheus metrics
availability_counter = Counter(
    "car_availability_checks_total", "Total number of availability checks", ["result"]
)
search_duration = Histogram("car_search_duration_seconds", "Time spent searching cars")


@router.get("", response_model=List[CarInfo])
async def list_cars(service: CarService = Depends(get_car_service)) -> List[CarInfo]:
    return await service.get_all()


@router.post("/search", response_model=List[CarInfo])
async def search_cars(
    request: CarSearchRequest,
    service: CarService = Depends(get_car_service),
) -> List[CarInfo]:
    """Filter cars; with a window, only cars free for the whole window."""
    with search_duration.time():
        return await service.search(request)


@router.get("/by-brand/{brand_name}", response_model=List[CarInfo])
async def cars_by_brand(
    brand_name: str, service: CarService = Depends(get_car_service)
) -> List[CarInfo]:
    return await service.search_by_brand(brand_name)


@router.get("/{car_id}", response_model=CarInfo)
async def get_car(car_id: int, service: CarService = Depends(get_car_service)) -> CarInfo:
    return await service.get_by_id(car_id)


@router.get("/{car_id}/availability", status_code=status.HTTP_204_NO_CONTENT)
async def check_availability(
    car_id: int,
    from_utc: datetime = Query(...),
    to_utc: datetime = Query(...),
    service: CarService = Depends(get_car_service),
) -> Response:
    """204 when the car is free for the window, 409 when it is not."""
    try:
        await service.ensure_available(car_id, from_utc, to_utc)
    except CarUnavailableException:
        availability_counter.labels(result="unavailable").inc()
        raise
    availability_counter.labels(result="available").inc()
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("", response_model=CarInfo, status_code=status.HTTP_201_CREATED)
async def create_car(
    request: CarRequest,
    _: Principal = Depends(guard("cars.create")),
    service: CarService = Depends(get_car_service),
) -> CarInfo:
    return await service.create(request)


@router.put("/{car_id}", response_model=CarInfo)
async def update_car(
    car_id: int,
    request: CarRequest,
    _: Principal = Depends(guard("cars.update")),
    service: CarService = Depends(get_car_service),
) -> CarInfo:
    return await service.update(car_id, request)


@router.patch("/{car_id}/status", status_code=status.HTTP_204_NO_CONTENT)
async def set_car_status(
    car_id: int,
    request: CarStatusUpdateRequest,
    _: Principal = Depends(guard("cars.set_status")),
    service: CarService = Depends(get_car_service),
) -> Response:
    await service.set_status(car_id, request.status_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("/{car_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_car(
    car_id: int,
    _: Principal = Depends(guard("cars.delete")),
    service: CarService = Depends(get_car_service),
) -> Response:
    await service.delete(car_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
