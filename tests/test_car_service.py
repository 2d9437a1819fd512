"""Tests for CarService."""
import pytest
from datetime import datetime, timedelta
from decimal import Decimal

from carrental.domain.exceptions import (
    BadRequestException,
    CarUnavailableException,
    NotFoundException,
)
from carrental.domain.models import BookingStatusName, Car, Lookup, MaintenanceRequest, User
from carrental.domain.schemas import CarRequest, CarSearchRequest
from carrental.infrastructure.repositories_postgres import (
    PostgresLookupRepository,
    PostgresMaintenanceRequestRepository,
)
from carrental.services.car_service import CarService, validate_window


def _car_request(brand: Lookup, status: Lookup, **overrides) -> CarRequest:
    data = {
        "brand_id": brand.id,
        "model_name": "Yaris",
        "year": 2023,
        "fuel_type": "Hybrid",
        "transmission": "Automatic",
        "seats": 5,
        "daily_rate": Decimal("70.00"),
        "status_id": status.id,
    }
    data.update(overrides)
    return CarRequest(**data)


def test_validate_window_rejects_empty_window() -> None:
    moment = datetime(2025, 1, 1)

    with pytest.raises(BadRequestException) as exc_info:
        validate_window(moment, moment)

    assert exc_info.value.message == "ToUtc must be after FromUtc"


@pytest.mark.asyncio
async def test_create_car(
    car_service: CarService, toyota: Lookup, available_status: Lookup
) -> None:
    """Test creating a car returns brand and status names."""
    car = await car_service.create(_car_request(toyota, available_status))

    assert car.id is not None
    assert car.brand_name == "Toyota"
    assert car.status_name == "Available"
    assert car.daily_rate == Decimal("70.00")


@pytest.mark.asyncio
async def test_create_duplicate_car_fails(
    car_service: CarService, toyota: Lookup, available_status: Lookup
) -> None:
    """Test (brand, model, year) uniqueness, ignoring model case."""
    await car_service.create(_car_request(toyota, available_status))

    with pytest.raises(BadRequestException) as exc_info:
        await car_service.create(_car_request(toyota, available_status, model_name="yaris"))

    assert exc_info.value.message == "A car with the same brand/model/year already exists."


@pytest.mark.asyncio
async def test_create_car_unknown_brand(
    car_service: CarService, available_status: Lookup
) -> None:
    with pytest.raises(NotFoundException) as exc_info:
        await car_service.create(
            _car_request(Lookup(id=999, name="Nope"), available_status)
        )

    assert exc_info.value.message == "Brand 999 not found"


@pytest.mark.asyncio
async def test_update_car_keeps_own_identity(
    car_service: CarService, car: Car, toyota: Lookup, available_status: Lookup
) -> None:
    """Test that updating a car does not collide with itself."""
    updated = await car_service.update(
        car.id,
        _car_request(toyota, available_status, model_name="Corolla", year=2022,
                     daily_rate=Decimal("95.50")),
    )

    assert updated.id == car.id
    assert updated.daily_rate == Decimal("95.50")


@pytest.mark.asyncio
async def test_update_car_into_duplicate_fails(
    car_service: CarService, car: Car, toyota: Lookup, available_status: Lookup
) -> None:
    other = await car_service.create(_car_request(toyota, available_status))

    with pytest.raises(BadRequestException):
        await car_service.update(
            other.id, _car_request(toyota, available_status, model_name="Corolla", year=2022)
        )


@pytest.mark.asyncio
async def test_set_status(
    car_service: CarService,
    car_status_repository: PostgresLookupRepository,
    car: Car,
) -> None:
    maintenance = await car_status_repository.get_by_name("maintenance")

    await car_service.set_status(car.id, maintenance.id)

    assert (await car_service.get_by_id(car.id)).status_name == "Maintenance"


@pytest.mark.asyncio
async def test_set_unknown_status_fails(car_service: CarService, car: Car) -> None:
    with pytest.raises(NotFoundException):
        await car_service.set_status(car.id, 999)


@pytest.mark.asyncio
async def test_delete_car_with_bookings_fails(
    car_service: CarService, make_booking, customer: User, car: Car, future_window: tuple
) -> None:
    await make_booking(customer, car, *future_window)

    with pytest.raises(BadRequestException) as exc_info:
        await car_service.delete(car.id)

    assert exc_info.value.message == "Cannot delete a car that has bookings."


@pytest.mark.asyncio
async def test_delete_car_removes_maintenance_requests(
    car_service: CarService,
    maintenance_repository: PostgresMaintenanceRequestRepository,
    agent: User,
    car: Car,
) -> None:
    request = await maintenance_repository.add(
        MaintenanceRequest(car_id=car.id, reported_by_id=agent.id, description="Flat tyre")
    )

    await car_service.delete(car.id)

    with pytest.raises(NotFoundException):
        await car_service.get_by_id(car.id)
    assert await maintenance_repository.get_by_id(request.id) is None


@pytest.mark.asyncio
async def test_availability_overlap_and_adjacent(
    car_service: CarService, make_booking, customer: User, car: Car
) -> None:
    """Test a Confirmed booking blocks overlapping windows only."""
    # Booked [Jan 10 10:00, Jan 12 10:00)
    await make_booking(customer, car, datetime(2030, 1, 10, 10), datetime(2030, 1, 12, 10))

    inside = await car_service.is_available(
        car.id, datetime(2030, 1, 11, 0, 0), datetime(2030, 1, 11, 23, 59)
    )
    adjacent = await car_service.is_available(
        car.id, datetime(2030, 1, 12, 10, 0), datetime(2030, 1, 13, 10, 0)
    )

    assert inside is False
    assert adjacent is True


@pytest.mark.asyncio
async def test_cancelled_and_completed_bookings_do_not_block(
    car_service: CarService, make_booking, customer: User, car: Car, future_window: tuple
) -> None:
    await make_booking(customer, car, *future_window, status=BookingStatusName.CANCELLED)
    await make_booking(customer, car, *future_window, status=BookingStatusName.COMPLETED)

    assert await car_service.is_available(car.id, *future_window) is True


@pytest.mark.asyncio
async def test_ensure_available_raises(
    car_service: CarService, make_booking, customer: User, car: Car, future_window: tuple
) -> None:
    await make_booking(customer, car, *future_window, status=BookingStatusName.PENDING)

    with pytest.raises(CarUnavailableException):
        await car_service.ensure_available(car.id, *future_window)


@pytest.mark.asyncio
async def test_is_available_missing_car(car_service: CarService, future_window: tuple) -> None:
    with pytest.raises(NotFoundException):
        await car_service.is_available(999, *future_window)


@pytest.mark.asyncio
async def test_search_filters(
    car_service: CarService, car: Car, toyota: Lookup, available_status: Lookup
) -> None:
    """Test attribute filters combine."""
    await car_service.create(
        _car_request(toyota, available_status, transmission="Manual", seats=2,
                     daily_rate=Decimal("40.00"))
    )

    automatic = await car_service.search(CarSearchRequest(transmission="automatic"))
    roomy_and_cheap = await car_service.search(
        CarSearchRequest(min_seats=4, max_daily_rate=Decimal("99.00"))
    )

    assert [c.model_name for c in automatic] == ["Corolla"]
    assert roomy_and_cheap == []


@pytest.mark.asyncio
async def test_search_excludes_booked_cars(
    car_service: CarService,
    make_booking,
    customer: User,
    car: Car,
    toyota: Lookup,
    available_status: Lookup,
    future_window: tuple,
) -> None:
    free = await car_service.create(_car_request(toyota, available_status))
    await make_booking(customer, car, *future_window)

    result = await car_service.search(
        CarSearchRequest(from_utc=future_window[0], to_utc=future_window[1])
    )

    assert [c.id for c in result] == [free.id]


@pytest.mark.asyncio
async def test_search_requires_both_window_ends(
    car_service: CarService, future_window: tuple
) -> None:
    with pytest.raises(BadRequestException) as exc_info:
        await car_service.search(CarSearchRequest(from_utc=future_window[0]))

    assert exc_info.value.message == "Both FromUtc and ToUtc are required for availability"


@pytest.mark.asyncio
async def test_search_by_brand(car_service: CarService, car: Car) -> None:
    """Test brand lookup by case-insensitive substring."""
    assert [c.id for c in await car_service.search_by_brand("toy")] == [car.id]
    assert await car_service.search_by_brand("Tesla") == []
    assert await car_service.search_by_brand("  ") == []
