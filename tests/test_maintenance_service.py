"""Tests for MaintenanceRequestService."""
import pytest
from datetime import timedelta

from carrental.domain.exceptions import (
    BadRequestException,
    NotFoundException,
    UnauthorizedException,
)
from carrental.domain.models import Car, RoleName, User
from carrental.domain.schemas import MaintenanceRequestCreate
from carrental.infrastructure.repositories_postgres import (
    PostgresBookingRepository,
    PostgresCarRepository,
    PostgresMaintenanceRequestRepository,
)
from carrental.services.maintenance_service import MaintenanceRequestService
from carrental.utils import utcnow


@pytest.fixture
def maintenance_service(
    maintenance_repository: PostgresMaintenanceRequestRepository,
    car_repository: PostgresCarRepository,
    booking_repository: PostgresBookingRepository,
) -> MaintenanceRequestService:
    """Maintenance service with a 1 day lead and a 30 day window."""
    return MaintenanceRequestService(
        maintenance_repository=maintenance_repository,
        car_repository=car_repository,
        booking_repository=booking_repository,
        lead_days=1,
        window_days=30,
    )


@pytest.mark.asyncio
async def test_staff_reports_any_car(
    maintenance_service: MaintenanceRequestService, agent: User, car: Car
) -> None:
    """Test staff need no rental to report."""
    request = await maintenance_service.create(
        agent.id,
        RoleName.RENTAL_AGENT.value,
        MaintenanceRequestCreate(car_id=car.id, description="  Brake noise  "),
    )

    assert request.description == "Brake noise"
    assert request.is_resolved is False
    assert request.reported_by_id == agent.id


@pytest.mark.asyncio
async def test_customer_with_recent_rental_reports(
    maintenance_service: MaintenanceRequestService,
    make_booking,
    customer: User,
    car: Car,
    past_window: tuple,
) -> None:
    await make_booking(customer, car, *past_window)

    request = await maintenance_service.create(
        customer.id,
        RoleName.CUSTOMER.value,
        MaintenanceRequestCreate(car_id=car.id, description="Check engine light"),
    )

    assert [r.id for r in await maintenance_service.get_mine(customer.id)] == [request.id]


@pytest.mark.asyncio
async def test_customer_with_upcoming_rental_reports(
    maintenance_service: MaintenanceRequestService,
    make_booking,
    customer: User,
    car: Car,
) -> None:
    """Test a rental starting within the lead time counts."""
    start = utcnow() + timedelta(hours=12)
    await make_booking(customer, car, start, start + timedelta(days=2))

    request = await maintenance_service.create(
        customer.id,
        RoleName.CUSTOMER.value,
        MaintenanceRequestCreate(car_id=car.id, description="Scratched door"),
    )

    assert request.id is not None


@pytest.mark.asyncio
async def test_customer_without_recent_rental_fails(
    maintenance_service: MaintenanceRequestService,
    make_booking,
    customer: User,
    car: Car,
) -> None:
    """Test rentals far in the past or future do not count."""
    old_end = utcnow() - timedelta(days=60)
    await make_booking(customer, car, old_end - timedelta(days=2), old_end)
    far_start = utcnow() + timedelta(days=20)
    await make_booking(customer, car, far_start, far_start + timedelta(days=1))

    with pytest.raises(UnauthorizedException) as exc_info:
        await maintenance_service.create(
            customer.id,
            RoleName.CUSTOMER.value,
            MaintenanceRequestCreate(car_id=car.id, description="Flat tyre"),
        )

    assert exc_info.value.message == "You can only report maintenance for cars you rented recently."


@pytest.mark.asyncio
async def test_blank_description_fails(
    maintenance_service: MaintenanceRequestService, agent: User, car: Car
) -> None:
    with pytest.raises(BadRequestException) as exc_info:
        await maintenance_service.create(
            agent.id,
            RoleName.ADMIN.value,
            MaintenanceRequestCreate(car_id=car.id, description="   "),
        )

    assert exc_info.value.message == "Issue description is required."


@pytest.mark.asyncio
async def test_unknown_car_fails(
    maintenance_service: MaintenanceRequestService, agent: User
) -> None:
    with pytest.raises(NotFoundException):
        await maintenance_service.create(
            agent.id,
            RoleName.RENTAL_AGENT.value,
            MaintenanceRequestCreate(car_id=999, description="Wipers"),
        )


@pytest.mark.asyncio
async def test_resolve_removes_from_open_list(
    maintenance_service: MaintenanceRequestService, agent: User, car: Car
) -> None:
    first = await maintenance_service.create(
        agent.id, RoleName.RENTAL_AGENT.value,
        MaintenanceRequestCreate(car_id=car.id, description="Oil change"),
    )
    second = await maintenance_service.create(
        agent.id, RoleName.RENTAL_AGENT.value,
        MaintenanceRequestCreate(car_id=car.id, description="Tyre rotation"),
    )

    resolved = await maintenance_service.resolve(first.id)

    assert resolved.is_resolved is True
    assert [r.id for r in await maintenance_service.get_open()] == [second.id]
    assert len(await maintenance_service.get_by_car(car.id)) == 2


@pytest.mark.asyncio
async def test_resolve_twice_fails(
    maintenance_service: MaintenanceRequestService, agent: User, car: Car
) -> None:
    request = await maintenance_service.create(
        agent.id, RoleName.RENTAL_AGENT.value,
        MaintenanceRequestCreate(car_id=car.id, description="Battery"),
    )
    await maintenance_service.resolve(request.id)

    with pytest.raises(BadRequestException) as exc_info:
        await maintenance_service.resolve(request.id)

    assert exc_info.value.message == "Request is already resolved."


@pytest.mark.asyncio
async def test_get_missing_request(maintenance_service: MaintenanceRequestService) -> None:
    with pytest.raises(NotFoundException):
        await maintenance_service.get_by_id(999)
