"""Tests for UserService and LocationService."""
import pytest

from carrental.domain.exceptions import (
    BadRequestException,
    NotFoundException,
    UserAlreadyExistsException,
)
from carrental.domain.models import Car, MaintenanceRequest, RoleName, User
from carrental.domain.schemas import (
    ChangeRoleRequest,
    LocationRequest,
    RegisterRequest,
    UserUpdateRequest,
)
from carrental.infrastructure.repositories_postgres import (
    PostgresBookingRepository,
    PostgresLocationRepository,
    PostgresLookupRepository,
    PostgresMaintenanceRequestRepository,
    PostgresUserRepository,
)
from carrental.services.location_service import LocationService
from carrental.services.user_service import (
    UserService,
    hash_password,
    normalize_email,
    verify_password,
)


@pytest.fixture
def user_service(
    user_repository: PostgresUserRepository,
    role_repository: PostgresLookupRepository,
    booking_repository: PostgresBookingRepository,
    maintenance_repository: PostgresMaintenanceRequestRepository,
) -> UserService:
    """User service fixture."""
    return UserService(
        user_repository=user_repository,
        role_repository=role_repository,
        booking_repository=booking_repository,
        maintenance_repository=maintenance_repository,
    )


@pytest.fixture
def location_service(
    location_repository: PostgresLocationRepository,
    booking_repository: PostgresBookingRepository,
) -> LocationService:
    return LocationService(location_repository, booking_repository)


def test_hash_and_verify_password() -> None:
    """Test bcrypt round trip."""
    password_hash = hash_password("s3cret!")

    assert password_hash.startswith("$2b$12$")
    assert verify_password("s3cret!", password_hash) is True
    assert verify_password("wrong", password_hash) is False
    assert verify_password("s3cret!", "plain-text") is False


def test_normalize_email() -> None:
    assert normalize_email("  John.Doe@Example.COM ") == "john.doe@example.com"


@pytest.mark.asyncio
async def test_create_user_by_role_name(user_service: UserService) -> None:
    user = await user_service.create(
        RegisterRequest(first_name=" Ann ", email="ann@example.com", password="secret1"),
        role_name="admin",
    )

    assert user.first_name == "Ann"
    assert user.role_name == RoleName.ADMIN.value


@pytest.mark.asyncio
async def test_get_all_and_get_me(
    user_service: UserService, customer: User, agent: User
) -> None:
    users = await user_service.get_all()
    me = await user_service.get_me(customer.id)

    assert {u.email for u in users} == {customer.email, agent.email}
    assert me.id == customer.id
    assert me.role_name == RoleName.CUSTOMER.value


@pytest.mark.asyncio
async def test_get_by_id_not_found(user_service: UserService) -> None:
    with pytest.raises(NotFoundException) as exc_info:
        await user_service.get_by_id(999)

    assert exc_info.value.message == "User not found."


@pytest.mark.asyncio
async def test_update_user(user_service: UserService, customer: User) -> None:
    """Test unset fields keep their value."""
    updated = await user_service.update(
        customer.id, UserUpdateRequest(last_name="Smith", phone_number="555-0100")
    )

    assert updated.first_name == customer.first_name
    assert updated.last_name == "Smith"
    assert updated.phone_number == "555-0100"
    assert updated.email == customer.email


@pytest.mark.asyncio
async def test_update_user_email_taken(
    user_service: UserService, customer: User, other_customer: User
) -> None:
    with pytest.raises(UserAlreadyExistsException):
        await user_service.update(customer.id, UserUpdateRequest(email="BOB@example.com"))


@pytest.mark.asyncio
async def test_change_role_by_id_and_name(
    user_service: UserService, customer: User, roles: dict
) -> None:
    by_name = await user_service.change_role(customer.id, ChangeRoleRequest(role_name="RentalAgent"))
    by_id = await user_service.change_role(
        customer.id, ChangeRoleRequest(role_id=roles[RoleName.ADMIN].id)
    )

    assert by_name.role_name == RoleName.RENTAL_AGENT.value
    assert by_id.role_name == RoleName.ADMIN.value


@pytest.mark.asyncio
async def test_change_role_invalid(user_service: UserService, customer: User) -> None:
    with pytest.raises(BadRequestException) as exc_info:
        await user_service.change_role(customer.id, ChangeRoleRequest(role_name="Superuser"))

    assert exc_info.value.message == "Invalid role."


def test_change_role_request_requires_a_role() -> None:
    with pytest.raises(ValueError):
        ChangeRoleRequest()


@pytest.mark.asyncio
async def test_set_active(user_service: UserService, customer: User) -> None:
    user = await user_service.set_active(customer.id, False)

    assert user.is_active is False


@pytest.mark.asyncio
async def test_delete_user_with_bookings_fails(
    user_service: UserService, make_booking, customer: User, car: Car, future_window: tuple
) -> None:
    await make_booking(customer, car, *future_window)

    with pytest.raises(BadRequestException) as exc_info:
        await user_service.delete(customer.id)

    assert exc_info.value.message == "Cannot delete a user that has bookings."


@pytest.mark.asyncio
async def test_delete_user_with_maintenance_report_fails(
    user_service: UserService,
    maintenance_repository: PostgresMaintenanceRequestRepository,
    agent: User,
    car: Car,
) -> None:
    """Test a staff reporter without bookings is still protected."""
    await maintenance_repository.add(
        MaintenanceRequest(car_id=car.id, reported_by_id=agent.id, description="Brake noise")
    )

    with pytest.raises(BadRequestException) as exc_info:
        await user_service.delete(agent.id)

    assert exc_info.value.message == "Cannot delete a user that reported maintenance requests."
    assert (await user_service.get_by_id(agent.id)).id == agent.id


@pytest.mark.asyncio
async def test_delete_user(user_service: UserService, other_customer: User) -> None:
    await user_service.delete(other_customer.id)

    with pytest.raises(NotFoundException):
        await user_service.get_by_id(other_customer.id)


@pytest.mark.asyncio
async def test_location_crud(location_service: LocationService, locations: list) -> None:
    """Test location create, update and delete."""
    created = await location_service.create(LocationRequest(name=" Harbour ", address="Pier 4"))
    assert created.name == "Harbour"

    updated = await location_service.update(
        created.id, LocationRequest(name="Harbour Front", address="Pier 5")
    )
    assert updated.address == "Pier 5"
    assert len(await location_service.get_all()) == len(locations) + 1

    await location_service.delete(created.id)
    with pytest.raises(NotFoundException):
        await location_service.get_by_id(created.id)


@pytest.mark.asyncio
async def test_delete_location_in_use_fails(
    location_service: LocationService,
    make_booking,
    customer: User,
    car: Car,
    locations: list,
    future_window: tuple,
) -> None:
    await make_booking(customer, car, *future_window)

    with pytest.raises(BadRequestException) as exc_info:
        await location_service.delete(locations[0].id)

    assert exc_info.value.message == "Cannot delete a location used by bookings."
