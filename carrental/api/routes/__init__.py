"""API routers, one per resource."""
from . import (
    auth,
    booking_issues,
    bookings,
    cars,
    locations,
    maintenance_requests,
    payments,
    refunds,
    reviews,
    users,
)

routers = [
    auth.router,
    users.router,
    locations.router,
    cars.router,
    bookings.router,
    payments.router,
    refunds.router,
    reviews.router,
    maintenance_requests.router,
    booking_issues.router,
]

__all__ = ["routers"]
