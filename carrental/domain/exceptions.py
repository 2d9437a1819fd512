"""Domain exceptions for Car Rental Service."""


class DomainException(Exception):
    """Base domain exception."""

    def __init__(self, message: str, code: str = "DOMAIN_ERROR") -> None:
        self.message = message
        self.code = code
        super().__init__(self.message)


class NotFoundException(DomainException):
    """Entity or lookup row not found."""

    def __init__(self, message: str) -> None:
        super().__init__(message=message, code="NOT_FOUND")


class BadRequestException(DomainException):
    """Business rule violation."""

    def __init__(self, message: str, code: str = "BAD_REQUEST") -> None:
        super().__init__(message=message, code=code)


class CarUnavailableException(BadRequestException):
    """Car already booked for an overlapping period."""

    def __init__(self, car_id: int) -> None:
        super().__init__(
            message=f"Car {car_id} is not available for the requested period.",
            code="CAR_UNAVAILABLE",
        )


class UnauthorizedException(DomainException):
    """Caller does not own the resource or lacks the role for it."""

    def __init__(self, message: str = "You are not allowed to perform this action.") -> None:
        super().__init__(message=message, code="UNAUTHORIZED")


class UserAlreadyExistsException(DomainException):
    """Registration with an email that is already taken."""

    def __init__(self, email: str = None) -> None:
        super().__init__(
            message="A user with this email already exists.",
            code="USER_ALREADY_EXISTS",
        )
        self.email = email


class InvalidCredentialsException(DomainException):
    """Invalid credentials exception."""

    def __init__(self) -> None:
        super().__init__(
            message="Invalid email or password",
            code="INVALID_CREDENTIALS",
        )


class InvalidTokenException(DomainException):
    """Invalid token exception."""

    def __init__(self, message: str = "Invalid token") -> None:
        super().__init__(message=message, code="INVALID_TOKEN")


class TokenExpiredException(DomainException):
    """Token expired exception."""

    def __init__(self) -> None:
        super().__init__(
            message="Token has expired",
            code="TOKEN_EXPIRED",
        )
