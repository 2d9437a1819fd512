"""Mapping of domain exceptions to HTTP responses."""
import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from prometheus_client import Counter

from carrental.domain.exceptions import (
    BadRequestException,
    CarUnavailableException,
    DomainException,
    InvalidCredentialsException,
    InvalidTokenException,
    NotFoundException,
    TokenExpiredException,
    UnauthorizedException,
    UserAlreadyExistsException,
)

logger = logging.getLogger(__name__)

domain_errors_counter = Counter(
    "domain_errors_total", "Total number of domain errors returned", ["code"]
)

# Most specific first: CarUnavailableException is also a BadRequestException.
STATUS_CODES = (
    (CarUnavailableException, status.HTTP_409_CONFLICT),
    (UserAlreadyExistsException, status.HTTP_409_CONFLICT),
    (NotFoundException, status.HTTP_404_NOT_FOUND),
    (BadRequestException, status.HTTP_400_BAD_REQUEST),
    (UnauthorizedException, status.HTTP_403_FORBIDDEN),
    (InvalidCredentialsException, status.HTTP_401_UNAUTHORIZED),
    (InvalidTokenException, status.HTTP_401_UNAUTHORIZED),
    (TokenExpiredException, status.HTTP_401_UNAUTHORIZED),
)


def status_code_for(exc: DomainException) -> int:
    for exc_class, code in STATUS_CODES:
        if isinstance(exc, exc_class):
            return code
    return status.HTTP_400_BAD_REQUEST


async def domain_exception_handler(request: Request, exc: DomainException) -> JSONResponse:
    status_code = status_code_for(exc)
    domain_errors_counter.labels(code=exc.code).inc()

    logger.warning(
        f"{request.method} {request.url.path} -> {status_code} {exc.code}: {exc.message}"
    )

    headers = None
    if status_code == status.HTTP_401_UNAUTHORIZED:
        headers = {"WWW-Authenticate": "Bearer"}
    return JSONResponse(
        status_code=status_code,
        content={"code": exc.code, "message": exc.message},
        headers=headers,
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"Unexpected error on {request.method} {request.url.path}: {exc}")
    domain_errors_counter.labels(code="INTERNAL_ERROR").inc()
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"code": "INTERNAL_ERROR", "message": "Internal server error"},
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(DomainException, domain_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
