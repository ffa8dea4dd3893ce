"""
Translation of domain errors into HTTP responses.

Services raise ReservationError subclasses; this is the only place that
knows about status codes. Bodies look like {"code": "...", "detail": "..."}.
"""

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from seating.core.logging import get_logger
from seating.domain.errors import (
    ConflictError,
    InsufficientAvailabilityError,
    InvalidArgumentError,
    NotFoundError,
    PreconditionFailedError,
    ReservationError,
)

logger = get_logger(__name__)

STATUS_BY_CATEGORY: list[tuple[type[ReservationError], int]] = [
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (PreconditionFailedError, status.HTTP_412_PRECONDITION_FAILED),
    (ConflictError, status.HTTP_409_CONFLICT),
    (InsufficientAvailabilityError, status.HTTP_409_CONFLICT),
    (InvalidArgumentError, status.HTTP_400_BAD_REQUEST),
]


def status_for(exc: ReservationError) -> int:
    for category, status_code in STATUS_BY_CATEGORY:
        if isinstance(exc, category):
            return status_code
    return status.HTTP_400_BAD_REQUEST


async def reservation_error_handler(request: Request, exc: ReservationError) -> JSONResponse:
    status_code = status_for(exc)
    logger.info(
        "request_rejected",
        code=exc.code.value,
        status_code=status_code,
        detail=exc.message,
    )
    return JSONResponse(
        status_code=status_code,
        content={"code": exc.code.value, "detail": exc.message},
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ReservationError, reservation_error_handler)
