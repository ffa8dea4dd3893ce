"""
Domain errors for the reservation engine.

Every failure a caller can observe is a ReservationError carrying an
ErrorCode and a user-safe message. Services raise these; only the API layer
maps them to HTTP responses (see seating.api.errors).

Categories:
  NotFoundError               - entity id unknown
  PreconditionFailedError     - operation not allowed in the current state
  ConflictError               - lost race or incompatible hold/order state
  InsufficientAvailabilityError - auto selection could not find enough seats
  InvalidArgumentError        - malformed input
"""

from enum import Enum
from typing import Iterable


class ErrorCode(Enum):
    """Domain error codes."""

    VENUE_NOT_FOUND = "VENUE_NOT_FOUND"
    VENUE_CONFIGURATION_NOT_FOUND = "VENUE_CONFIGURATION_NOT_FOUND"
    SEAT_NOT_FOUND = "SEAT_NOT_FOUND"
    TABLE_NOT_FOUND = "TABLE_NOT_FOUND"
    EVENT_NOT_FOUND = "EVENT_NOT_FOUND"
    ORDER_NOT_FOUND = "ORDER_NOT_FOUND"
    PRECONDITION_FAILED = "PRECONDITION_FAILED"
    SEAT_UNAVAILABLE = "SEAT_UNAVAILABLE"
    INCONSISTENT_HOLD_STATE = "INCONSISTENT_HOLD_STATE"
    ORDER_NOT_ACTIVE = "ORDER_NOT_ACTIVE"
    ORDER_EXPIRED = "ORDER_EXPIRED"
    ORDER_ALREADY_COMPLETED = "ORDER_ALREADY_COMPLETED"
    SEAT_NOT_HELD_BY_ORDER = "SEAT_NOT_HELD_BY_ORDER"
    INSUFFICIENT_AVAILABILITY = "INSUFFICIENT_AVAILABILITY"
    INVALID_ARGUMENT = "INVALID_ARGUMENT"


class ReservationError(Exception):
    """Base domain error with code and user-safe message."""

    def __init__(self, code: ErrorCode, message: str) -> None:
        super().__init__(message)
        self.code = code
        self.message = message

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"


# --- NotFound ---------------------------------------------------------------


class NotFoundError(ReservationError):
    """Raised when an entity id is unknown."""

    def __init__(self, code: ErrorCode, kind: str, entity_id: str) -> None:
        super().__init__(code=code, message=f"{kind} not found")
        self.entity_id = entity_id


class VenueNotFoundError(NotFoundError):
    def __init__(self, venue_id: str) -> None:
        super().__init__(ErrorCode.VENUE_NOT_FOUND, "Venue", venue_id)


class VenueConfigurationNotFoundError(NotFoundError):
    def __init__(self, venue_config_id: str) -> None:
        super().__init__(ErrorCode.VENUE_CONFIGURATION_NOT_FOUND, "Venue configuration", venue_config_id)


class SeatNotFoundError(NotFoundError):
    def __init__(self, seat_id: str) -> None:
        super().__init__(ErrorCode.SEAT_NOT_FOUND, "Seat", seat_id)


class TableNotFoundError(NotFoundError):
    def __init__(self, table_id: str) -> None:
        super().__init__(ErrorCode.TABLE_NOT_FOUND, "Table", table_id)


class EventNotFoundError(NotFoundError):
    def __init__(self, event_id: str) -> None:
        super().__init__(ErrorCode.EVENT_NOT_FOUND, "Event", event_id)


class OrderNotFoundError(NotFoundError):
    def __init__(self, order_id: str) -> None:
        super().__init__(ErrorCode.ORDER_NOT_FOUND, "Order", order_id)


# --- PreconditionFailed -----------------------------------------------------


class PreconditionFailedError(ReservationError):
    """Raised when an operation is not allowed in the current state."""

    def __init__(self, message: str) -> None:
        super().__init__(code=ErrorCode.PRECONDITION_FAILED, message=message)


# --- Conflict ---------------------------------------------------------------


class ConflictError(ReservationError):
    """Base for hold and order state conflicts."""


class SeatUnavailableError(ConflictError):
    """Raised when a seat is held or reserved by another order."""

    def __init__(self, seat_id: str) -> None:
        super().__init__(code=ErrorCode.SEAT_UNAVAILABLE, message="Seat is not available")
        self.seat_id = seat_id


class InconsistentHoldStateError(ConflictError):
    """Raised when an order's seats are no longer held by it at commit time."""

    def __init__(self, order_id: str, seat_ids: Iterable[str]) -> None:
        super().__init__(
            code=ErrorCode.INCONSISTENT_HOLD_STATE,
            message="Order holds changed before completion",
        )
        self.order_id = order_id
        self.seat_ids = sorted(seat_ids)


class OrderNotActiveError(ConflictError):
    def __init__(self, order_id: str, status: str) -> None:
        super().__init__(code=ErrorCode.ORDER_NOT_ACTIVE, message=f"Order is {status}")
        self.order_id = order_id
        self.status = status


class OrderExpiredError(ConflictError):
    def __init__(self, order_id: str) -> None:
        super().__init__(code=ErrorCode.ORDER_EXPIRED, message="Order has expired")
        self.order_id = order_id


class OrderAlreadyCompletedError(ConflictError):
    def __init__(self, order_id: str) -> None:
        super().__init__(code=ErrorCode.ORDER_ALREADY_COMPLETED, message="Order is already completed")
        self.order_id = order_id


class SeatNotHeldByOrderError(ConflictError):
    def __init__(self, order_id: str, seat_id: str) -> None:
        super().__init__(code=ErrorCode.SEAT_NOT_HELD_BY_ORDER, message="Seat is not held by this order")
        self.order_id = order_id
        self.seat_id = seat_id


# --- InsufficientAvailability / InvalidArgument -----------------------------


class InsufficientAvailabilityError(ReservationError):
    """Raised when auto selection cannot satisfy the requested seat count."""

    def __init__(self, requested: int) -> None:
        super().__init__(
            code=ErrorCode.INSUFFICIENT_AVAILABILITY,
            message=f"Not enough seats available. Requested: {requested}",
        )
        self.requested = requested


class InvalidArgumentError(ReservationError):
    def __init__(self, message: str) -> None:
        super().__init__(code=ErrorCode.INVALID_ARGUMENT, message=message)
