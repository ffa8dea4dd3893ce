from seating.domain.models import (
    Event,
    Order,
    OrderStatus,
    OrderSummary,
    Seat,
    SeatState,
    SeatAvailability,
    SeatStatus,
    Table,
    TableAvailability,
    Venue,
    VenueConfiguration,
)

__all__ = [
    "Venue",
    "VenueConfiguration",
    "Seat",
    "Table",
    "Event",
    "Order",
    "OrderStatus",
    "OrderSummary",
    "SeatAvailability",
    "TableAvailability",
    "SeatState",
    "SeatStatus",
]
