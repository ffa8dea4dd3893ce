"""
Pydantic schemas for order-related request/response validation.
"""

from typing import Optional
from pydantic import BaseModel, Field

from seating.domain.models import Order, OrderStatus, OrderSummary
from seating.schemas.layout import SeatResponse


class OrderCreate(BaseModel):
    user_id: str = Field(..., min_length=1, max_length=64)
    event_id: str
    # Epoch seconds; defaults to now + ORDER_HOLD_SECONDS
    expires: Optional[float] = Field(None, allow_inf_nan=False)


class OrderContinue(BaseModel):
    expires: float = Field(..., allow_inf_nan=False)


class SeatHoldRequest(BaseModel):
    seat_id: str


class AutoSelectRequest(BaseModel):
    num_seats: int = Field(..., le=100)
    seat_class_preference: list[str] = Field(default_factory=list)


class OrderResponse(BaseModel):
    id: str
    user_id: str
    event_id: str
    status: OrderStatus
    expires: float
    created_at: float
    held_seats: list[str]

    @classmethod
    def from_order(cls, order: Order) -> "OrderResponse":
        return cls(
            id=order.id,
            user_id=order.user_id,
            event_id=order.event_id,
            status=order.status,
            expires=order.expires,
            created_at=order.created_at,
            held_seats=sorted(order.held_seats),
        )


class OrderSummaryResponse(BaseModel):
    order: OrderResponse
    seats: list[SeatResponse]
    seat_count: int

    @classmethod
    def from_summary(cls, summary: OrderSummary) -> "OrderSummaryResponse":
        return cls(
            order=OrderResponse.from_order(summary.order),
            seats=[SeatResponse.from_seat(seat) for seat in summary.seats],
            seat_count=summary.seat_count,
        )


class AutoSelectResponse(BaseModel):
    order_id: str
    seat_ids: list[str]


class OrderListResponse(BaseModel):
    orders: list[OrderResponse]
    page: int
    perpage: int
