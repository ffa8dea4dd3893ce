"""
Order endpoints: seat holds, auto selection, checkout and expiry.
"""

from fastapi import APIRouter, Depends, status

from seating.api.deps import PageParams, get_engine, get_page_params
from seating.schemas.order import (
    AutoSelectRequest,
    AutoSelectResponse,
    OrderContinue,
    OrderCreate,
    OrderListResponse,
    OrderResponse,
    OrderSummaryResponse,
    SeatHoldRequest,
)
from seating.services.engine import ReservationEngine

router = APIRouter(prefix="/orders", tags=["Orders"])
users_router = APIRouter(prefix="/users", tags=["Orders"])


@router.post("/", response_model=OrderResponse, status_code=status.HTTP_201_CREATED)
async def create_order_endpoint(
    order_data: OrderCreate,
    engine: ReservationEngine = Depends(get_engine),
):
    """Open an order on an on-sale event. Seats are added separately."""
    order = await engine.create_order(order_data.user_id, order_data.event_id, order_data.expires)
    return OrderResponse.from_order(order)


# Declared before /{order_id} so "abandoned" is not taken for an id
@router.get("/abandoned", response_model=OrderListResponse)
async def list_abandoned_orders_endpoint(
    paging: PageParams = Depends(get_page_params),
    engine: ReservationEngine = Depends(get_engine),
):
    """Orders the expiry reaper abandoned, oldest expiry first."""
    orders = await engine.find_abandoned_orders(paging.page, paging.perpage)
    return OrderListResponse(
        orders=[OrderResponse.from_order(order) for order in orders],
        page=paging.page,
        perpage=paging.perpage,
    )


@router.get("/{order_id}", response_model=OrderSummaryResponse)
async def get_order_endpoint(order_id: str, engine: ReservationEngine = Depends(get_engine)):
    return OrderSummaryResponse.from_summary(await engine.get_order_summary(order_id))


@router.delete("/{order_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_order_endpoint(order_id: str, engine: ReservationEngine = Depends(get_engine)):
    """Delete an order that holds no seats."""
    await engine.delete_order(order_id)


@router.post("/{order_id}/seats", response_model=OrderResponse)
async def add_seat_endpoint(
    order_id: str,
    hold: SeatHoldRequest,
    engine: ReservationEngine = Depends(get_engine),
):
    """
    Hold one seat for the order.

    Exactly one of any number of concurrent holds on a free seat succeeds;
    the others get 409 SEAT_UNAVAILABLE immediately.
    """
    return OrderResponse.from_order(await engine.add_seat_to_order(order_id, hold.seat_id))


@router.delete("/{order_id}/seats/{seat_id}", response_model=OrderResponse)
async def cancel_reservation_endpoint(
    order_id: str,
    seat_id: str,
    engine: ReservationEngine = Depends(get_engine),
):
    """Release a held or reserved seat back to inventory."""
    return OrderResponse.from_order(await engine.cancel_reservation(order_id, seat_id))


@router.post("/{order_id}/auto-select", response_model=AutoSelectResponse)
async def auto_select_endpoint(
    order_id: str,
    request: AutoSelectRequest,
    engine: ReservationEngine = Depends(get_engine),
):
    seat_ids = await engine.auto_select(order_id, request.num_seats, request.seat_class_preference)
    return AutoSelectResponse(order_id=order_id, seat_ids=seat_ids)


@router.post("/{order_id}/continue", response_model=OrderResponse)
async def continue_order_endpoint(
    order_id: str,
    request: OrderContinue,
    engine: ReservationEngine = Depends(get_engine),
):
    """Extend the hold window of an active order."""
    return OrderResponse.from_order(await engine.continue_order(order_id, request.expires))


@router.post("/{order_id}/complete", response_model=OrderResponse)
async def complete_order_endpoint(order_id: str, engine: ReservationEngine = Depends(get_engine)):
    """Turn every held seat into a reservation, all or nothing."""
    return OrderResponse.from_order(await engine.complete_order(order_id))


@users_router.get("/{user_id}/orders", response_model=OrderListResponse)
async def list_user_orders_endpoint(
    user_id: str,
    paging: PageParams = Depends(get_page_params),
    engine: ReservationEngine = Depends(get_engine),
):
    orders = await engine.get_orders_for_user(user_id, paging.page, paging.perpage)
    return OrderListResponse(
        orders=[OrderResponse.from_order(order) for order in orders],
        page=paging.page,
        perpage=paging.perpage,
    )
