"""
Tests for order creation, extension, deletion and listing.
"""

import pytest

from seating.domain.errors import (
    EventNotFoundError,
    InvalidArgumentError,
    OrderExpiredError,
    OrderNotFoundError,
    PreconditionFailedError,
)
from seating.domain.models import OrderStatus, SeatState


@pytest.mark.asyncio
async def test_create_order_defaults_hold_window(engine, layout, clock):
    order = await engine.create_order("user-1", layout.event.id)

    assert order.status is OrderStatus.ACTIVE
    assert order.created_at == clock.now
    assert order.expires == clock.now + engine.settings.ORDER_HOLD_SECONDS
    assert order.held_seats == set()


@pytest.mark.asyncio
async def test_create_order_preconditions(engine, layout, clock):
    with pytest.raises(EventNotFoundError):
        await engine.create_order("user-1", "missing")

    with pytest.raises(InvalidArgumentError):
        await engine.create_order("user-1", layout.event.id, expires=clock.now)

    await engine.catalog.update_event(layout.event.id, {"on_sale": False})
    with pytest.raises(PreconditionFailedError):
        await engine.create_order("user-1", layout.event.id)


@pytest.mark.asyncio
async def test_continue_order(engine, layout, clock):
    order = await engine.create_order("user-1", layout.event.id, expires=clock.now + 10)

    order = await engine.continue_order(order.id, clock.now + 300)
    assert order.expires == clock.now + 300

    # Expiry only moves forward
    with pytest.raises(InvalidArgumentError):
        await engine.continue_order(order.id, clock.now + 100)


@pytest.mark.asyncio
async def test_continue_expired_order(engine, layout, clock):
    order = await engine.create_order("user-1", layout.event.id, expires=clock.now + 10)
    clock.advance(11)

    with pytest.raises(OrderExpiredError):
        await engine.continue_order(order.id, clock.now + 300)


@pytest.mark.asyncio
async def test_delete_empty_order(engine, layout):
    order = await engine.create_order("user-1", layout.event.id)

    await engine.delete_order(order.id)

    with pytest.raises(OrderNotFoundError):
        await engine.get_order_summary(order.id)
    with pytest.raises(OrderNotFoundError):
        await engine.delete_order(order.id)


@pytest.mark.asyncio
async def test_order_summary(engine, layout):
    order = await engine.create_order("user-1", layout.event.id)
    for seat_id in layout.ids("g2", "g1"):
        await engine.add_seat_to_order(order.id, seat_id)

    summary = await engine.get_order_summary(order.id)

    assert summary.order is order
    assert [seat.id for seat in summary.seats] == layout.ids("g1", "g2")
    assert summary.seat_count == 2


@pytest.mark.asyncio
async def test_orders_for_user_pages_are_stable(engine, layout):
    """Consecutive pages are disjoint and together cover every order in creation order."""
    created = [(await engine.create_order("user-1", layout.event.id)).id for _ in range(15)]
    await engine.create_order("user-2", layout.event.id)

    first = await engine.get_orders_for_user("user-1", 1, 10)
    second = await engine.get_orders_for_user("user-1", 2, 10)

    assert len(first) == 10
    assert len(second) == 5
    assert [order.id for order in first + second] == created
    assert await engine.get_orders_for_user("user-1", 1, 10) == first
    assert await engine.get_orders_for_user("user-1", 3, 10) == []


@pytest.mark.asyncio
@pytest.mark.parametrize("page,perpage", [(0, 10), (1, 0), (1, 101), (-1, 5)])
async def test_invalid_pagination(engine, layout, page, perpage):
    with pytest.raises(InvalidArgumentError):
        await engine.get_orders_for_user("user-1", page, perpage)


@pytest.mark.asyncio
@pytest.mark.parametrize("expires", [float("nan"), float("inf")])
async def test_non_finite_expiry_rejected(engine, layout, clock, expires):
    with pytest.raises(InvalidArgumentError):
        await engine.create_order("user-1", layout.event.id, expires=expires)

    order = await engine.create_order("user-1", layout.event.id, expires=clock.now + 10)
    await engine.add_seat_to_order(order.id, layout.seats["g1"].id)
    with pytest.raises(InvalidArgumentError):
        await engine.continue_order(order.id, expires)

    # The order still expires on schedule
    clock.advance(11)
    assert await engine.reaper.sweep() == [order.id]
    assert order.status is OrderStatus.ABANDONED


@pytest.mark.asyncio
async def test_unknown_orders_get_no_lock(engine, layout):
    for i in range(50):
        with pytest.raises(OrderNotFoundError):
            await engine.complete_order(f"missing-{i}")
        with pytest.raises(OrderNotFoundError):
            await engine.continue_order(f"missing-{i}", 5000.0)
    assert engine.ledger.find_lock("missing-0") is None
    assert len(engine.ledger) == 0

    order = await engine.create_order("user-1", layout.event.id)
    assert engine.ledger.find_lock(order.id) is not None
    await engine.delete_order(order.id)
    assert engine.ledger.find_lock(order.id) is None


@pytest.mark.asyncio
async def test_reserved_seat_cannot_be_deleted(engine, layout):
    """A seat an order still holds or reserves stays in the layout, so its summary keeps resolving."""
    seat_id = layout.seats["g4"].id
    order = await engine.create_order("user-1", layout.event.id)
    await engine.add_seat_to_order(order.id, seat_id)
    await engine.complete_order(order.id)
    await engine.catalog.update_event(layout.event.id, {"on_sale": False})
    await engine.catalog.set_venue_configuration_availability(layout.config.id, False)

    with pytest.raises(PreconditionFailedError):
        await engine.delete_seat(seat_id)
    summary = await engine.get_order_summary(order.id)
    assert [seat.id for seat in summary.seats] == [seat_id]

    await engine.cancel_reservation(order.id, seat_id)
    assert await engine.seat_states.get(layout.event.id, seat_id) == SeatState.free()
    await engine.delete_seat(seat_id)
    assert (await engine.get_order_summary(order.id)).seats == []
