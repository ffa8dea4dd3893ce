"""
Tests for seat holds, order completion and cancellation, including
concurrency scenarios.
"""

import asyncio

import pytest

from seating.domain.errors import (
    InconsistentHoldStateError,
    OrderAlreadyCompletedError,
    OrderExpiredError,
    OrderNotActiveError,
    PreconditionFailedError,
    SeatNotFoundError,
    SeatNotHeldByOrderError,
    SeatUnavailableError,
)
from seating.domain.models import OrderStatus, SeatState, SeatStatus


@pytest.mark.asyncio
async def test_hold_seat(engine, layout):
    """A free seat becomes Held by the order and joins its held seats."""
    seat_id = layout.seats["g1"].id
    order = await engine.create_order("user-1", layout.event.id)

    order = await engine.add_seat_to_order(order.id, seat_id)

    assert order.held_seats == {seat_id}
    assert await engine.seat_states.get(layout.event.id, seat_id) == SeatState.held(order.id)


@pytest.mark.asyncio
async def test_concurrent_holds_single_winner(engine, layout):
    """
    Many orders racing for one seat: exactly one wins, the rest get
    SeatUnavailable and nothing is left half-held.
    """
    seat_id = layout.seats["v1"].id
    orders = [await engine.create_order(f"user-{i}", layout.event.id) for i in range(20)]

    results = await asyncio.gather(
        *(engine.add_seat_to_order(order.id, seat_id) for order in orders),
        return_exceptions=True,
    )

    winners = [r for r in results if not isinstance(r, Exception)]
    losers = [r for r in results if isinstance(r, Exception)]
    assert len(winners) == 1
    assert len(losers) == 19
    assert all(isinstance(e, SeatUnavailableError) for e in losers)

    state = await engine.seat_states.get(layout.event.id, seat_id)
    assert state == SeatState.held(winners[0].id)
    assert sum(1 for order in orders if order.held_seats) == 1


@pytest.mark.asyncio
async def test_hold_same_seat_twice_is_noop(engine, layout):
    seat_id = layout.seats["g1"].id
    order = await engine.create_order("user-1", layout.event.id)

    await engine.add_seat_to_order(order.id, seat_id)
    order = await engine.add_seat_to_order(order.id, seat_id)

    assert order.held_seats == {seat_id}


@pytest.mark.asyncio
async def test_hold_seat_held_by_other_order(engine, layout):
    seat_id = layout.seats["g1"].id
    first = await engine.create_order("user-1", layout.event.id)
    second = await engine.create_order("user-2", layout.event.id)
    await engine.add_seat_to_order(first.id, seat_id)

    with pytest.raises(SeatUnavailableError):
        await engine.add_seat_to_order(second.id, seat_id)
    assert second.held_seats == set()


@pytest.mark.asyncio
async def test_hold_rejected_for_expired_order(engine, layout, clock):
    order = await engine.create_order("user-1", layout.event.id, expires=clock.now + 10)
    clock.advance(11)

    with pytest.raises(OrderExpiredError):
        await engine.add_seat_to_order(order.id, layout.seats["g1"].id)


@pytest.mark.asyncio
async def test_hold_rejects_seat_from_other_layout(engine, layout):
    venue = await engine.catalog.create_venue("owner-2", "Annex", 10)
    config = await engine.catalog.create_venue_configuration(venue.id, "Small", 10)
    foreign = await engine.catalog.create_seat("X1", "GA", config.id)
    order = await engine.create_order("user-1", layout.event.id)

    with pytest.raises(PreconditionFailedError):
        await engine.add_seat_to_order(order.id, foreign.id)
    with pytest.raises(SeatNotFoundError):
        await engine.add_seat_to_order(order.id, "missing")


@pytest.mark.asyncio
async def test_complete_order(engine, layout):
    seat_ids = layout.ids("g1", "g2")
    order = await engine.create_order("user-1", layout.event.id)
    for seat_id in seat_ids:
        await engine.add_seat_to_order(order.id, seat_id)

    order = await engine.complete_order(order.id)

    assert order.status is OrderStatus.COMPLETED
    for seat_id in seat_ids:
        assert await engine.seat_states.get(layout.event.id, seat_id) == SeatState.reserved(order.id)


@pytest.mark.asyncio
async def test_complete_order_is_all_or_nothing(engine, layout):
    """If any hold was lost, completion aborts and no seat becomes Reserved."""
    seat_ids = layout.ids("g1", "g2", "g3")
    order = await engine.create_order("user-1", layout.event.id)
    for seat_id in seat_ids:
        await engine.add_seat_to_order(order.id, seat_id)

    # Simulate a hold vanishing underneath the order
    lost = seat_ids[1]
    assert await engine.seat_states.release(layout.event.id, lost, order.id)

    with pytest.raises(InconsistentHoldStateError) as exc_info:
        await engine.complete_order(order.id)

    assert exc_info.value.seat_ids == [lost]
    assert order.status is OrderStatus.ACTIVE
    states = await engine.seat_states.states(layout.event.id)
    assert all(state.status is not SeatStatus.RESERVED for state in states.values())
    for seat_id in seat_ids:
        if seat_id != lost:
            assert states[seat_id] == SeatState.held(order.id)


@pytest.mark.asyncio
async def test_complete_order_twice(engine, layout):
    order = await engine.create_order("user-1", layout.event.id)
    await engine.add_seat_to_order(order.id, layout.seats["g1"].id)
    await engine.complete_order(order.id)

    with pytest.raises(OrderAlreadyCompletedError):
        await engine.complete_order(order.id)


@pytest.mark.asyncio
async def test_complete_empty_order(engine, layout):
    order = await engine.create_order("user-1", layout.event.id)

    with pytest.raises(PreconditionFailedError):
        await engine.complete_order(order.id)


@pytest.mark.asyncio
async def test_hold_and_cancel_round_trip(engine, layout):
    """Hold then cancel, twice over, leaves seat state as it started."""
    seat_id = layout.seats["v2"].id
    order = await engine.create_order("user-1", layout.event.id)
    initial = await engine.seat_states.states(layout.event.id)

    for _ in range(2):
        await engine.add_seat_to_order(order.id, seat_id)
        order = await engine.cancel_reservation(order.id, seat_id)
        assert seat_id not in order.held_seats
        assert await engine.seat_states.get(layout.event.id, seat_id) == SeatState.free()

    assert await engine.seat_states.states(layout.event.id) == initial

    # Released seat is available to someone else
    other = await engine.create_order("user-2", layout.event.id)
    await engine.add_seat_to_order(other.id, seat_id)


@pytest.mark.asyncio
async def test_cancel_reserved_seat(engine, layout):
    seat_id = layout.seats["g4"].id
    order = await engine.create_order("user-1", layout.event.id)
    await engine.add_seat_to_order(order.id, seat_id)
    await engine.complete_order(order.id)

    order = await engine.cancel_reservation(order.id, seat_id)

    assert order.held_seats == set()
    assert await engine.seat_states.get(layout.event.id, seat_id) == SeatState.free()


@pytest.mark.asyncio
async def test_cancel_seat_not_held(engine, layout):
    order = await engine.create_order("user-1", layout.event.id)

    with pytest.raises(SeatNotHeldByOrderError):
        await engine.cancel_reservation(order.id, layout.seats["g1"].id)


@pytest.mark.asyncio
async def test_delete_order_requires_released_seats(engine, layout):
    seat_id = layout.seats["g1"].id
    order = await engine.create_order("user-1", layout.event.id)
    await engine.add_seat_to_order(order.id, seat_id)

    with pytest.raises(PreconditionFailedError):
        await engine.delete_order(order.id)

    await engine.cancel_reservation(order.id, seat_id)
    await engine.delete_order(order.id)
    assert engine.ledger.find(order.id) is None


@pytest.mark.asyncio
async def test_delete_order_after_event_cancelled(engine, layout):
    order = await engine.create_order("user-1", layout.event.id)
    await engine.add_seat_to_order(order.id, layout.seats["g1"].id)
    await engine.complete_order(order.id)

    with pytest.raises(PreconditionFailedError):
        await engine.delete_order(order.id)

    await engine.cancel_event(layout.event.id)
    await engine.delete_order(order.id)


@pytest.mark.asyncio
async def test_cancel_event(engine, layout):
    """Cancelling an event frees every seat and cancels its live orders."""
    active = await engine.create_order("user-1", layout.event.id)
    completed = await engine.create_order("user-2", layout.event.id)
    await engine.add_seat_to_order(active.id, layout.seats["g1"].id)
    await engine.add_seat_to_order(completed.id, layout.seats["v1"].id)
    await engine.complete_order(completed.id)

    cancelled = await engine.cancel_event(layout.event.id)

    assert set(cancelled) == {active.id, completed.id}
    assert active.status is OrderStatus.CANCELLED
    assert completed.status is OrderStatus.CANCELLED
    assert await engine.seat_states.states(layout.event.id) == {}
    event = await engine.catalog.get_event(layout.event.id)
    assert event.on_sale is False

    with pytest.raises(OrderNotActiveError):
        await engine.add_seat_to_order(active.id, layout.seats["g2"].id)
    with pytest.raises(PreconditionFailedError):
        await engine.create_order("user-3", layout.event.id)


@pytest.mark.asyncio
async def test_delete_event(engine, layout):
    order = await engine.create_order("user-1", layout.event.id)
    await engine.add_seat_to_order(order.id, layout.seats["g1"].id)

    with pytest.raises(PreconditionFailedError):
        await engine.delete_event(layout.event.id)

    await engine.cancel_event(layout.event.id)
    await engine.delete_event(layout.event.id)
    assert await engine.catalog.events_on_sale() == []
