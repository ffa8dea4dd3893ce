"""
Tests for automatic seat selection: class preference, adjacency, table
sizing and retries after losing a hold race.
"""

import pytest

from seating.domain.errors import InsufficientAvailabilityError, InvalidArgumentError, OrderNotActiveError
from seating.domain.models import SeatState
from seating.services.engine import ReservationEngine
from seating.services.interfaces.memory_seat_state import InMemorySeatStateStore

from conftest import build_layout


class RacingSeatStateStore(InMemorySeatStateStore):
    """Lets a rival order grab a seat just before selected holds land."""

    def __init__(self, steal_on: set[int]):
        super().__init__()
        self.steal_on = steal_on
        self.calls = 0
        self.stolen: list[str] = []

    async def hold(self, event_id, seat_id, order_id):
        self.calls += 1
        if self.calls in self.steal_on:
            await super().hold(event_id, seat_id, "rival")
            self.stolen.append(seat_id)
        return await super().hold(event_id, seat_id, order_id)


def _connected(seat_ids, layout) -> bool:
    seats = {seat.id: seat for seat in layout.seats.values()}
    reached = {seat_ids[0]}
    frontier = [seat_ids[0]]
    while frontier:
        current = frontier.pop()
        for neighbor in seats[current].next_to:
            if neighbor in seat_ids and neighbor not in reached:
                reached.add(neighbor)
                frontier.append(neighbor)
    return reached == set(seat_ids)


@pytest.mark.asyncio
async def test_vip_exhausted_then_filled_from_ga(engine, layout):
    """Two free VIP seats and five GA: VIP first, the rest from GA."""
    await engine.catalog.create_seat("G5", "GA", layout.config.id)
    order = await engine.create_order("user-1", layout.event.id)
    ga_ids = {seat.id for seat in await engine.catalog.seats_for_configuration(layout.config.id) if seat.seat_class == "GA"}

    seat_ids = await engine.auto_select(order.id, 3, ["VIP", "GA"])

    assert len(seat_ids) == 3
    assert set(layout.ids("v1", "v2")) <= set(seat_ids)
    assert len(set(seat_ids) & ga_ids) == 1
    assert order.held_seats == set(seat_ids)
    for seat_id in seat_ids:
        assert await engine.seat_states.get(layout.event.id, seat_id) == SeatState.held(order.id)


@pytest.mark.asyncio
async def test_prefers_adjacent_group(engine, layout):
    order = await engine.create_order("user-1", layout.event.id)

    seat_ids = await engine.auto_select(order.id, 3, ["GA"])

    assert seat_ids == layout.ids("g1", "g2", "g3")


@pytest.mark.asyncio
async def test_falls_back_to_scattered_seats(engine, layout):
    blocker = await engine.create_order("user-2", layout.event.id)
    await engine.add_seat_to_order(blocker.id, layout.seats["g2"].id)
    order = await engine.create_order("user-1", layout.event.id)

    seat_ids = await engine.auto_select(order.id, 3, ["GA"])

    assert seat_ids == layout.ids("g1", "g3", "g4")


@pytest.mark.asyncio
async def test_empty_preference_uses_every_class(engine, layout):
    order = await engine.create_order("user-1", layout.event.id)

    # Table seats are out: six is above the table maximum
    seat_ids = await engine.auto_select(order.id, 6, [])

    assert seat_ids == layout.ids("g1", "g2", "g3", "g4", "v1", "v2")


@pytest.mark.asyncio
async def test_table_seats_respect_party_size(engine, layout):
    order = await engine.create_order("user-1", layout.event.id)

    # A party of one is below the table minimum
    with pytest.raises(InsufficientAvailabilityError):
        await engine.auto_select(order.id, 1, ["TABLE"])

    seat_ids = await engine.auto_select(order.id, 3, ["TABLE"])
    assert len(seat_ids) == 3
    assert set(seat_ids) <= set(layout.ids("t1", "t2", "t3", "t4"))
    assert _connected(seat_ids, layout)


@pytest.mark.asyncio
async def test_insufficient_availability_holds_nothing(engine, layout):
    order = await engine.create_order("user-1", layout.event.id)

    with pytest.raises(InsufficientAvailabilityError):
        await engine.auto_select(order.id, 3, ["VIP"])

    assert order.held_seats == set()
    assert await engine.seat_states.states(layout.event.id) == {}


@pytest.mark.asyncio
async def test_no_mixing_when_disabled(settings, clock):
    settings.AUTOSELECT_ALLOW_MIXED_CLASSES = False
    engine = ReservationEngine(settings, clock=clock)
    layout = await build_layout(engine)
    order = await engine.create_order("user-1", layout.event.id)

    seat_ids = await engine.auto_select(order.id, 3, ["VIP", "GA"])

    assert seat_ids == layout.ids("g1", "g2", "g3")


@pytest.mark.asyncio
async def test_retries_after_losing_race(settings, clock):
    """A seat taken between selection and hold triggers rollback and a retry."""
    store = RacingSeatStateStore(steal_on={2})
    engine = ReservationEngine(settings, clock=clock, seat_states=store)
    layout = await build_layout(engine)
    order = await engine.create_order("user-1", layout.event.id)

    seat_ids = await engine.auto_select(order.id, 2, ["GA"])

    assert len(seat_ids) == 2
    assert store.stolen[0] not in seat_ids
    assert await store.get(layout.event.id, store.stolen[0]) == SeatState.held("rival")
    states = await store.states(layout.event.id)
    held_by_order = {seat_id for seat_id, state in states.items() if state == SeatState.held(order.id)}
    assert held_by_order == set(seat_ids) == order.held_seats


@pytest.mark.asyncio
async def test_gives_up_after_max_retries(settings, clock):
    settings.AUTOSELECT_MAX_RETRIES = 2
    store = RacingSeatStateStore(steal_on=set(range(1, 100)))
    engine = ReservationEngine(settings, clock=clock, seat_states=store)
    layout = await build_layout(engine)
    order = await engine.create_order("user-1", layout.event.id)

    with pytest.raises(InsufficientAvailabilityError):
        await engine.auto_select(order.id, 2, ["GA"])

    assert len(store.stolen) == 2
    assert order.held_seats == set()


@pytest.mark.asyncio
async def test_invalid_requests(engine, layout):
    order = await engine.create_order("user-1", layout.event.id)

    with pytest.raises(InvalidArgumentError):
        await engine.auto_select(order.id, 0, ["GA"])

    await engine.cancel_event(layout.event.id)
    with pytest.raises(OrderNotActiveError):
        await engine.auto_select(order.id, 1, ["GA"])
