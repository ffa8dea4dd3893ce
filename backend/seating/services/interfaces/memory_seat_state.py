"""
In-process seat state store.
Relies on asyncio scheduling for atomicity.
"""

from typing import Iterable

from seating.domain.models import SeatState
from seating.services.interfaces.seat_state import SeatStateStore


class InMemorySeatStateStore(SeatStateStore):
    """
    Seat states kept in a dict per event.

    No method body awaits, so each check-then-set runs to completion
    before any other coroutine observes the map. That makes every
    transition linearizable within one event loop.

    Use when:
    - Single API process
    - Tests
    """

    def __init__(self):
        self._events: dict[str, dict[str, SeatState]] = {}

    async def get(self, event_id: str, seat_id: str) -> SeatState:
        return self._events.get(event_id, {}).get(seat_id, SeatState.free())

    async def states(self, event_id: str) -> dict[str, SeatState]:
        return dict(self._events.get(event_id, {}))

    async def hold(self, event_id: str, seat_id: str, order_id: str) -> SeatState:
        seats = self._events.setdefault(event_id, {})
        current = seats.get(seat_id, SeatState.free())
        if current.is_free:
            seats[seat_id] = SeatState.held(order_id)
        return current

    async def release(self, event_id: str, seat_id: str, order_id: str) -> bool:
        seats = self._events.get(event_id, {})
        current = seats.get(seat_id)
        if current is None or current.order_id != order_id:
            return False
        del seats[seat_id]
        return True

    async def promote(self, event_id: str, seat_ids: Iterable[str], order_id: str) -> list[str]:
        seats = self._events.setdefault(event_id, {})
        ordered = sorted(seat_ids)
        expected = SeatState.held(order_id)
        mismatched = [seat_id for seat_id in ordered if seats.get(seat_id) != expected]
        if mismatched:
            return mismatched
        for seat_id in ordered:
            seats[seat_id] = SeatState.reserved(order_id)
        return []

    async def clear_event(self, event_id: str) -> None:
        self._events.pop(event_id, None)

    async def clear_all(self) -> int:
        cleared = sum(1 for seats in self._events.values() if seats)
        self._events.clear()
        return cleared
