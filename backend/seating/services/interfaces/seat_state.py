"""
Seat state store interface.
Allows swapping between a single-process store and a shared Redis store
without changing hold logic.
"""

from abc import ABC, abstractmethod
from typing import Iterable

from seating.domain.models import SeatState


class SeatStateStore(ABC):
    """
    Per (event, seat) availability: Free / Held(order) / Reserved(order).

    Every transition is a single atomic compare-and-set on one seat, except
    `promote`, which is atomic across all the seats it is given. Seats with
    no recorded state are Free.

    Implementations:
    - InMemorySeatStateStore: one process, asyncio
    - RedisSeatStateStore: Redis hashes, Lua scripts
    """

    @abstractmethod
    async def get(self, event_id: str, seat_id: str) -> SeatState:
        """Current state of one seat."""
        pass

    @abstractmethod
    async def states(self, event_id: str) -> dict[str, SeatState]:
        """All non-free seat states of an event, keyed by seat id."""
        pass

    @abstractmethod
    async def hold(self, event_id: str, seat_id: str, order_id: str) -> SeatState:
        """
        Transition Free -> Held(order_id).

        Returns:
            The state observed before the attempt. The hold succeeded
            only if that state is Free.
        """
        pass

    @abstractmethod
    async def release(self, event_id: str, seat_id: str, order_id: str) -> bool:
        """
        Transition Held(order_id) or Reserved(order_id) -> Free.

        Returns:
            False if the seat was not held or reserved by order_id.
        """
        pass

    @abstractmethod
    async def promote(self, event_id: str, seat_ids: Iterable[str], order_id: str) -> list[str]:
        """
        Transition every seat from Held(order_id) to Reserved(order_id),
        all or nothing.

        Returns:
            Seat ids that were not Held(order_id). When non-empty no seat
            was changed.
        """
        pass

    @abstractmethod
    async def clear_event(self, event_id: str) -> None:
        """Forget every seat state of a deleted event."""
        pass

    @abstractmethod
    async def clear_all(self) -> int:
        """
        Forget every seat state of every event.

        Returns:
            Number of events that had state.
        """
        pass
