"""
Automatic seat selection.

SELECTION POLICY
================

  1. Classes are filled in preference order. An empty preference means every
     class in the layout, alphabetically; otherwise only listed classes are
     used.
  2. If the first class with free seats can supply the whole party, a
     connected group over the `next_to` graph is preferred (bounded greedy
     BFS), else its first free seats by id are taken.
  3. With mixing allowed (the default), a class that runs short is
     exhausted and the rest of the party comes from the next classes, seats
     adjacent to those already chosen first. With mixing off, the first
     class that can seat the whole party wins.
  4. A seat at a table is a candidate only if the party size fits the
     table's min_seats..max_seats.

Holds are then taken in ascending id order under the order's lock. Losing a
race for any seat releases everything acquired in that attempt and selection
is retried against fresh availability, up to max_retries attempts.
"""

from dataclasses import dataclass
from typing import Optional, Sequence

from seating.core.logging import get_logger
from seating.core.metrics import autoselect_retries, record_autoselect
from seating.domain.adjacency import AdjacencyGraph
from seating.domain.errors import InsufficientAvailabilityError, InvalidArgumentError, SeatUnavailableError
from seating.domain.models import Order, Seat
from seating.services.hold_manager import HoldManager
from seating.services.interfaces.catalog import Catalog
from seating.services.order_ledger import OrderLedger

logger = get_logger(__name__)


@dataclass(frozen=True)
class Selection:
    seat_ids: list[str]
    strategy: str  # adjacent, scattered, mixed


class AutoSelector:
    def __init__(
        self,
        ledger: OrderLedger,
        hold_manager: HoldManager,
        catalog: Catalog,
        max_retries: int = 3,
        search_limit: int = 200,
        allow_mixed_classes: bool = True,
    ):
        self.ledger = ledger
        self.hold_manager = hold_manager
        self.catalog = catalog
        self.max_retries = max_retries
        self.search_limit = search_limit
        self.allow_mixed_classes = allow_mixed_classes

    async def auto_select(
        self, order_id: str, num_seats: int, seat_class_preference: Sequence[str] = ()
    ) -> list[str]:
        """
        Pick and hold `num_seats` seats for an order.

        Returns:
            The seat ids held by this call, ascending.
        """
        if num_seats < 1:
            raise InvalidArgumentError("num_seats must be >= 1")

        async with self.ledger.lock_for(order_id):
            order = self.ledger.get(order_id)
            self.ledger.require_active(order)
            event = await self.catalog.get_event(order.event_id)
            seats = await self.catalog.seats_for_configuration(event.venue_config_id)
            tables = {table.id: table for table in await self.catalog.tables_for_configuration(event.venue_config_id)}
            graph = AdjacencyGraph.from_seats(seats)
            eligible = [
                seat for seat in seats
                if seat.table_id is None or tables[seat.table_id].admits_party(num_seats)
            ]

            for attempt in range(1, self.max_retries + 1):
                states = await self.hold_manager.seat_states.states(order.event_id)
                free = [seat for seat in eligible if seat.id not in states]
                selection = self.select(free, graph, num_seats, seat_class_preference)
                if selection is None:
                    break

                if await self._hold_all(order, selection.seat_ids):
                    record_autoselect(selection.strategy)
                    logger.info(
                        "seats_auto_selected",
                        order_id=order_id,
                        event_id=order.event_id,
                        seats=selection.seat_ids,
                        strategy=selection.strategy,
                        attempt=attempt,
                    )
                    return sorted(selection.seat_ids)

                autoselect_retries.inc()
                logger.info("autoselect_retry", order_id=order_id, attempt=attempt, reason="hold_race_lost")

        record_autoselect("insufficient")
        logger.warning(
            "autoselect_failed",
            order_id=order_id,
            requested=num_seats,
            preference=list(seat_class_preference),
        )
        raise InsufficientAvailabilityError(num_seats)

    def select(
        self,
        free: list[Seat],
        graph: AdjacencyGraph,
        num_seats: int,
        preference: Sequence[str],
    ) -> Optional[Selection]:
        """Choose seats from `free` without touching seat state."""
        by_class: dict[str, list[str]] = {}
        for seat in free:
            by_class.setdefault(seat.seat_class, []).append(seat.id)
        classes = list(dict.fromkeys(preference)) if preference else sorted(by_class)

        if not self.allow_mixed_classes:
            for seat_class in classes:
                candidates = by_class.get(seat_class, [])
                if len(candidates) >= num_seats:
                    return self._pick(candidates, num_seats, [], graph)
            return None

        chosen: list[str] = []
        used_classes = 0
        selection = None
        for seat_class in classes:
            candidates = by_class.get(seat_class, [])
            if not candidates:
                continue
            selection = self._pick(candidates, num_seats - len(chosen), chosen, graph)
            chosen.extend(selection.seat_ids)
            used_classes += 1
            if len(chosen) == num_seats:
                break

        if len(chosen) < num_seats:
            return None
        if used_classes > 1:
            return Selection(chosen, "mixed")
        return selection

    def _pick(self, candidates: list[str], need: int, chosen: list[str], graph: AdjacencyGraph) -> Selection:
        """Up to `need` seats of one class, adjacent ones first."""
        if not chosen:
            group = graph.find_group(set(candidates), need, self.search_limit)
            if group is not None:
                return Selection(group, "adjacent")
        # Prefer seats touching what has already been picked
        ordered = sorted(candidates, key=lambda seat_id: not graph.touches(seat_id, chosen))
        return Selection(ordered[:need], "scattered")

    async def _hold_all(self, order: Order, seat_ids: list[str]) -> bool:
        """Hold every seat or none. Caller holds the order lock."""
        acquired = []
        try:
            for seat_id in sorted(seat_ids):
                if await self.hold_manager.hold_locked(order, seat_id):
                    acquired.append(seat_id)
        except SeatUnavailableError:
            for seat_id in reversed(acquired):
                await self.hold_manager.release_locked(order, seat_id, "rollback")
            return False
        return True
