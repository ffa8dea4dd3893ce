"""
Reservation engine: explicit composition root for one isolated set of
catalog, seat state, order ledger and background reaper.

Nothing here is a process-wide singleton. The FastAPI app builds one engine
in its lifespan; tests build as many as they like, each with its own
settings and clock.
"""

import time
from typing import Optional, Sequence, Union

import redis.asyncio as redis

from seating.core.config import Settings
from seating.core.logging import get_logger
from seating.domain.errors import PreconditionFailedError
from seating.domain.models import (
    Event,
    Order,
    OrderSummary,
    SeatAvailability,
    SeatState,
    TableAvailability,
)
from seating.domain.pagination import paginate
from seating.infrastructure.redis_client import connect_redis
from seating.services.auto_selector import AutoSelector
from seating.services.cache_service import EventListCache
from seating.services.catalog_service import InMemoryCatalog
from seating.services.expiry_reaper import ExpiryReaper
from seating.services.hold_manager import HoldManager
from seating.services.interfaces.catalog import Catalog
from seating.services.interfaces.seat_state import SeatStateStore
from seating.services.order_ledger import Clock, OrderLedger
from seating.services.strategy_factory import build_seat_state_store

logger = get_logger(__name__)

SeatMapEntry = Union[SeatAvailability, TableAvailability]


class ReservationEngine:
    def __init__(
        self,
        settings: Settings,
        catalog: Optional[Catalog] = None,
        seat_states: Optional[SeatStateStore] = None,
        clock: Clock = time.time,
        redis_client: Optional[redis.Redis] = None,
    ):
        self.settings = settings
        self.clock = clock
        self.redis = redis_client
        self.catalog = catalog or InMemoryCatalog()
        self.seat_states = seat_states or build_seat_state_store(settings, redis_client)
        self.ledger = OrderLedger(self.catalog, clock)
        self.holds = HoldManager(self.ledger, self.seat_states, self.catalog)
        self.selector = AutoSelector(
            self.ledger,
            self.holds,
            self.catalog,
            max_retries=settings.AUTOSELECT_MAX_RETRIES,
            search_limit=settings.AUTOSELECT_SEARCH_LIMIT,
            allow_mixed_classes=settings.AUTOSELECT_ALLOW_MIXED_CLASSES,
        )
        self.reaper = ExpiryReaper(
            self.ledger,
            self.holds,
            clock,
            interval=settings.REAPER_INTERVAL_SECONDS,
            max_backoff=settings.REAPER_MAX_BACKOFF_SECONDS,
        )
        self.event_cache = EventListCache(redis_client, ttl=settings.REDIS_CACHE_TTL)

    @classmethod
    async def connect(cls, settings: Settings, **kwargs) -> "ReservationEngine":
        """Build an engine, connecting to Redis first when it is enabled."""
        client = await connect_redis(settings)
        if client is None and settings.REDIS_ENABLED:
            logger.warning("redis_unavailable", message="Running without cache")
        return cls(settings, redis_client=client, **kwargs)

    async def start(self) -> None:
        if not self.ledger:
            # Orders live in this process, so any seat state found now is orphaned
            purged = await self.seat_states.clear_all()
            if purged:
                logger.warning("stale_seat_state_purged", events=purged)
        if self.settings.REAPER_ENABLED:
            self.reaper.start()
        logger.info(
            "engine_started",
            seat_state_backend=type(self.seat_states).__name__,
            reaper=self.reaper.running,
        )

    async def shutdown(self) -> None:
        await self.reaper.stop()
        if self.redis is not None:
            await self.redis.aclose()
            self.redis = None
        logger.info("engine_shutdown")

    # --- Orders ---

    async def create_order(self, user_id: str, event_id: str, expires: Optional[float] = None) -> Order:
        if expires is None:
            expires = self.clock() + self.settings.ORDER_HOLD_SECONDS
        return await self.ledger.create_order(user_id, event_id, expires)

    async def continue_order(self, order_id: str, expires: float) -> Order:
        return await self.ledger.continue_order(order_id, expires)

    async def delete_order(self, order_id: str) -> None:
        await self.ledger.delete_order(order_id)

    async def add_seat_to_order(self, order_id: str, seat_id: str) -> Order:
        return await self.holds.add_seat_to_order(order_id, seat_id)

    async def auto_select(self, order_id: str, num_seats: int, seat_class_preference: Sequence[str] = ()) -> list[str]:
        return await self.selector.auto_select(order_id, num_seats, seat_class_preference)

    async def complete_order(self, order_id: str) -> Order:
        return await self.holds.complete_order(order_id)

    async def cancel_reservation(self, order_id: str, seat_id: str) -> Order:
        return await self.holds.cancel_reservation(order_id, seat_id)

    async def cancel_event(self, event_id: str) -> list[str]:
        cancelled = await self.holds.cancel_event(event_id)
        await self.event_cache.invalidate()
        return cancelled

    async def delete_event(self, event_id: str) -> None:
        """Delete an off-sale event whose orders hold no seats."""
        await self.catalog.get_event(event_id)
        if any(order.held_seats for order in self.ledger.orders_for_event(event_id)):
            raise PreconditionFailedError("Event still has reservations; cancel it first")
        await self.catalog.delete_event(event_id)
        await self.seat_states.clear_event(event_id)
        await self.event_cache.invalidate()

    async def delete_seat(self, seat_id: str) -> None:
        """Delete a seat that no event currently holds or reserves."""
        seat = await self.catalog.get_seat(seat_id)
        for event in await self.catalog.events_for_configuration(seat.venue_config_id):
            state = await self.seat_states.get(event.id, seat_id)
            if not state.is_free:
                raise PreconditionFailedError(f"Seat is {state.status.value} for event {event.id}")
        await self.catalog.delete_seat(seat_id)

    # --- Queries ---

    async def get_order_summary(self, order_id: str) -> OrderSummary:
        order = self.ledger.get(order_id)
        seats = [await self.catalog.get_seat(seat_id) for seat_id in sorted(order.held_seats)]
        return OrderSummary(order=order, seats=seats)

    async def get_orders_for_user(self, user_id: str, page: int, perpage: int) -> list[Order]:
        return paginate(self.ledger.orders_for_user(user_id), page, perpage, self.settings.MAX_PER_PAGE)

    async def find_abandoned_orders(self, page: int, perpage: int) -> list[Order]:
        return paginate(self.ledger.abandoned_orders(), page, perpage, self.settings.MAX_PER_PAGE)

    async def get_all_events_on_sale(self, page: int, perpage: int) -> list[Event]:
        return paginate(await self.catalog.events_on_sale(), page, perpage, self.settings.MAX_PER_PAGE)

    async def get_seats_and_tables_for_event(self, event_id: str, page: int, perpage: int) -> list[SeatMapEntry]:
        """
        Seats (by id) then tables (by id) of the event's layout, each joined
        with current availability.
        """
        event = await self.catalog.get_event(event_id)
        if self.settings.SWEEP_ON_READ:
            await self.reaper.sweep(event_id=event_id)

        seats = await self.catalog.seats_for_configuration(event.venue_config_id)
        tables = await self.catalog.tables_for_configuration(event.venue_config_id)
        states = await self.seat_states.states(event_id)

        entries: list[SeatMapEntry] = [
            SeatAvailability(seat=seat, state=states.get(seat.id, SeatState.free()))
            for seat in seats
        ]
        for table in tables:
            at_table = [seat.id for seat in seats if seat.table_id == table.id]
            entries.append(
                TableAvailability(
                    table=table,
                    seat_ids=at_table,
                    free_seat_ids=[seat_id for seat_id in at_table if seat_id not in states],
                )
            )
        return paginate(entries, page, perpage, self.settings.MAX_PER_PAGE)
