"""
Order ledger: orders, their held seats and expiry timestamps.

Each order has its own asyncio.Lock. Every mutation of status, expires or
held_seats happens while holding it, including the reaper's abandonment, so
a ContinueOrder and an expiry sweep racing on the same order are serialized
and the sweep always re-reads the latest expiry.
"""

import asyncio
import math
import uuid
from typing import Callable, Optional

from seating.core.logging import get_logger
from seating.domain.errors import (
    InvalidArgumentError,
    OrderExpiredError,
    OrderNotActiveError,
    OrderNotFoundError,
    PreconditionFailedError,
)
from seating.domain.models import Order, OrderStatus
from seating.services.interfaces.catalog import Catalog

logger = get_logger(__name__)

Clock = Callable[[], float]


class OrderLedger:
    def __init__(self, catalog: Catalog, clock: Clock):
        self.catalog = catalog
        self.clock = clock
        self._orders: dict[str, Order] = {}
        self._locks: dict[str, asyncio.Lock] = {}

    def lock_for(self, order_id: str) -> asyncio.Lock:
        """The lock guarding one order's status, expiry and seats. Raises OrderNotFoundError."""
        lock = self._locks.get(order_id)
        if lock is None:
            raise OrderNotFoundError(order_id)
        return lock

    def find_lock(self, order_id: str) -> Optional[asyncio.Lock]:
        """Lock of an order that may have been deleted since it was listed."""
        return self._locks.get(order_id)

    def __len__(self) -> int:
        return len(self._orders)

    def find(self, order_id: str) -> Optional[Order]:
        return self._orders.get(order_id)

    def get(self, order_id: str) -> Order:
        order = self._orders.get(order_id)
        if order is None:
            raise OrderNotFoundError(order_id)
        return order

    def require_active(self, order: Order) -> None:
        """Raise unless the order is Active and not past its expiry."""
        if order.status is not OrderStatus.ACTIVE:
            raise OrderNotActiveError(order.id, order.status.value)
        if order.is_expired(self.clock()):
            raise OrderExpiredError(order.id)

    async def create_order(self, user_id: str, event_id: str, expires: float) -> Order:
        event = await self.catalog.get_event(event_id)
        if not event.on_sale:
            raise PreconditionFailedError("Event is not on sale")
        now = self.clock()
        if not math.isfinite(expires) or expires <= now:
            raise InvalidArgumentError("expires must be in the future")

        order = Order(
            id=uuid.uuid4().hex,
            user_id=user_id,
            event_id=event_id,
            expires=expires,
            created_at=now,
        )
        self._orders[order.id] = order
        self._locks[order.id] = asyncio.Lock()
        logger.info("order_created", order_id=order.id, user_id=user_id, event_id=event_id, expires=expires)
        return order

    async def continue_order(self, order_id: str, expires: float) -> Order:
        """Push an active order's expiry later. Moving it backward is rejected."""
        async with self.lock_for(order_id):
            order = self.get(order_id)
            self.require_active(order)
            if not math.isfinite(expires) or expires <= order.expires:
                raise InvalidArgumentError("expires must be later than the current expiry")
            order.expires = expires
        logger.info("order_continued", order_id=order_id, expires=expires)
        return order

    async def delete_order(self, order_id: str) -> None:
        """Delete an order. Every seat must have been released first."""
        async with self.lock_for(order_id):
            order = self.get(order_id)
            if order.held_seats:
                raise PreconditionFailedError("Order still holds seats; cancel its reservations first")
            self._orders.pop(order_id, None)
        self._locks.pop(order_id, None)
        logger.info("order_deleted", order_id=order_id)

    def orders_for_user(self, user_id: str) -> list[Order]:
        """A user's orders in creation order."""
        return [order for order in self._orders.values() if order.user_id == user_id]

    def orders_for_event(self, event_id: str) -> list[Order]:
        return [order for order in self._orders.values() if order.event_id == event_id]

    def expired_candidates(self, now: float) -> list[Order]:
        """Active orders past expiry at `now`. Unlocked snapshot; re-check before acting."""
        return [
            order for order in self._orders.values()
            if order.status is OrderStatus.ACTIVE and order.is_expired(now)
        ]

    def abandoned_orders(self) -> list[Order]:
        """Abandoned orders ordered by (expires, id)."""
        return sorted(
            (order for order in self._orders.values() if order.status is OrderStatus.ABANDONED),
            key=lambda order: (order.expires, order.id),
        )
