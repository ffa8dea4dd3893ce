"""
Hold manager: the only component that changes seat state.

CONCURRENCY STRATEGY: Compare-and-set per seat, lock per order
===============================================================

Problem:
  Two orders try to hold the last free seat simultaneously.
  Both read Free, both write Held. Result: double-booking.

Solution:
  Seat state transitions are compare-and-set operations in the
  SeatStateStore (Free -> Held(order) succeeds for exactly one caller).
  A caller that loses the race fails immediately with SeatUnavailable;
  nobody waits on a seat.

  Order fields (status, expires, held_seats) are changed only under the
  order's lock from the OrderLedger. The lock is taken before the seat
  transition so the order cannot be completed, cancelled or abandoned
  halfway through a hold. No operation holds two order locks at once,
  and multi-seat operations visit seats in ascending id order.

Multi-seat completion is one atomic promote in the store: either every
Held(order) seat becomes Reserved(order) or none does.
"""

from seating.core.logging import get_logger
from seating.core.metrics import record_hold_attempt, record_order_transition, record_seat_release
from seating.domain.errors import (
    InconsistentHoldStateError,
    OrderAlreadyCompletedError,
    PreconditionFailedError,
    SeatNotHeldByOrderError,
    SeatUnavailableError,
)
from seating.domain.models import Order, OrderStatus, SeatState
from seating.services.interfaces.catalog import Catalog
from seating.services.interfaces.seat_state import SeatStateStore
from seating.services.order_ledger import OrderLedger

logger = get_logger(__name__)


class HoldManager:
    def __init__(self, ledger: OrderLedger, seat_states: SeatStateStore, catalog: Catalog):
        self.ledger = ledger
        self.seat_states = seat_states
        self.catalog = catalog

    async def add_seat_to_order(self, order_id: str, seat_id: str) -> Order:
        """
        Place a hold on a seat and add it to an order.
        Holding a seat the order already holds is a no-op success.
        """
        async with self.ledger.lock_for(order_id):
            order = self.ledger.get(order_id)
            self.ledger.require_active(order)
            await self._check_seat_in_event(order, seat_id)
            await self.hold_locked(order, seat_id)
        return order

    async def hold_locked(self, order: Order, seat_id: str) -> bool:
        """
        Hold one seat for an order whose lock the caller already holds.

        Returns:
            True if the seat was newly held, False if the order already held it.
        """
        previous = await self.seat_states.hold(order.event_id, seat_id, order.id)
        if previous.is_free:
            order.held_seats.add(seat_id)
            record_hold_attempt("held")
            logger.info("seat_held", order_id=order.id, event_id=order.event_id, seat_id=seat_id)
            return True
        if previous == SeatState.held(order.id):
            order.held_seats.add(seat_id)
            record_hold_attempt("already_held")
            return False
        record_hold_attempt("unavailable")
        logger.info(
            "seat_hold_rejected",
            order_id=order.id,
            event_id=order.event_id,
            seat_id=seat_id,
            state=previous.status.value,
        )
        raise SeatUnavailableError(seat_id)

    async def release_locked(self, order: Order, seat_id: str, reason: str) -> bool:
        """
        Return one of the order's seats to Free. Caller holds the order lock.

        Returns:
            False if the store no longer recorded the seat as this order's.
        """
        released = await self.seat_states.release(order.event_id, seat_id, order.id)
        order.held_seats.discard(seat_id)
        if released:
            record_seat_release(reason)
        else:
            logger.warning("seat_release_mismatch", order_id=order.id, seat_id=seat_id, reason=reason)
        return released

    async def release_all_locked(self, order: Order, reason: str) -> int:
        released = 0
        for seat_id in sorted(order.held_seats):
            if await self.release_locked(order, seat_id, reason):
                released += 1
        return released

    async def complete_order(self, order_id: str) -> Order:
        """Convert every hold of the order into a reservation, all or nothing."""
        async with self.ledger.lock_for(order_id):
            order = self.ledger.get(order_id)
            if order.status is OrderStatus.COMPLETED:
                raise OrderAlreadyCompletedError(order_id)
            self.ledger.require_active(order)
            if not order.held_seats:
                raise PreconditionFailedError("Order has no seats to complete")

            mismatched = await self.seat_states.promote(order.event_id, order.held_seats, order.id)
            if mismatched:
                logger.error(
                    "order_completion_aborted",
                    order_id=order_id,
                    event_id=order.event_id,
                    mismatched=mismatched,
                )
                raise InconsistentHoldStateError(order_id, mismatched)

            order.status = OrderStatus.COMPLETED

        record_order_transition(OrderStatus.COMPLETED.value)
        logger.info("order_completed", order_id=order_id, event_id=order.event_id, seats=len(order.held_seats))
        return order

    async def cancel_reservation(self, order_id: str, seat_id: str) -> Order:
        """Release a held or reserved seat of an order back to inventory."""
        async with self.ledger.lock_for(order_id):
            order = self.ledger.get(order_id)
            if seat_id not in order.held_seats:
                raise SeatNotHeldByOrderError(order_id, seat_id)
            if not await self.release_locked(order, seat_id, "cancelled"):
                raise SeatNotHeldByOrderError(order_id, seat_id)

        logger.info("reservation_cancelled", order_id=order_id, event_id=order.event_id, seat_id=seat_id)
        return order

    async def cancel_event(self, event_id: str) -> list[str]:
        """
        Take the event off sale and cancel every active or completed order,
        releasing all their seats.

        Returns:
            Ids of the orders cancelled.
        """
        event = await self.catalog.get_event(event_id)
        if event.on_sale:
            await self.catalog.update_event(event_id, {"on_sale": False})

        cancelled = []
        for order in self.ledger.orders_for_event(event_id):
            lock = self.ledger.find_lock(order.id)
            if lock is None:
                continue
            async with lock:
                # Re-check under the lock; the reaper or a delete may have won
                if self.ledger.find(order.id) is not order:
                    continue
                if order.status not in (OrderStatus.ACTIVE, OrderStatus.COMPLETED):
                    continue
                released = await self.release_all_locked(order, "event_cancelled")
                order.status = OrderStatus.CANCELLED
            cancelled.append(order.id)
            record_order_transition(OrderStatus.CANCELLED.value)
            logger.info("order_cancelled", order_id=order.id, event_id=event_id, seats_released=released)

        logger.info("event_cancelled", event_id=event_id, orders_cancelled=len(cancelled))
        return cancelled

    async def _check_seat_in_event(self, order: Order, seat_id: str) -> None:
        seat = await self.catalog.get_seat(seat_id)
        event = await self.catalog.get_event(order.event_id)
        if seat.venue_config_id != event.venue_config_id:
            raise PreconditionFailedError("Seat is not part of this event's layout")

