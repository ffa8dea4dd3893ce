"""
Expiry reaper: releases the seats of orders whose hold window has passed.

A sweep snapshots Active orders with `expires < now`, then for each one
takes the order lock and re-checks status and expiry before acting. An order
that was completed, cancelled or continued to a later expiry between the
snapshot and the lock is left alone.

The background loop never raises to callers. A failing sweep (for example
the Redis seat store being unreachable) is logged and retried with
exponential backoff and jitter.
"""

import asyncio
import random
import time
from typing import Optional

from seating.core.logging import get_logger
from seating.core.metrics import record_order_transition, record_reaper_sweep
from seating.domain.models import OrderStatus
from seating.services.hold_manager import HoldManager
from seating.services.order_ledger import Clock, OrderLedger

logger = get_logger(__name__)


class ExpiryReaper:
    def __init__(
        self,
        ledger: OrderLedger,
        hold_manager: HoldManager,
        clock: Clock,
        interval: float = 5.0,
        max_backoff: float = 60.0,
    ):
        self.ledger = ledger
        self.hold_manager = hold_manager
        self.clock = clock
        self.interval = interval
        self.max_backoff = max_backoff
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def sweep(self, now: Optional[float] = None, event_id: Optional[str] = None) -> list[str]:
        """
        Abandon every Active order that expired before `now`.

        Returns:
            Ids of the orders abandoned by this sweep.
        """
        now = self.clock() if now is None else now
        abandoned = []
        for candidate in self.ledger.expired_candidates(now):
            if event_id is not None and candidate.event_id != event_id:
                continue
            lock = self.ledger.find_lock(candidate.id)
            if lock is None:
                continue
            async with lock:
                # Re-read under the lock: completion, deletion or ContinueOrder may have won
                if self.ledger.find(candidate.id) is not candidate:
                    continue
                if candidate.status is not OrderStatus.ACTIVE or not candidate.is_expired(now):
                    continue
                released = await self.hold_manager.release_all_locked(candidate, "abandoned")
                candidate.status = OrderStatus.ABANDONED
            abandoned.append(candidate.id)
            record_order_transition(OrderStatus.ABANDONED.value)
            logger.info(
                "order_abandoned",
                order_id=candidate.id,
                event_id=candidate.event_id,
                expires=candidate.expires,
                seats_released=released,
            )
        return abandoned

    def start(self) -> None:
        if self.running:
            return
        self._task = asyncio.create_task(self._run(), name="expiry-reaper")
        logger.info("reaper_started", interval=self.interval)

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
        logger.info("reaper_stopped")

    async def _run(self) -> None:
        failures = 0
        while True:
            started = time.perf_counter()
            try:
                abandoned = await self.sweep()
            except Exception as e:
                failures += 1
                record_reaper_sweep(False, time.perf_counter() - started)
                delay = self._backoff(failures)
                logger.error("reaper_sweep_failed", error=str(e), failures=failures, retry_in=delay)
                await asyncio.sleep(delay)
                continue

            record_reaper_sweep(True, time.perf_counter() - started)
            if failures:
                logger.info("reaper_recovered", failures=failures)
                failures = 0
            if abandoned:
                logger.info("reaper_sweep", abandoned=len(abandoned))
            await asyncio.sleep(self.interval)

    def _backoff(self, failures: int) -> float:
        """Exponential backoff with jitter, capped at max_backoff."""
        base = min(self.max_backoff, self.interval * (2 ** (failures - 1)))
        return base + random.uniform(0, base * 0.1)
