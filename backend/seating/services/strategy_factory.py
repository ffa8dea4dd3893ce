"""
Seat state store factory.
Configures which seat state backend to use.
"""

from typing import Optional

import redis.asyncio as redis

from seating.core.config import Settings
from seating.services.interfaces.seat_state import SeatStateStore
from seating.services.interfaces.memory_seat_state import InMemorySeatStateStore
from seating.services.redis_seat_state import RedisSeatStateStore


def build_seat_state_store(settings: Settings, client: Optional[redis.Redis] = None) -> SeatStateStore:
    """
    Get the configured seat state store.

    Backend selection via SEAT_STATE_BACKEND:
    - memory: InMemorySeatStateStore (single process, tests)
    - redis: RedisSeatStateStore (one API process per key prefix)

    The Redis backend is authoritative for seat ownership, so it never
    falls back to memory: a missing client is a startup error.
    """
    backend = settings.SEAT_STATE_BACKEND.lower()

    if backend == "redis":
        if client is None:
            raise RuntimeError("SEAT_STATE_BACKEND=redis requires a reachable Redis")
        return RedisSeatStateStore(client, key_prefix=settings.SEAT_STATE_KEY_PREFIX)
    if backend == "memory":
        return InMemorySeatStateStore()
    raise ValueError(f"Unknown SEAT_STATE_BACKEND: {settings.SEAT_STATE_BACKEND}")
