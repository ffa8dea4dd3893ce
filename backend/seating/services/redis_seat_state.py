"""
Redis-backed seat state store.
Implements SeatStateStore with Lua scripts so every transition is one
atomic check-and-set on the Redis server.

Layout:
  One hash per event, "{prefix}:{event_id}", field = seat id,
  value = "held:{order_id}" or "reserved:{order_id}".
  Free seats have no field.

Unlike the listing cache this store does not fail open: Redis is the
authority for seat ownership, so connection errors propagate to the caller.
"""

from typing import Iterable

import redis.asyncio as redis

from seating.domain.models import SeatState
from seating.services.interfaces.seat_state import SeatStateStore

HOLD_SCRIPT = """
local current = redis.call('HGET', KEYS[1], ARGV[1])
if not current then
  redis.call('HSET', KEYS[1], ARGV[1], ARGV[2])
  return ''
end
return current
"""

RELEASE_SCRIPT = """
local current = redis.call('HGET', KEYS[1], ARGV[1])
if current and (current == ARGV[2] or current == ARGV[3]) then
  redis.call('HDEL', KEYS[1], ARGV[1])
  return 1
end
return 0
"""

PROMOTE_SCRIPT = """
local mismatched = {}
for i = 3, #ARGV do
  if redis.call('HGET', KEYS[1], ARGV[i]) ~= ARGV[1] then
    table.insert(mismatched, ARGV[i])
  end
end
if #mismatched > 0 then
  return mismatched
end
for i = 3, #ARGV do
  redis.call('HSET', KEYS[1], ARGV[i], ARGV[2])
end
return mismatched
"""


class RedisSeatStateStore(SeatStateStore):
    """
    Seat states in Redis hashes.

    Orders and the catalog live in the API process, so one process owns a
    key prefix. State found under the prefix when an engine starts with no
    orders belongs to a previous run and is purged.

    Use when:
    - Seat state should be inspectable outside the API process
    """

    def __init__(self, client: redis.Redis, key_prefix: str = "seatstate"):
        self.redis = client
        self.key_prefix = key_prefix
        self._hold = client.register_script(HOLD_SCRIPT)
        self._release = client.register_script(RELEASE_SCRIPT)
        self._promote = client.register_script(PROMOTE_SCRIPT)

    def _key(self, event_id: str) -> str:
        return f"{self.key_prefix}:{event_id}"

    async def get(self, event_id: str, seat_id: str) -> SeatState:
        return SeatState.decode(await self.redis.hget(self._key(event_id), seat_id))

    async def states(self, event_id: str) -> dict[str, SeatState]:
        raw = await self.redis.hgetall(self._key(event_id))
        return {seat_id: SeatState.decode(value) for seat_id, value in raw.items()}

    async def hold(self, event_id: str, seat_id: str, order_id: str) -> SeatState:
        previous = await self._hold(
            keys=[self._key(event_id)],
            args=[seat_id, SeatState.held(order_id).encode()],
        )
        return SeatState.decode(previous)

    async def release(self, event_id: str, seat_id: str, order_id: str) -> bool:
        released = await self._release(
            keys=[self._key(event_id)],
            args=[
                seat_id,
                SeatState.held(order_id).encode(),
                SeatState.reserved(order_id).encode(),
            ],
        )
        return bool(released)

    async def promote(self, event_id: str, seat_ids: Iterable[str], order_id: str) -> list[str]:
        ordered = sorted(seat_ids)
        if not ordered:
            return []
        mismatched = await self._promote(
            keys=[self._key(event_id)],
            args=[
                SeatState.held(order_id).encode(),
                SeatState.reserved(order_id).encode(),
                *ordered,
            ],
        )
        return list(mismatched or [])

    async def clear_event(self, event_id: str) -> None:
        await self.redis.delete(self._key(event_id))

    async def clear_all(self) -> int:
        keys = [key async for key in self.redis.scan_iter(match=f"{self.key_prefix}:*")]
        if keys:
            await self.redis.delete(*keys)
        return len(keys)
