"""
Redis caching for the on-sale event listing.

CACHING STRATEGY
================

What we cache:
  - GetAllEventsOnSale pages (JSON-serialized)
  - Cache key pattern: "events:onsale:page={page}&perpage={perpage}"

Invalidation strategy:
  - Any event create/update/delete/cancel deletes every listing key
    (prefix SCAN, small keyspace)
  - TTL-based expiry as safety net

Why NOT cache seat maps or orders:
  - They change on every hold; a stale seat map would send users after
    seats that are already gone.

The cache fails open: with no client, or on any Redis error, callers
fall through to the catalog.
"""

import json
from typing import Optional

import redis.asyncio as redis

from seating.core.logging import get_logger
from seating.core.metrics import record_cache_operation

logger = get_logger(__name__)

KEY_PREFIX = "events:onsale:"


class EventListCache:
    def __init__(self, client: Optional[redis.Redis], ttl: int = 300):
        self.client = client
        self.ttl = ttl

    @staticmethod
    def _key(page: int, perpage: int) -> str:
        return f"{KEY_PREFIX}page={page}&perpage={perpage}"

    async def get(self, page: int, perpage: int) -> Optional[list[dict]]:
        """Retrieve a cached listing page."""
        if not self.client:
            return None

        key = self._key(page, perpage)
        try:
            data = await self.client.get(key)
            record_cache_operation("get", data is not None)
            if data:
                logger.debug("cache_hit", key=key)
                return json.loads(data)
            logger.debug("cache_miss", key=key)
        except Exception as e:
            logger.error("cache_get_error", key=key, error=str(e))

        return None

    async def set(self, page: int, perpage: int, data: list[dict]) -> None:
        """Cache a listing page with TTL."""
        if not self.client:
            return

        key = self._key(page, perpage)
        try:
            await self.client.setex(key, self.ttl, json.dumps(data, default=str))
            record_cache_operation("set", True)
            logger.debug("cache_set", key=key, ttl=self.ttl)
        except Exception as e:
            logger.error("cache_set_error", key=key, error=str(e))

    async def invalidate(self) -> None:
        """
        Invalidate all cached listing pages.
        Uses SCAN to find and delete all keys matching the prefix.
        """
        if not self.client:
            return

        try:
            deleted = 0
            async for key in self.client.scan_iter(match=f"{KEY_PREFIX}*", count=100):
                await self.client.delete(key)
                deleted += 1
            logger.info("cache_invalidated", keys_deleted=deleted)
        except Exception as e:
            logger.error("cache_invalidation_error", error=str(e))

    async def stats(self) -> dict:
        """Get Redis cache statistics for monitoring."""
        if not self.client:
            return {"status": "disabled"}

        try:
            info = await self.client.info("stats")
            hits = info.get("keyspace_hits", 0)
            misses = info.get("keyspace_misses", 0)
            return {
                "status": "connected",
                "hits": hits,
                "misses": misses,
                "hit_rate": round(hits / max(hits + misses, 1) * 100, 2),
            }
        except Exception as e:
            return {"status": "error", "error": str(e)}
