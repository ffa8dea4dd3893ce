"""
Redis client factory for the seat state store and the listing cache.
Separated from business logic for clean architecture.
"""

from typing import Optional

import redis.asyncio as redis

from seating.core.config import Settings
from seating.core.logging import get_logger
from seating.core.metrics import redis_connection_errors

logger = get_logger(__name__)


def create_redis(settings: Settings) -> redis.Redis:
    """Build a pooled asyncio Redis client. Does not connect yet."""
    return redis.from_url(
        settings.REDIS_URL,
        encoding="utf-8",
        decode_responses=True,
        socket_connect_timeout=5,
        socket_timeout=5,
        retry_on_timeout=True,
        health_check_interval=30,
    )


async def connect_redis(settings: Settings) -> Optional[redis.Redis]:
    """
    Create a client and ping it.
    Returns None if Redis is disabled or unreachable.
    """
    if not settings.REDIS_ENABLED:
        return None

    client = create_redis(settings)
    try:
        await client.ping()
        logger.info("redis_connected", url=settings.REDIS_URL)
        return client
    except Exception as e:
        redis_connection_errors.inc()
        logger.error("redis_connection_failed", error=str(e))
        await client.aclose()
        return None
