"""
Infrastructure layer - external system integrations.
Keeps business logic clean from implementation details.
"""

from .redis_client import create_redis, connect_redis

__all__ = ['create_redis', 'connect_redis']
