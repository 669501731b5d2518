# jongque/config/redis.py
"""Redis client for the display-only business profile cache"""
from typing import Optional
from uuid import UUID

import redis.asyncio as redis

from jongque.config.settings import get_settings

_redis_pool: Optional[redis.ConnectionPool] = None


def get_redis_pool() -> redis.ConnectionPool:
    """Shared pool; short socket timeouts so an unreachable cache degrades to a database read"""
    global _redis_pool
    if _redis_pool is None:
        settings = get_settings()
        _redis_pool = redis.ConnectionPool.from_url(
            settings.REDIS_URL,
            max_connections=settings.REDIS_MAX_CONNECTIONS,
            socket_connect_timeout=settings.REDIS_SOCKET_TIMEOUT_SECONDS,
            socket_timeout=settings.REDIS_SOCKET_TIMEOUT_SECONDS,
            decode_responses=True,
        )
    return _redis_pool


async def get_redis() -> redis.Redis:
    return redis.Redis(connection_pool=get_redis_pool())


async def close_redis() -> None:
    """Release pooled connections on shutdown"""
    global _redis_pool
    if _redis_pool is not None:
        await _redis_pool.disconnect()
        _redis_pool = None


class RedisKeys:
    """Cache key patterns. Nothing read from these keys feeds a booking decision."""

    BUSINESS_PROFILE = "jongque:business:{business_id}:profile"

    @classmethod
    def business_profile(cls, business_id: UUID) -> str:
        return cls.BUSINESS_PROFILE.format(business_id=business_id)
