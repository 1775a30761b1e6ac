"""Redis connection pool backing the tour reorder locks."""

import redis.asyncio as aioredis

from tourplanner.config import settings

_pool = aioredis.ConnectionPool.from_url(
    settings.redis_url,
    decode_responses=True,
    max_connections=settings.redis_max_connections,
    socket_timeout=settings.redis_socket_timeout_seconds,
)


async def get_redis() -> aioredis.Redis:
    return aioredis.Redis(connection_pool=_pool)


async def close_pool() -> None:
    """Drop pooled connections; called on application shutdown."""
    await _pool.disconnect()
