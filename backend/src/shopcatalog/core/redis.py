import redis.asyncio as redis
from redis.asyncio import ConnectionPool

from shopcatalog.core.config import Settings


def build_redis(settings: Settings) -> redis.Redis:
    """Create the Redis client used by the rate limiter."""
    pool = ConnectionPool.from_url(
        settings.REDIS_URL,
        max_connections=50,
        decode_responses=True,
        encoding="utf-8",
        socket_timeout=2.0,            # Keep the limiter off the request's critical path
        socket_connect_timeout=2.0,
    )
    return redis.Redis(connection_pool=pool)


async def close_redis(client: redis.Redis) -> None:
    """Close Redis client and its connection pool."""
    await client.aclose()
    await client.connection_pool.disconnect()
