"""Redis client lifecycle.

The client is created by the application lifespan and handed to the services
that cache through it. Redis is optional: services receive ``None`` when it
is unavailable and fall back to the database.
"""

import redis.asyncio as redis

from coursehub.config import Settings
from coursehub.core.logging import get_logger


logger = get_logger(__name__)


async def init_redis(settings: Settings) -> redis.Redis:
    """Create a Redis client and verify the connection.

    Raises:
        redis.ConnectionError: If Redis cannot be reached.
    """
    client = redis.from_url(
        settings.redis_url,
        max_connections=settings.redis_max_connections,
        socket_timeout=settings.redis_socket_timeout,
        socket_connect_timeout=settings.redis_socket_connect_timeout,
        retry_on_timeout=settings.redis_retry_on_timeout,
        health_check_interval=settings.redis_health_check_interval,
        decode_responses=True,
    )

    try:
        await client.ping()
    except redis.ConnectionError as e:
        logger.warning("redis_connection_failed", error=str(e))
        await client.aclose()
        raise

    logger.info("redis_connected", url=settings.redis_url)
    return client


async def shutdown_redis(client: redis.Redis | None) -> None:
    """Close the Redis client if one was created."""
    if client is not None:
        await client.aclose()
        logger.info("redis_disconnected")


def course_access_cache_key(user_id: object, course_id: object) -> str:
    """Cache key for a user's purchase check on a course."""
    return f"access:{user_id}:{course_id}"
