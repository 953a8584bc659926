import logging

from redis.asyncio import Redis
from .config import settings

logger = logging.getLogger(__name__)

_redis: Redis | None = None

async def get_redis() -> Redis:
    """
    Returns the process-wide Redis client. TLS works through the rediss://
    scheme, so managed providers (Upstash, Redis Cloud) need no extra setup.
    """
    global _redis
    if _redis is None:
        _redis = Redis.from_url(
            settings.REDIS_URL,
            decode_responses=True,
            health_check_interval=30,
            socket_timeout=3,
            socket_connect_timeout=3,
            retry_on_timeout=True,
            max_connections=50,
        )
        await _redis.ping()
        logger.info("Connected to Redis")
    return _redis

async def close_redis() -> None:
    global _redis
    if _redis is not None:
        await _redis.aclose()
        _redis = None
