import logging
from typing import Optional

from redis.asyncio import Redis

logger = logging.getLogger(__name__)

REDIS_PREFIX = "pharmnexus:active:"


class ActiveAttemptRegistry:
    """Remembers which quiz each user has open, one quiz per user."""

    def __init__(self, redis: Redis, ttl_seconds: int) -> None:
        self.redis = redis
        self.ttl_seconds = ttl_seconds

    def k_active(self, user_id: str) -> str:
        return f"{REDIS_PREFIX}{user_id}"

    async def mark_active(self, user_id: str, quiz_id: str) -> None:
        await self.redis.set(self.k_active(user_id), quiz_id, ex=self.ttl_seconds)
        logger.debug("User %s opened quiz %s", user_id, quiz_id)

    async def get_active(self, user_id: str) -> Optional[str]:
        return await self.redis.get(self.k_active(user_id))

    async def clear(self, user_id: str, quiz_id: str) -> bool:
        """Forgets the active quiz, but only if it is still ``quiz_id``."""
        key = self.k_active(user_id)
        current = await self.redis.get(key)
        if current != quiz_id:
            return False
        await self.redis.delete(key)
        logger.debug("User %s detached from quiz %s", user_id, quiz_id)
        return True
