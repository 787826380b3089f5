"""Redis client for short-lived server-side state (OAuth2 login state)."""

import json
import logging
from typing import Any, Dict, Optional

import redis.asyncio as redis

from ..config import get_settings

logger = logging.getLogger(__name__)


class RedisClient:
    """Thin wrapper around ``redis.asyncio`` that logs instead of raising on I/O errors."""

    STATE_PREFIX = "oauth2:state:"

    def __init__(self):
        self.settings = get_settings()
        self.redis: Optional[redis.Redis] = None

    async def connect(self) -> None:
        """Connect to Redis."""
        try:
            self.redis = redis.from_url(
                self.settings.redis_url,
                max_connections=self.settings.redis_max_connections,
                decode_responses=True,
            )
            await self.redis.ping()
            logger.info("Connected to Redis successfully")
        except Exception as e:
            logger.error(f"Failed to connect to Redis: {e}")
            self.redis = None
            raise

    async def disconnect(self) -> None:
        """Disconnect from Redis."""
        if self.redis:
            await self.redis.aclose()
            self.redis = None
            logger.info("Disconnected from Redis")

    @property
    def is_connected(self) -> bool:
        return self.redis is not None

    async def ping(self) -> bool:
        if not self.redis:
            return False
        try:
            return bool(await self.redis.ping())
        except Exception as e:
            logger.error(f"Redis PING error: {e}")
            return False

    async def set(self, key: str, value: str, expire: Optional[int] = None) -> bool:
        """Set value in Redis with optional expiration."""
        if not self.redis:
            return False
        try:
            if expire:
                return bool(await self.redis.setex(key, expire, value))
            return bool(await self.redis.set(key, value))
        except Exception as e:
            logger.error(f"Redis SET error for key {key}: {e}")
            return False

    async def pop(self, key: str) -> Optional[str]:
        """Atomically read and delete a key."""
        if not self.redis:
            return None
        try:
            return await self.redis.getdel(key)
        except Exception as e:
            logger.error(f"Redis GETDEL error for key {key}: {e}")
            return None

    # OAuth2 login state
    async def store_oauth_state(self, state: str, data: Dict[str, Any], expire: int) -> bool:
        """Remember a login attempt until the provider calls back."""
        return await self.set(f"{self.STATE_PREFIX}{state}", json.dumps(data), expire)

    async def consume_oauth_state(self, state: str) -> Optional[Dict[str, Any]]:
        """Return the stored login attempt once; later calls get None."""
        raw = await self.pop(f"{self.STATE_PREFIX}{state}")
        if raw is None:
            return None
        return json.loads(raw)


# Singleton instance
_redis_client: Optional[RedisClient] = None


def get_redis_client() -> RedisClient:
    """Get Redis client singleton."""
    global _redis_client
    if _redis_client is None:
        _redis_client = RedisClient()
    return _redis_client
