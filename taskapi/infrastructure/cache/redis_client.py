"""Redis client used for request counters."""

import logging
from typing import Optional

import redis.asyncio as redis
from redis.asyncio import Redis
from redis.exceptions import RedisError

from taskapi.settings import get_settings

logger = logging.getLogger("taskapi.redis")


class RedisClient:
    """
    Async Redis client with lazy connection.

    Operations report failures as None/False instead of raising, callers
    decide how to degrade when Redis is unavailable.
    """

    def __init__(self, redis_url: Optional[str] = None):
        """
        Initialize Redis client.

        Args:
            redis_url: Redis connection URL (defaults to settings)
        """
        self._redis: Optional[Redis] = None
        self._redis_url = redis_url or get_settings().redis_url

    async def connect(self) -> None:
        """Create the connection pool if it does not exist yet."""
        if self._redis is None:
            self._redis = redis.from_url(
                self._redis_url,
                encoding="utf-8",
                decode_responses=True,
                max_connections=20,
                retry_on_timeout=True,
                socket_connect_timeout=1.0,
                socket_timeout=1.0,
            )

    async def disconnect(self) -> None:
        """Close Redis connection."""
        if self._redis:
            await self._redis.aclose()
            self._redis = None

    async def increment_window(self, key: str, window_seconds: int) -> Optional[int]:
        """
        Increment a counter that expires at the end of its window.

        Args:
            key: Counter key
            window_seconds: Window length, applied when the counter is created

        Returns:
            Counter value after increment, None if Redis is unavailable
        """
        await self.connect()
        try:
            count = await self._redis.incr(key)
            if count == 1:
                await self._redis.expire(key, window_seconds)
            return count
        except RedisError as exc:
            logger.warning(f"Redis increment failed for {key}: {exc}")
            return None

    async def get_ttl(self, key: str) -> Optional[int]:
        """
        Get time-to-live for a key.

        Args:
            key: Key to inspect

        Returns:
            TTL in seconds, None if key doesn't exist, has no expiration or Redis failed
        """
        await self.connect()
        try:
            ttl = await self._redis.ttl(key)
            return ttl if ttl > 0 else None
        except RedisError:
            return None

    async def ping(self) -> bool:
        """
        Ping Redis server to check connectivity.

        Returns:
            True if Redis is responsive, False otherwise
        """
        await self.connect()
        try:
            response = await self._redis.ping()
            return response is True
        except RedisError:
            return False


_redis_client: Optional[RedisClient] = None


def get_redis_client() -> RedisClient:
    """
    Get global Redis client instance.

    Returns:
        RedisClient: Global Redis client
    """
    global _redis_client
    if _redis_client is None:
        _redis_client = RedisClient()
    return _redis_client


async def close_redis_connection() -> None:
    """Close global Redis connection."""
    global _redis_client
    if _redis_client:
        await _redis_client.disconnect()
        _redis_client = None
