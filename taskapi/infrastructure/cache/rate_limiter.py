"""Fixed-window request rate limiting backed by Redis."""

from dataclasses import dataclass
from typing import Optional

from .redis_client import RedisClient


@dataclass(frozen=True)
class RateLimitResult:
    """
    Outcome of a rate limit check.

    Attributes:
        allowed: Whether the request may proceed
        limit: Requests allowed per window
        remaining: Requests left in the current window
        retry_after: Seconds until the window resets, when known
    """

    allowed: bool
    limit: int
    remaining: int
    retry_after: Optional[int] = None


class RateLimiter:
    """
    Counts requests per client in fixed windows.

    When the counter store is unreachable every request is allowed.
    """

    def __init__(self, redis_client: RedisClient, max_requests: int, window_seconds: int) -> None:
        """
        Initialize rate limiter.

        Args:
            redis_client: Counter store
            max_requests: Requests allowed per window and client
            window_seconds: Window length in seconds
        """
        self._redis = redis_client
        self._max_requests = max_requests
        self._window_seconds = window_seconds

    def _counter_key(self, client_id: str) -> str:
        """Generate counter key for a client."""
        return f"ratelimit:{client_id}"

    async def hit(self, client_id: str) -> RateLimitResult:
        """
        Record a request and decide whether it is allowed.

        Args:
            client_id: Client identifier, usually the remote address

        Returns:
            Rate limit decision with header values
        """
        key = self._counter_key(client_id)
        count = await self._redis.increment_window(key, self._window_seconds)
        if count is None:
            return RateLimitResult(allowed=True, limit=self._max_requests, remaining=self._max_requests)

        remaining = max(self._max_requests - count, 0)
        if count <= self._max_requests:
            return RateLimitResult(allowed=True, limit=self._max_requests, remaining=remaining)

        retry_after = await self._redis.get_ttl(key) or self._window_seconds
        return RateLimitResult(
            allowed=False,
            limit=self._max_requests,
            remaining=0,
            retry_after=retry_after,
        )
