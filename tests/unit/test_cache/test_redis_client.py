"""Tests for Redis client implementation."""

from unittest.mock import AsyncMock, patch

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from taskapi.infrastructure.cache.redis_client import RedisClient


@pytest.fixture
def redis_client():
    """Create Redis client for testing."""
    return RedisClient("redis://localhost:6379/15")


@pytest.fixture
def mock_redis():
    """Create mock Redis connection."""
    return AsyncMock()


class TestRedisClient:
    """Test cases for RedisClient."""

    @pytest.mark.asyncio
    async def test_connect_success(self, redis_client):
        """Test connection pool creation."""
        with patch("redis.asyncio.from_url") as mock_from_url:
            mock_redis = AsyncMock()
            mock_from_url.return_value = mock_redis

            await redis_client.connect()
            await redis_client.connect()

            assert redis_client._redis == mock_redis
            mock_from_url.assert_called_once()
            assert mock_from_url.call_args.args[0] == "redis://localhost:6379/15"

    @pytest.mark.asyncio
    async def test_disconnect(self, redis_client, mock_redis):
        """Test Redis disconnection."""
        redis_client._redis = mock_redis

        await redis_client.disconnect()

        mock_redis.aclose.assert_called_once()
        assert redis_client._redis is None

    @pytest.mark.asyncio
    async def test_increment_window_first_hit_sets_expiry(self, redis_client, mock_redis):
        """Test a new counter gets the window expiry."""
        mock_redis.incr.return_value = 1
        redis_client._redis = mock_redis

        result = await redis_client.increment_window("ratelimit:1.2.3.4", 60)

        assert result == 1
        mock_redis.incr.assert_called_once_with("ratelimit:1.2.3.4")
        mock_redis.expire.assert_called_once_with("ratelimit:1.2.3.4", 60)

    @pytest.mark.asyncio
    async def test_increment_window_existing_counter(self, redis_client, mock_redis):
        """Test later hits keep the original expiry."""
        mock_redis.incr.return_value = 5
        redis_client._redis = mock_redis

        result = await redis_client.increment_window("ratelimit:1.2.3.4", 60)

        assert result == 5
        mock_redis.expire.assert_not_called()

    @pytest.mark.asyncio
    async def test_increment_window_redis_error(self, redis_client, mock_redis):
        """Test Redis failures are reported as None."""
        mock_redis.incr.side_effect = RedisConnectionError("Connection refused")
        redis_client._redis = mock_redis

        assert await redis_client.increment_window("ratelimit:1.2.3.4", 60) is None

    @pytest.mark.asyncio
    async def test_get_ttl(self, redis_client, mock_redis):
        """Test TTL lookup."""
        mock_redis.ttl.return_value = 42
        redis_client._redis = mock_redis

        assert await redis_client.get_ttl("key") == 42

    @pytest.mark.asyncio
    async def test_get_ttl_without_expiry(self, redis_client, mock_redis):
        """Test keys without expiry report None."""
        mock_redis.ttl.return_value = -1
        redis_client._redis = mock_redis

        assert await redis_client.get_ttl("key") is None

    @pytest.mark.asyncio
    async def test_ping_success(self, redis_client, mock_redis):
        """Test successful ping."""
        mock_redis.ping.return_value = True
        redis_client._redis = mock_redis

        assert await redis_client.ping() is True

    @pytest.mark.asyncio
    async def test_ping_failure(self, redis_client, mock_redis):
        """Test ping failure."""
        mock_redis.ping.side_effect = RedisConnectionError("Connection refused")
        redis_client._redis = mock_redis

        assert await redis_client.ping() is False
