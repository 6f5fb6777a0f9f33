"""Redis backend for the cache system."""

from __future__ import annotations

import json
from datetime import timedelta
from typing import Any

from redis.asyncio import Redis
from redis.exceptions import RedisError

from learnstore.cache.errors import CacheBackendError, CacheSerializationError
from learnstore.logging import LoggerProtocol, get_logger


class RedisCache:
    """Shared cache backed by Redis.

    Values are stored as JSON under ``key_prefix + key``; ``delete_pattern``
    walks matching keys with SCAN so it never blocks the server with KEYS.
    """

    def __init__(
        self,
        redis: Redis,
        key_prefix: str = "learnstore:",
        default_ttl: timedelta | None = None,
        logger: LoggerProtocol | None = None,
    ) -> None:
        """Initialize the Redis cache.

        Args:
            redis: Redis client instance
            key_prefix: Prefix applied to every key written by this cache
            default_ttl: Default time-to-live for cached values
            logger: Logger instance (optional)
        """
        self._redis = redis
        self.key_prefix = key_prefix
        self.default_ttl = default_ttl
        self._logger = logger or get_logger("learnstore.cache.redis")

    @classmethod
    def from_url(
        cls,
        url: str,
        key_prefix: str = "learnstore:",
        default_ttl: timedelta | None = None,
        logger: LoggerProtocol | None = None,
    ) -> RedisCache:
        """Create a cache from a Redis connection URL."""
        try:
            client = Redis.from_url(url)
        except ValueError as e:
            raise CacheBackendError(f"Failed to create Redis client: {e}", url=url) from e
        return cls(client, key_prefix=key_prefix, default_ttl=default_ttl, logger=logger)

    @property
    def supports_pattern_delete(self) -> bool:
        return True

    def _key(self, key: str) -> str:
        return f"{self.key_prefix}{key}"

    async def get(self, key: str) -> Any | None:
        try:
            data = await self._redis.get(self._key(key))
        except RedisError as e:
            self._logger.error("Redis error getting key", key=key, error=str(e))
            raise CacheBackendError(f"Redis error: {e}", key=key) from e
        if data is None:
            return None
        try:
            return json.loads(data)
        except ValueError:
            # A corrupt entry is treated as a miss and dropped
            self._logger.warning("Discarding undecodable cache entry", key=key)
            await self.delete(key)
            return None

    async def set(self, key: str, value: Any, ttl: timedelta | None = None) -> None:
        try:
            serialized = json.dumps(value)
        except (TypeError, ValueError) as e:
            raise CacheSerializationError(f"Failed to serialize value: {e}", key=key) from e

        ttl = ttl or self.default_ttl
        ttl_seconds = max(int(ttl.total_seconds()), 1) if ttl else None
        try:
            await self._redis.set(self._key(key), serialized, ex=ttl_seconds)
        except RedisError as e:
            self._logger.error("Redis error setting key", key=key, error=str(e))
            raise CacheBackendError(f"Redis error: {e}", key=key) from e

    async def delete(self, key: str) -> bool:
        try:
            return bool(await self._redis.delete(self._key(key)))
        except RedisError as e:
            self._logger.error("Redis error deleting key", key=key, error=str(e))
            raise CacheBackendError(f"Redis error: {e}", key=key) from e

    async def delete_pattern(self, pattern: str) -> int:
        try:
            keys = [key async for key in self._redis.scan_iter(match=self._key(pattern))]
            if not keys:
                return 0
            return int(await self._redis.delete(*keys))
        except RedisError as e:
            self._logger.error("Redis error deleting pattern", pattern=pattern, error=str(e))
            raise CacheBackendError(f"Redis error: {e}", pattern=pattern) from e

    async def clear(self) -> None:
        """Clear every key under this cache's prefix."""
        await self.delete_pattern("*")

    async def close(self) -> None:
        """Close the Redis connection."""
        await self._redis.aclose()

    async def __aenter__(self) -> RedisCache:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()
