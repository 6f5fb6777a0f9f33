"""Protocols for the caching system."""

from __future__ import annotations

from datetime import timedelta
from typing import Any, Protocol, runtime_checkable

CacheKey = str


@runtime_checkable
class CacheProtocol(Protocol):
    """Protocol for cache implementations used read-aside by repositories.

    ``get`` returns ``None`` on a miss, so ``None`` itself is never cached.
    Implementations that can evict by glob pattern advertise it through
    ``supports_pattern_delete``; callers must not call ``delete_pattern``
    otherwise.
    """

    @property
    def supports_pattern_delete(self) -> bool:
        """Whether ``delete_pattern`` is natively supported."""
        ...

    async def get(self, key: CacheKey) -> Any | None:
        """Get a value from the cache.

        Args:
            key: The cache key

        Returns:
            The cached value, or None on a miss

        Raises:
            CacheBackendError: If there's an error accessing the cache
        """
        ...

    async def set(
        self,
        key: CacheKey,
        value: Any,
        ttl: timedelta | None = None,
    ) -> None:
        """Set a value in the cache.

        Args:
            key: The cache key
            value: The value to cache (JSON-compatible)
            ttl: Time to live for the cached value

        Raises:
            CacheBackendError: If there's an error accessing the cache
        """
        ...

    async def delete(self, key: CacheKey) -> bool:
        """Delete a value from the cache.

        Returns:
            True if the key was in the cache, False otherwise
        """
        ...

    async def delete_pattern(self, pattern: str) -> int:
        """Delete every key matching a glob pattern.

        Returns:
            The number of keys removed
        """
        ...

    async def clear(self) -> None:
        """Clear all values from the cache."""
        ...
