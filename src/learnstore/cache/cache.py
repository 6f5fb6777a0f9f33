"""Cache statistics and backend selection."""

from __future__ import annotations

from typing import TYPE_CHECKING

from learnstore.cache.config import CacheSettings
from learnstore.cache.errors import CacheConfigurationError

if TYPE_CHECKING:
    from learnstore.cache.protocols import CacheProtocol
    from learnstore.logging import LoggerProtocol


class CacheStats:
    """Cache statistics."""

    def __init__(self, max_size: int | None = None) -> None:
        """Initialize cache statistics.

        Args:
            max_size: Maximum number of items the cache can hold
        """
        self.hits = 0
        self.misses = 0
        self.evictions = 0
        self.size = 0
        self.max_size = max_size

    def record_hit(self) -> None:
        self.hits += 1

    def record_miss(self) -> None:
        self.misses += 1

    def record_eviction(self, count: int = 1) -> None:
        self.evictions += count

    def hit_ratio(self) -> float:
        """Calculate the cache hit ratio."""
        total = self.hits + self.misses
        return self.hits / total if total > 0 else 0.0

    def __str__(self) -> str:
        return (
            f"CacheStats(hits={self.hits}, misses={self.misses}, "
            f"hit_ratio={self.hit_ratio():.2f}, size={self.size}, "
            f"max_size={self.max_size or 'unbounded'})"
        )


def create_cache(
    settings: CacheSettings | None = None,
    logger: LoggerProtocol | None = None,
) -> CacheProtocol:
    """Build the cache backend selected by ``settings.backend``.

    Args:
        settings: Cache settings (loaded from the environment if omitted)
        logger: Logger instance (optional)

    Returns:
        A cache instance; ``NullCache`` when caching is disabled

    Raises:
        CacheConfigurationError: If the redis backend is selected without a URL
    """
    settings = settings or CacheSettings()

    if settings.backend == "none":
        from learnstore.cache.null import NullCache

        return NullCache()
    if settings.backend == "memory":
        from learnstore.cache.memory import MemoryCache

        return MemoryCache(
            default_ttl=settings.ttl_single_timedelta,
            max_size=settings.max_size,
            logger=logger,
        )
    if settings.backend == "redis":
        if not settings.redis_url:
            raise CacheConfigurationError(
                "redis_url is required when the redis cache backend is selected",
                backend=settings.backend,
            )
        from learnstore.cache.redis import RedisCache

        return RedisCache.from_url(
            settings.redis_url,
            key_prefix=settings.key_prefix,
            default_ttl=settings.ttl_single_timedelta,
            logger=logger,
        )
    raise CacheConfigurationError(
        f"Unsupported cache backend: {settings.backend}", backend=settings.backend
    )
