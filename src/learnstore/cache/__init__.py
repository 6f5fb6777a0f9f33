"""Read-aside caching for learnstore repositories.

Three interchangeable backends implement ``CacheProtocol``:

- ``NullCache`` when caching is disabled
- ``MemoryCache`` for a single process (TTL plus LRU eviction)
- ``RedisCache`` for a cache shared between processes
"""

from learnstore.cache.cache import CacheStats, create_cache
from learnstore.cache.config import CacheSettings
from learnstore.cache.errors import (
    CacheBackendError,
    CacheConfigurationError,
    CacheError,
    CacheSerializationError,
)
from learnstore.cache.keys import CacheKeys
from learnstore.cache.memory import MemoryCache
from learnstore.cache.null import NullCache
from learnstore.cache.protocols import CacheKey, CacheProtocol

__all__ = [
    "CacheBackendError",
    "CacheConfigurationError",
    "CacheError",
    "CacheKey",
    "CacheKeys",
    "CacheProtocol",
    "CacheSerializationError",
    "CacheSettings",
    "CacheStats",
    "MemoryCache",
    "NullCache",
    "create_cache",
]
