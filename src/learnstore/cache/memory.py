"""In-memory backend for the cache system."""

from __future__ import annotations

import asyncio
import copy
import fnmatch
import time
from collections import OrderedDict
from datetime import timedelta
from typing import Any

from learnstore.cache.cache import CacheStats
from learnstore.logging import LoggerProtocol, get_logger


class MemoryCache:
    """In-memory cache with per-entry TTL and LRU eviction.

    Values are deep-copied on the way in and out so callers can never
    mutate a cached entry in place.
    """

    def __init__(
        self,
        default_ttl: timedelta | None = None,
        max_size: int | None = 1000,
        logger: LoggerProtocol | None = None,
        clock: Any = time.monotonic,
    ) -> None:
        """Initialize the in-memory cache.

        Args:
            default_ttl: Default time-to-live for cached values (1 hour if omitted)
            max_size: Maximum number of items the cache can hold (None for unbounded)
            logger: Logger instance (optional)
            clock: Monotonic clock, replaceable in tests
        """
        self.default_ttl = default_ttl or timedelta(hours=1)
        self.max_size = max_size
        self._logger = logger or get_logger("learnstore.cache.memory")
        self._clock = clock
        # Use OrderedDict for LRU eviction
        self._store: OrderedDict[str, tuple[Any, float | None]] = OrderedDict()
        self._lock = asyncio.Lock()
        self.stats = CacheStats(max_size)

    @property
    def supports_pattern_delete(self) -> bool:
        return True

    async def get(self, key: str) -> Any | None:
        async with self._lock:
            entry = self._store.get(key)
            if entry is None:
                self.stats.record_miss()
                return None

            value, expiry = entry
            if expiry is not None and self._clock() > expiry:
                del self._store[key]
                self.stats.size = len(self._store)
                self.stats.record_miss()
                return None

            # Move the key to the end to mark it as recently used
            self._store.move_to_end(key)
            self.stats.record_hit()
            return copy.deepcopy(value)

    async def set(self, key: str, value: Any, ttl: timedelta | None = None) -> None:
        ttl = ttl or self.default_ttl
        async with self._lock:
            if key in self._store:
                del self._store[key]

            expiry = self._clock() + ttl.total_seconds() if ttl else None
            self._store[key] = (copy.deepcopy(value), expiry)

            if self.max_size is not None and len(self._store) > self.max_size:
                # Remove the first item (least recently used)
                evicted, _ = self._store.popitem(last=False)
                self.stats.record_eviction()
                self._logger.debug("Evicted least recently used cache entry", key=evicted)
            self.stats.size = len(self._store)

    async def delete(self, key: str) -> bool:
        async with self._lock:
            if key in self._store:
                del self._store[key]
                self.stats.size = len(self._store)
                return True
            return False

    async def delete_pattern(self, pattern: str) -> int:
        async with self._lock:
            matching = [key for key in self._store if fnmatch.fnmatchcase(key, pattern)]
            for key in matching:
                del self._store[key]
            self.stats.size = len(self._store)
            return len(matching)

    async def keys(self, pattern: str = "*") -> list[str]:
        """List live keys matching a glob pattern."""
        async with self._lock:
            now = self._clock()
            return [
                key
                for key, (_, expiry) in self._store.items()
                if (expiry is None or expiry >= now) and fnmatch.fnmatchcase(key, pattern)
            ]

    async def clear(self) -> None:
        async with self._lock:
            self._store.clear()
            self.stats.size = 0
