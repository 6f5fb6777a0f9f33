"""Fixtures shared by the repository tests."""

from __future__ import annotations

from datetime import timedelta
from typing import Any

import pytest

from learnstore.bootstrap import Repositories, build_repositories
from learnstore.cache.errors import CacheBackendError
from learnstore.cache.memory import MemoryCache
from learnstore.config.settings import AppSettings


class KeyOnlyCache:
    """Cache without pattern delete; calling ``delete_pattern`` is a test failure."""

    def __init__(self) -> None:
        self._inner = MemoryCache()
        self.deleted: list[str] = []
        self.failed: list[str] = []
        self.fail_deletes = 0

    @property
    def supports_pattern_delete(self) -> bool:
        return False

    async def get(self, key: str) -> Any | None:
        return await self._inner.get(key)

    async def set(self, key: str, value: Any, ttl: timedelta | None = None) -> None:
        await self._inner.set(key, value, ttl)

    async def delete(self, key: str) -> bool:
        if self.fail_deletes:
            self.fail_deletes -= 1
            self.failed.append(key)
            raise CacheBackendError("cache unavailable", key=key)
        self.deleted.append(key)
        return await self._inner.delete(key)

    async def delete_pattern(self, pattern: str) -> int:
        raise AssertionError("delete_pattern is not supported by this cache")

    async def clear(self) -> None:
        await self._inner.clear()

    async def keys(self) -> list[str]:
        return await self._inner.keys()


class FailingCache(MemoryCache):
    """Memory cache whose selected operations raise backend errors."""

    def __init__(self, fail_get: bool = False, fail_set: bool = False, fail_delete: bool = False) -> None:
        super().__init__()
        self.fail_get = fail_get
        self.fail_set = fail_set
        self.fail_delete = fail_delete

    async def get(self, key: str) -> Any | None:
        if self.fail_get:
            raise CacheBackendError("cache unavailable", key=key)
        return await super().get(key)

    async def set(self, key: str, value: Any, ttl: timedelta | None = None) -> None:
        if self.fail_set:
            raise CacheBackendError("cache unavailable", key=key)
        await super().set(key, value, ttl)

    async def delete(self, key: str) -> bool:
        if self.fail_delete:
            raise CacheBackendError("cache unavailable", key=key)
        return await super().delete(key)

    async def delete_pattern(self, pattern: str) -> int:
        if self.fail_delete:
            raise CacheBackendError("cache unavailable", pattern=pattern)
        return await super().delete_pattern(pattern)


class FlakyDeleteCache(MemoryCache):
    """Memory cache whose next ``fail_deletes`` key deletes raise."""

    def __init__(self) -> None:
        super().__init__()
        self.fail_deletes = 0
        self.failed: list[str] = []

    async def delete(self, key: str) -> bool:
        if self.fail_deletes:
            self.fail_deletes -= 1
            self.failed.append(key)
            raise CacheBackendError("cache unavailable", key=key)
        return await super().delete(key)


@pytest.fixture
def settings() -> AppSettings:
    return AppSettings(environment="testing")


@pytest.fixture
def repos(settings, storage, cache, event_bus, fake_logger) -> Repositories:
    """One repository set over in-memory storage, a memory cache and a recording bus."""
    return build_repositories(
        settings, storage=storage, cache=cache, event_bus=event_bus, logger=fake_logger
    )


@pytest.fixture
def key_only_cache() -> KeyOnlyCache:
    return KeyOnlyCache()


@pytest.fixture
def failing_cache():
    """Factory for caches that fail the selected operations."""
    return FailingCache


@pytest.fixture
def flaky_delete_cache() -> FlakyDeleteCache:
    return FlakyDeleteCache()
