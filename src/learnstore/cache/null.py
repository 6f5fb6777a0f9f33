"""Null-object cache: every read misses and every write is dropped."""

from __future__ import annotations

from datetime import timedelta
from typing import Any


class NullCache:
    """Cache used when caching is disabled."""

    @property
    def supports_pattern_delete(self) -> bool:
        return True

    async def get(self, key: str) -> Any | None:
        return None

    async def set(self, key: str, value: Any, ttl: timedelta | None = None) -> None:
        return None

    async def delete(self, key: str) -> bool:
        return False

    async def delete_pattern(self, pattern: str) -> int:
        return 0

    async def clear(self) -> None:
        return None
