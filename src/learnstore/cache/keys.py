"""Cache key layout shared by the repositories.

Every key for an entity type starts with ``<prefix>:`` so one pattern
delete evicts the whole type:

    <prefix>:all
    <prefix>:id:<id>
    <prefix>:code:<code>
    <prefix>:<predicate>:<value>
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class CacheKeys:
    """Builds cache keys for one entity type."""

    prefix: str

    @property
    def all(self) -> str:
        return f"{self.prefix}:all"

    @property
    def pattern(self) -> str:
        """Glob pattern matching every key of this entity type."""
        return f"{self.prefix}:*"

    def by_id(self, entity_id: str) -> str:
        return f"{self.prefix}:id:{entity_id}"

    def by_code(self, code: str) -> str:
        return f"{self.prefix}:code:{code}"

    def predicate(self, name: str, value: object) -> str:
        return f"{self.prefix}:{name}:{value}"
