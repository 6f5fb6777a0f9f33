"""Storage backend protocol.

Every operation returns a ``StorageResult`` rather than raising: ``data``
holds the rows on success and ``error`` describes the failure otherwise.
No SQL or backend-specific syntax crosses this boundary.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any, Final, Protocol, runtime_checkable

from learnstore.persistence.query import Filter, Order

Row = dict[str, Any]

# PostgreSQL SQLSTATE for unique_violation
UNIQUE_VIOLATION: Final = "23505"
TIMEOUT: Final = "TIMEOUT"
STORAGE_ERROR: Final = "STORAGE_ERROR"


@dataclass(frozen=True)
class StorageFailure:
    code: str
    message: str
    details: dict[str, Any] = field(default_factory=dict)

    @property
    def is_unique_violation(self) -> bool:
        return self.code == UNIQUE_VIOLATION

    @property
    def is_timeout(self) -> bool:
        return self.code == TIMEOUT


@dataclass(frozen=True)
class StorageResult:
    data: Any = None
    error: StorageFailure | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, data: Any) -> StorageResult:
        return cls(data=data)

    @classmethod
    def failure(cls, code: str, message: str, **details: Any) -> StorageResult:
        return cls(error=StorageFailure(code, message, details))


@runtime_checkable
class StorageBackendProtocol(Protocol):
    """Table-oriented storage used by the repositories."""

    async def select(
        self,
        table: str,
        filters: Sequence[Filter] = (),
        order_by: Sequence[Order] = (),
        limit: int | None = None,
        offset: int | None = None,
    ) -> StorageResult:
        """Select rows; ``data`` is a list of rows."""
        ...

    async def insert(self, table: str, row: Row) -> StorageResult:
        """Insert a row; ``data`` is the stored row including generated fields."""
        ...

    async def update(
        self, table: str, values: Row, filters: Sequence[Filter]
    ) -> StorageResult:
        """Update matching rows; ``data`` is the list of updated rows."""
        ...

    async def delete(self, table: str, filters: Sequence[Filter]) -> StorageResult:
        """Delete matching rows; ``data`` is the list of deleted rows."""
        ...
