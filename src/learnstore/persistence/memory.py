"""In-memory storage backend.

Rows live in per-table lists and are copied on the way in and out. Unique
columns are taken from the table schema so duplicate inserts fail with the
same code the SQL backend reports. Every call is counted, and failures can
be queued per operation, which makes this backend double as a test spy.
"""

from __future__ import annotations

import copy
from collections import Counter, defaultdict
from collections.abc import Sequence
from datetime import UTC, datetime
from typing import Any
from uuid import uuid4

from learnstore.persistence import schema
from learnstore.persistence.protocols import (
    UNIQUE_VIOLATION,
    Row,
    StorageFailure,
    StorageResult,
)
from learnstore.persistence.query import Filter, Order, matches, sort_rows


class InMemoryStorage:
    """Dictionary-backed implementation of ``StorageBackendProtocol``."""

    def __init__(self, unique_columns: dict[str, tuple[str, ...]] | None = None) -> None:
        self._tables: dict[str, list[Row]] = defaultdict(list)
        self._unique = schema.unique_columns() if unique_columns is None else unique_columns
        self._failures: dict[str, list[StorageFailure]] = defaultdict(list)
        self.calls: Counter[str] = Counter()

    def fail_next(self, operation: str, failure: StorageFailure) -> None:
        """Make the next ``operation`` call return ``failure`` without touching data."""
        self._failures[operation].append(failure)

    def rows(self, table: str) -> list[Row]:
        """Copy of every stored row in ``table`` (no filtering)."""
        return copy.deepcopy(self._tables[table])

    def reset(self) -> None:
        self._tables.clear()
        self._failures.clear()
        self.calls.clear()

    def _injected(self, operation: str) -> StorageResult | None:
        self.calls[operation] += 1
        queued = self._failures.get(operation)
        if queued:
            return StorageResult(error=queued.pop(0))
        return None

    def _conflict(self, table: str, row: Row, ignore_id: Any = None) -> str | None:
        for existing in self._tables[table]:
            if existing.get("id") == ignore_id:
                continue
            if existing.get("id") == row.get("id"):
                return "id"
            for column in self._unique.get(table, ()):
                if row.get(column) is not None and existing.get(column) == row.get(column):
                    return column
        return None

    async def select(
        self,
        table: str,
        filters: Sequence[Filter] = (),
        order_by: Sequence[Order] = (),
        limit: int | None = None,
        offset: int | None = None,
    ) -> StorageResult:
        if failed := self._injected("select"):
            return failed
        rows = [r for r in self._tables[table] if matches(r, filters)]
        rows = sort_rows(rows, order_by)
        start = offset or 0
        end = start + limit if limit is not None else None
        return StorageResult.success(copy.deepcopy(rows[start:end]))

    async def insert(self, table: str, row: Row) -> StorageResult:
        if failed := self._injected("insert"):
            return failed
        now = datetime.now(UTC)
        stored = copy.deepcopy(row)
        stored.setdefault("id", str(uuid4()))
        stored["created_at"] = stored.get("created_at") or now
        stored["updated_at"] = now

        if column := self._conflict(table, stored):
            return StorageResult.failure(
                UNIQUE_VIOLATION,
                f"duplicate key value violates unique constraint on {table}.{column}",
                table=table,
                column=column,
                value=stored.get(column),
            )
        self._tables[table].append(stored)
        return StorageResult.success(copy.deepcopy(stored))

    async def update(
        self, table: str, values: Row, filters: Sequence[Filter]
    ) -> StorageResult:
        if failed := self._injected("update"):
            return failed
        changes = {k: v for k, v in copy.deepcopy(values).items() if k not in ("id", "created_at")}
        changes["updated_at"] = datetime.now(UTC)

        updated: list[Row] = []
        for index, existing in enumerate(self._tables[table]):
            if not matches(existing, filters):
                continue
            candidate = {**existing, **changes}
            if column := self._conflict(table, candidate, ignore_id=existing.get("id")):
                return StorageResult.failure(
                    UNIQUE_VIOLATION,
                    f"duplicate key value violates unique constraint on {table}.{column}",
                    table=table,
                    column=column,
                    value=candidate.get(column),
                )
            self._tables[table][index] = candidate
            updated.append(copy.deepcopy(candidate))
        return StorageResult.success(updated)

    async def delete(self, table: str, filters: Sequence[Filter]) -> StorageResult:
        if failed := self._injected("delete"):
            return failed
        kept: list[Row] = []
        removed: list[Row] = []
        for row in self._tables[table]:
            (removed if matches(row, filters) else kept).append(row)
        self._tables[table] = kept
        return StorageResult.success(removed)
