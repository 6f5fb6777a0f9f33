"""SQLAlchemy Core storage backend.

Runs on any async SQLAlchemy engine: asyncpg for PostgreSQL in production,
aiosqlite for local files and tests. Array containment filters become JSONB
``@>`` on PostgreSQL and are evaluated in Python on other dialects.
"""

from __future__ import annotations

import asyncio
import contextlib
from collections.abc import AsyncIterator, Sequence
from datetime import UTC, datetime
from typing import Any
from uuid import uuid4

import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.exc import TimeoutError as PoolTimeoutError
from sqlalchemy.ext.asyncio import AsyncConnection, AsyncEngine, create_async_engine

from learnstore.logging import LoggerProtocol, get_logger
from learnstore.persistence import schema
from learnstore.persistence.config import DatabaseSettings
from learnstore.persistence.protocols import (
    STORAGE_ERROR,
    TIMEOUT,
    UNIQUE_VIOLATION,
    Row,
    StorageResult,
)
from learnstore.persistence.query import Filter, FilterOp, Order, matches


def create_engine(settings: DatabaseSettings) -> AsyncEngine:
    """Create an async engine from database settings."""
    kwargs: dict[str, Any] = {"echo": settings.echo}
    if settings.url.startswith("postgresql"):
        kwargs["pool_size"] = settings.pool_size
    return create_async_engine(settings.url, **kwargs)


class SQLAlchemyStorage:
    """``StorageBackendProtocol`` over an ``AsyncEngine``."""

    def __init__(
        self,
        engine: AsyncEngine,
        metadata: sa.MetaData = schema.metadata,
        timeout: float | None = None,
        logger: LoggerProtocol | None = None,
    ) -> None:
        """Initialize the SQL storage backend.

        Args:
            engine: Async engine to run statements on
            metadata: Table metadata (the learnstore schema by default)
            timeout: Per-operation deadline in seconds
            logger: Logger instance (optional)
        """
        self._engine = engine
        self._metadata = metadata
        self._timeout = timeout
        self._logger = logger or get_logger("learnstore.persistence.sql")

    @classmethod
    def from_settings(
        cls, settings: DatabaseSettings, logger: LoggerProtocol | None = None
    ) -> SQLAlchemyStorage:
        return cls(create_engine(settings), timeout=settings.timeout, logger=logger)

    @property
    def engine(self) -> AsyncEngine:
        return self._engine

    @property
    def _native_contains(self) -> bool:
        return self._engine.dialect.name == "postgresql"

    async def create_all(self) -> None:
        """Create every table that does not exist yet."""
        async with self._engine.begin() as conn:
            await conn.run_sync(self._metadata.create_all)

    async def drop_all(self) -> None:
        async with self._engine.begin() as conn:
            await conn.run_sync(self._metadata.drop_all)

    async def dispose(self) -> None:
        await self._engine.dispose()

    def _table(self, name: str) -> sa.Table:
        try:
            return self._metadata.tables[name]
        except KeyError:
            raise ValueError(f"Unknown table: {name}") from None

    def _where(
        self, table: sa.Table, filters: Sequence[Filter]
    ) -> tuple[list[sa.ColumnElement[bool]], list[Filter]]:
        """Split filters into SQL clauses and those left to Python."""
        clauses: list[sa.ColumnElement[bool]] = []
        deferred: list[Filter] = []
        for f in filters:
            column = table.c[f.column]
            match f.op:
                case FilterOp.EQ:
                    clauses.append(column.is_(None) if f.value is None else column == f.value)
                case FilterOp.NEQ:
                    clauses.append(
                        column.is_not(None)
                        if f.value is None
                        else sa.or_(column != f.value, column.is_(None))
                    )
                case FilterOp.GTE:
                    clauses.append(column >= f.value)
                case FilterOp.LTE:
                    clauses.append(column <= f.value)
                case FilterOp.IN:
                    clauses.append(column.in_(list(f.value)))
                case FilterOp.CONTAINS:
                    if self._native_contains:
                        clauses.append(sa.type_coerce(column, JSONB).contains(f.value))
                    else:
                        deferred.append(f)
        return clauses, deferred

    @contextlib.asynccontextmanager
    async def _transaction(self) -> AsyncIterator[AsyncConnection]:
        async with asyncio.timeout(self._timeout), self._engine.begin() as conn:
            yield conn

    def _failure(self, operation: str, table: str, error: Exception) -> StorageResult:
        if isinstance(error, IntegrityError):
            sqlstate = getattr(error.orig, "sqlstate", None) or getattr(error.orig, "pgcode", None)
            if sqlstate == UNIQUE_VIOLATION or "unique" in str(error.orig).lower():
                return StorageResult.failure(
                    UNIQUE_VIOLATION, str(error.orig), table=table, operation=operation
                )
        if isinstance(error, TimeoutError | PoolTimeoutError):
            self._logger.warning("Storage operation timed out", table=table, operation=operation)
            return StorageResult.failure(
                TIMEOUT,
                f"{operation} on {table} exceeded its deadline",
                table=table,
                operation=operation,
            )
        self._logger.error(
            "Storage operation failed", table=table, operation=operation, error=str(error)
        )
        return StorageResult.failure(STORAGE_ERROR, str(error), table=table, operation=operation)

    @staticmethod
    def _rows(result: sa.CursorResult[Any]) -> list[Row]:
        return [dict(row) for row in result.mappings().all()]

    async def select(
        self,
        table: str,
        filters: Sequence[Filter] = (),
        order_by: Sequence[Order] = (),
        limit: int | None = None,
        offset: int | None = None,
    ) -> StorageResult:
        t = self._table(table)
        clauses, deferred = self._where(t, filters)
        stmt = sa.select(t).where(*clauses)
        for order in order_by:
            column = t.c[order.column]
            stmt = stmt.order_by(column.desc() if order.descending else column.asc())
        if not deferred:
            if limit is not None:
                stmt = stmt.limit(limit)
            if offset:
                stmt = stmt.offset(offset)
        try:
            async with self._transaction() as conn:
                rows = self._rows(await conn.execute(stmt))
        except (SQLAlchemyError, TimeoutError) as e:
            return self._failure("select", table, e)

        if deferred:
            rows = [r for r in rows if matches(r, deferred)]
            start = offset or 0
            rows = rows[start : start + limit if limit is not None else None]
        return StorageResult.success(rows)

    async def insert(self, table: str, row: Row) -> StorageResult:
        t = self._table(table)
        now = datetime.now(UTC)
        values = {k: v for k, v in row.items() if k in t.c}
        values.setdefault("id", str(uuid4()))
        values["created_at"] = values.get("created_at") or now
        values["updated_at"] = now
        stmt = sa.insert(t).values(values).returning(*t.c)
        try:
            async with self._transaction() as conn:
                rows = self._rows(await conn.execute(stmt))
        except (SQLAlchemyError, TimeoutError) as e:
            return self._failure("insert", table, e)
        return StorageResult.success(rows[0])

    async def update(
        self, table: str, values: Row, filters: Sequence[Filter]
    ) -> StorageResult:
        t = self._table(table)
        changes = {k: v for k, v in values.items() if k in t.c and k not in ("id", "created_at")}
        changes["updated_at"] = datetime.now(UTC)
        clauses, deferred = self._where(t, filters)
        if deferred:
            raise ValueError("Containment filters are not supported for update on this dialect")
        stmt = sa.update(t).where(*clauses).values(changes).returning(*t.c)
        try:
            async with self._transaction() as conn:
                rows = self._rows(await conn.execute(stmt))
        except (SQLAlchemyError, TimeoutError) as e:
            return self._failure("update", table, e)
        return StorageResult.success(rows)

    async def delete(self, table: str, filters: Sequence[Filter]) -> StorageResult:
        t = self._table(table)
        clauses, deferred = self._where(t, filters)
        if deferred:
            raise ValueError("Containment filters are not supported for delete on this dialect")
        stmt = sa.delete(t).where(*clauses).returning(*t.c)
        try:
            async with self._transaction() as conn:
                rows = self._rows(await conn.execute(stmt))
        except (SQLAlchemyError, TimeoutError) as e:
            return self._failure("delete", table, e)
        return StorageResult.success(rows)
