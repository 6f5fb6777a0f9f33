# SPDX-FileCopyrightText: 2024-present Richard Dahl <richard@dahl.us>
# SPDX-License-Identifier: MIT
# SPDX-Package-Name: learnstore
"""
Generic entity repository.

A repository holds its collaborators (storage, cache, event bus, logger) and
implements the read, save, delete and seed paths once for every entity type:

- reads are cache-aside: the cache is consulted first, storage on a miss,
  and the result is cached with a TTL that depends on its cardinality
- ``save`` takes the entity's pending events before anything else, decides
  insert or update by looking up the existing record, checks status
  transitions, writes, evicts every cache key the write could affect and
  only then publishes the events
- errors are rewritten into domain kinds at each public method boundary by
  ``repository_operation``
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass, field
from datetime import timedelta
from typing import Any, ClassVar, Generic, TypeVar

from pydantic import ValidationError as PydanticValidationError

from learnstore.cache.keys import CacheKeys
from learnstore.cache.null import NullCache
from learnstore.cache.protocols import CacheProtocol
from learnstore.domain.entity import Entity
from learnstore.errors.base import LearnstoreError
from learnstore.events.bus import NullEventBus
from learnstore.events.events import DomainEvent
from learnstore.events.protocols import EventBusProtocol
from learnstore.logging import LoggerProtocol, get_logger
from learnstore.persistence.errors import (
    DatabaseError,
    DuplicateEntityError,
    EntityNotFoundError,
    ValidationError,
)
from learnstore.persistence.protocols import StorageBackendProtocol, StorageResult
from learnstore.persistence.query import Filter, Order, eq
from learnstore.repositories.errors import ErrorCollector, ErrorMapper, repository_operation
from learnstore.repositories.mappers import EntityMapper

E = TypeVar("E", bound=Entity)

DEFAULT_TTL_ALL = timedelta(hours=1)
DEFAULT_TTL_SINGLE = timedelta(minutes=30)


@dataclass
class SeedReport(Generic[E]):
    """Outcome of a seed call: what was saved and what was skipped."""

    saved: list[E] = field(default_factory=list)
    errors: ErrorCollector = field(default_factory=ErrorCollector)

    @property
    def saved_count(self) -> int:
        return len(self.saved)

    @property
    def failed_count(self) -> int:
        return len(self.errors)


class EntityRepository(Generic[E]):
    """Base repository shared by every entity type.

    Subclasses declare the entity class, table, cache key prefix, ordering,
    the filter that selects active records and the error mapper.
    """

    entity_class: ClassVar[type[Entity]]
    table: ClassVar[str]
    cache_prefix: ClassVar[str]
    key_column: ClassVar[str] = "id"
    order_by: ClassVar[tuple[Order, ...]] = ()
    active_filters: ClassVar[tuple[Filter, ...]] = (eq("is_active", True),)
    error_mapper: ClassVar[ErrorMapper]

    def __init__(
        self,
        storage: StorageBackendProtocol,
        cache: CacheProtocol | None = None,
        event_bus: EventBusProtocol | None = None,
        logger: LoggerProtocol | None = None,
        ttl_all: timedelta = DEFAULT_TTL_ALL,
        ttl_single: timedelta = DEFAULT_TTL_SINGLE,
    ) -> None:
        """Initialize the repository.

        Args:
            storage: Storage backend holding the table
            cache: Read-aside cache (caching is disabled if omitted)
            event_bus: Bus receiving domain events after each write
            logger: Logger instance; defaults to ``learnstore.repository.<type>``
            ttl_all: Time-to-live for whole-collection cache entries
            ttl_single: Time-to-live for single-entity and predicate entries
        """
        self._storage = storage
        self._cache: CacheProtocol = cache or NullCache()
        self._event_bus: EventBusProtocol = event_bus or NullEventBus()
        self._logger = logger or get_logger(f"learnstore.repository.{self.entity_type}")
        self._mapper: EntityMapper[E] = EntityMapper(self.entity_class)  # type: ignore[arg-type]
        self._keys = CacheKeys(self.cache_prefix)
        self._ttl_all = ttl_all
        self._ttl_single = ttl_single
        # Keys written by this instance, for caches without pattern delete
        self._written_keys: set[str] = set()
        self._predicate_keys: set[str] = set()

    @property
    def entity_type(self) -> str:
        return self.entity_class.entity_type

    @property
    def keys(self) -> CacheKeys:
        return self._keys

    # ------------------------------------------------------------------
    # validation

    def _require(self, value: Any, name: str) -> None:
        """Reject missing or empty arguments before any I/O."""
        if value is None or (isinstance(value, str | list | tuple | set | dict) and not value):
            raise ValidationError(
                f"{name} is required", field=name, entity_type=self.entity_type
            )
        if isinstance(value, str) and not value.strip():
            raise ValidationError(
                f"{name} must not be blank", field=name, entity_type=self.entity_type
            )

    # ------------------------------------------------------------------
    # storage

    async def _run(self, operation: str, call: Any, **context: Any) -> Any:
        """Await a storage call and turn any failure into a persistence error."""
        try:
            result: StorageResult = await call
        except LearnstoreError:
            raise
        except Exception as e:
            raise DatabaseError(
                f"Storage {operation} failed for {self.entity_type}: {e}",
                operation=operation,
                entity_type=self.entity_type,
                **context,
            ) from e

        if result.error is not None:
            if result.error.is_unique_violation:
                raise DuplicateEntityError(
                    entity_type=self.entity_type,
                    key=context.get("key"),
                    operation=operation,
                    storage_message=result.error.message,
                )
            raise DatabaseError(
                f"Storage {operation} failed for {self.entity_type}: {result.error.message}",
                operation=operation,
                entity_type=self.entity_type,
                storage_code=result.error.code,
                **context,
            )
        return result.data

    async def _select(
        self,
        operation: str,
        filters: Sequence[Filter],
        order_by: Sequence[Order] | None = None,
        limit: int | None = None,
        offset: int | None = None,
        **context: Any,
    ) -> list[E]:
        rows = await self._run(
            operation,
            self._storage.select(
                self.table,
                filters=filters,
                order_by=self.order_by if order_by is None else order_by,
                limit=limit,
                offset=offset,
            ),
            **context,
        )
        return self._mapper.to_domain_collection(rows)

    async def _select_one(self, operation: str, column: str, value: Any) -> E | None:
        """Unfiltered single-row lookup straight from storage."""
        found = await self._select(operation, [eq(column, value)], order_by=(), limit=1, key=value)
        return found[0] if found else None

    # ------------------------------------------------------------------
    # cache

    async def _cache_get(self, key: str) -> Any | None:
        try:
            return await self._cache.get(key)
        except Exception as e:
            raise DatabaseError(
                f"Cache read failed for {self.entity_type}: {e}",
                operation="cache_get",
                entity_type=self.entity_type,
                cache_key=key,
            ) from e

    async def _cache_set(
        self, key: str, value: Any, ttl: timedelta, predicate: bool = False
    ) -> None:
        try:
            await self._cache.set(key, value, ttl)
        except Exception as e:
            # The result is still correct; only caching is lost
            self._logger.warning(
                "Failed to populate cache entry", cache_key=key, error=str(e)
            )
            return
        if self._cache.supports_pattern_delete:
            return
        self._written_keys.add(key)
        if predicate:
            self._predicate_keys.add(key)

    @property
    def tracked_cache_keys(self) -> frozenset[str]:
        """Keys this instance must evict itself because the cache has no pattern delete."""
        return frozenset(self._written_keys)

    def _forget(self, key: str) -> None:
        self._written_keys.discard(key)
        self._predicate_keys.discard(key)

    async def _evict(self, key: str) -> Exception | None:
        """Delete one key; a failure is returned and the key stays tracked."""
        try:
            await self._cache.delete(key)
        except Exception as e:
            return e
        self._forget(key)
        return None

    async def _evict_pattern(self, pattern: str) -> Exception | None:
        try:
            await self._cache.delete_pattern(pattern)
        except Exception as e:
            return e
        return None

    async def _cached_one(
        self, key: str, loader: Callable[[], Awaitable[E | None]]
    ) -> E | None:
        cached = await self._cache_get(key)
        if cached is not None:
            self._logger.debug("Cache hit", cache_key=key)
            return self._mapper.from_cache(cached)
        entity = await loader()
        if entity is not None:
            await self._cache_set(key, self._mapper.to_cache(entity), self._ttl_single)
        return entity

    async def _cached_many(
        self,
        key: str,
        loader: Callable[[], Awaitable[list[E]]],
        ttl: timedelta,
        predicate: bool = True,
    ) -> list[E]:
        cached = await self._cache_get(key)
        if cached is not None:
            self._logger.debug("Cache hit", cache_key=key)
            return self._mapper.from_cache_collection(cached)
        entities = await loader()
        await self._cache_set(
            key, self._mapper.to_cache_collection(entities), ttl, predicate=predicate
        )
        return entities

    def _entity_keys(self, entity: Entity) -> list[str]:
        keys = [self._keys.all, self._keys.by_id(entity.id)]
        if entity.business_key is not None:
            keys.append(self._keys.by_code(entity.business_key))
        return keys

    async def _invalidate(self, *entities: Entity) -> None:
        """Evict every key a write to ``entities`` could have made stale.

        Each key and pattern is evicted on its own, so one failure does not
        leave the others stale. Failures are logged, never raised: the write
        already committed.
        """
        keys: list[str] = []
        for entity in entities:
            keys.extend(k for k in self._entity_keys(entity) if k not in keys)

        failures: list[tuple[str, Exception]] = []
        for key in keys:
            error = await self._evict(key)
            if error is not None:
                failures.append((key, error))
        if self._cache.supports_pattern_delete:
            for name in self.predicate_names():
                pattern = self._keys.predicate(name, "*")
                error = await self._evict_pattern(pattern)
                if error is not None:
                    failures.append((pattern, error))
        else:
            for key in sorted(self._predicate_keys):
                error = await self._evict(key)
                if error is not None:
                    failures.append((key, error))

        for key, error in failures:
            self._logger.warning(
                "Cache invalidation failed; entry may be stale until it expires",
                entity_type=self.entity_type,
                cache_key=key,
                error=str(error),
            )

    def predicate_names(self) -> tuple[str, ...]:
        """Names of predicate finders whose cache keys a write must evict."""
        return ()

    @repository_operation("invalidate_cache")
    async def invalidate_cache(self) -> None:
        """Evict every cache entry of this entity type."""
        if self._cache.supports_pattern_delete:
            targets = [self._keys.pattern]
            evict = self._evict_pattern
        else:
            targets = sorted(self._written_keys)
            evict = self._evict
        failed: list[str] = []
        first: Exception | None = None
        for target in targets:
            error = await evict(target)
            if error is not None:
                failed.append(target)
                first = first or error
        if first is not None:
            raise DatabaseError(
                f"Cache invalidation failed for {self.entity_type}: {first}",
                operation="invalidate_cache",
                entity_type=self.entity_type,
                cache_keys=failed,
            ) from first


    # ------------------------------------------------------------------
    # events

    async def _publish(self, events: list[DomainEvent]) -> None:
        """Publish in order; failures are logged and never raised."""
        if not events:
            return
        collector = ErrorCollector()
        for event in events:
            try:
                await self._event_bus.publish(event)
            except Exception as e:
                collector.collect(e, event_type=event.event_type, event_id=event.event_id)
        if collector:
            self._logger.error(
                "Failed to publish domain events",
                entity_type=self.entity_type,
                failed=len(collector),
                total=len(events),
                errors=[f"{c.context['event_type']}: {c.error}" for c in collector.errors],
            )
        else:
            self._logger.debug(
                "Published domain events",
                entity_type=self.entity_type,
                count=len(events),
            )

    # ------------------------------------------------------------------
    # read path

    def _found(self, entity: E | None, key: str, raise_if_not_found: bool) -> E | None:
        if entity is None and raise_if_not_found:
            raise EntityNotFoundError(entity_type=self.entity_type, key=key)
        return entity

    @repository_operation("find_by_id")
    async def find_by_id(self, entity_id: str, raise_if_not_found: bool = False) -> E | None:
        """Find an entity by id, active or not.

        Returns ``None`` when there is none, unless ``raise_if_not_found``
        asks for ``EntityNotFoundError`` instead.
        """
        self._require(entity_id, "id")
        entity = await self._cached_one(
            self._keys.by_id(entity_id), lambda: self._select_one("find_by_id", "id", entity_id)
        )
        return self._found(entity, entity_id, raise_if_not_found)

    @repository_operation("find_all")
    async def find_all(self) -> list[E]:
        """All active entities in the declared order."""
        return await self._cached_many(
            self._keys.all,
            lambda: self._select("find_all", self.active_filters),
            self._ttl_all,
            predicate=False,
        )

    async def _find_by_predicate(
        self,
        operation: str,
        name: str,
        value: Any,
        filters: Sequence[Filter],
        order_by: Sequence[Order] | None = None,
        limit: int | None = None,
        offset: int | None = None,
    ) -> list[E]:
        self._require(value, name)
        return await self._cached_many(
            self._keys.predicate(name, value),
            lambda: self._select(
                operation,
                [*self.active_filters, *filters],
                order_by=order_by,
                limit=limit,
                offset=offset,
                key=value,
            ),
            self._ttl_single,
        )

    async def _load_existing(self, entity: E) -> E | None:
        """Best-effort storage read deciding insert versus update."""
        if entity.business_key is not None:
            return await self._select_one("find_existing", self.key_column, entity.business_key)
        return await self._select_one("find_existing", "id", entity.id)

    # ------------------------------------------------------------------
    # write path

    @repository_operation("save")
    async def save(self, entity: E) -> E:
        """Insert or update ``entity`` and publish its pending events.

        Returns:
            The entity as stored, including generated fields
        """
        return await self._save(entity)

    async def _save(self, entity: E) -> E:
        if not isinstance(entity, self.entity_class):
            raise ValidationError(
                f"save expects a {self.entity_class.__name__}, got {type(entity).__name__}",
                field="entity",
                entity_type=self.entity_type,
            )
        events = entity.pull_events()
        key = entity.business_key or entity.id

        existing = await self._load_existing(entity)
        if existing is not None:
            self._check_transition(existing, entity)
            rows = await self._run(
                "update",
                self._storage.update(
                    self.table,
                    self._mapper.to_persistence(entity),
                    [eq("id", existing.id)],
                ),
                key=key,
            )
            if not rows:
                raise EntityNotFoundError(
                    entity_type=self.entity_type,
                    key=key,
                    message=f"{self.entity_type} {key} disappeared before it could be updated",
                )
            saved = self._mapper.to_domain(rows[0])
        else:
            row = await self._run(
                "insert",
                self._storage.insert(self.table, self._mapper.to_persistence(entity)),
                key=key,
            )
            saved = self._mapper.to_domain(row)
            if not events:
                events = [DomainEvent.create(saved.creation_event_type(), saved.identity())]

        await self._invalidate(*(e for e in (existing, saved) if e is not None))
        self._logger.info(
            f"{'Updated' if existing is not None else 'Created'} {self.entity_type}",
            entity_id=saved.id,
            key=key,
            events=len(events),
        )
        await self._publish(events)
        return saved

    def _check_transition(self, existing: E, proposed: E) -> None:
        guard = self.entity_class.status_guard
        if guard is None:
            return
        current, new = existing.status_value, proposed.status_value
        if current is not None and new is not None and current != new:
            guard.ensure(current, new, entity_id=existing.id)

    # ------------------------------------------------------------------
    # delete path

    @repository_operation("delete")
    async def delete(self, key: str) -> bool:
        """Delete the record with this key.

        Returns:
            True if a record existed and was deleted, False otherwise
        """
        self._require(key, self.key_column)
        existing = await self._select_one("find_existing", self.key_column, key)
        if existing is None:
            self._logger.debug(f"No {self.entity_type} to delete", key=key)
            return False

        removed = await self._run(
            "delete",
            self._storage.delete(self.table, [eq("id", existing.id)]),
            key=key,
        )
        await self._invalidate(existing)
        if not removed:
            return False
        self._logger.info(f"Deleted {self.entity_type}", entity_id=existing.id, key=key)
        await self._after_delete(existing)
        return True

    async def _after_delete(self, entity: E) -> None:
        """Hook for events that follow a delete."""
        return None

    # ------------------------------------------------------------------
    # seed path

    @repository_operation("seed")
    async def seed(self, records: Sequence[dict[str, Any] | E]) -> SeedReport[E]:
        """Save every valid record; invalid ones are collected, not fatal."""
        if not records or isinstance(records, str | bytes | dict) or not isinstance(
            records, Sequence
        ):
            raise ValidationError(
                "seed requires a non-empty list of records",
                field="records",
                entity_type=self.entity_type,
            )

        report: SeedReport[E] = SeedReport()
        for index, record in enumerate(records):
            try:
                entity = (
                    record
                    if isinstance(record, self.entity_class)
                    else self.entity_class.model_validate(record)
                )
            except PydanticValidationError as e:
                report.errors.collect(
                    ValidationError(
                        f"Invalid {self.entity_type} record at index {index}",
                        field="records",
                        index=index,
                        details=e.errors(include_url=False),
                    ),
                    index=index,
                )
                continue
            try:
                report.saved.append(await self.save(entity))  # type: ignore[arg-type]
            except LearnstoreError as e:
                report.errors.collect(e, index=index)

        self._logger.info(
            f"Seeded {self.entity_type}",
            total=len(records),
            saved=report.saved_count,
            failed=report.failed_count,
        )
        if report.errors:
            self._logger.warning(
                f"Some {self.entity_type} records could not be seeded",
                failed=report.failed_count,
                by_type=report.errors.summary(),
                indexes=[c.context.get("index") for c in report.errors.errors],
            )
        return report


class CatalogRepository(EntityRepository[E]):
    """Repository for code-keyed catalog entities."""

    key_column: ClassVar[str] = "code"

    @repository_operation("find_by_code")
    async def find_by_code(self, code: str, raise_if_not_found: bool = False) -> E | None:
        """Find an entity by code, active or not; ``None`` if there is none."""
        self._require(code, "code")
        entity = await self._cached_one(
            self._keys.by_code(code), lambda: self._select_one("find_by_code", "code", code)
        )
        return self._found(entity, code, raise_if_not_found)
