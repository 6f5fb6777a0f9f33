"""Pure conversions between storage rows, cache payloads and entities."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any, Generic, TypeVar

from learnstore.domain.entity import Entity
from learnstore.persistence.protocols import Row

E = TypeVar("E", bound=Entity)


class EntityMapper(Generic[E]):
    """Maps one entity class to and from rows and cache payloads."""

    def __init__(self, entity_class: type[E]) -> None:
        self.entity_class = entity_class

    def to_domain(self, row: Row) -> E:
        # NULL columns fall back to the field defaults
        return self.entity_class.model_validate({k: v for k, v in row.items() if v is not None})

    def to_domain_collection(self, rows: Iterable[Row]) -> list[E]:
        return [self.to_domain(row) for row in rows]

    def to_persistence(self, entity: E) -> Row:
        row = entity.model_dump(mode="python")
        for column in ("created_at", "updated_at"):
            if row.get(column) is None:
                row.pop(column, None)
        return row

    def to_cache(self, entity: E) -> dict[str, Any]:
        return entity.model_dump(mode="json")

    def to_cache_collection(self, entities: Iterable[E]) -> list[dict[str, Any]]:
        return [self.to_cache(entity) for entity in entities]

    def from_cache(self, data: dict[str, Any]) -> E:
        return self.entity_class.model_validate(data)

    def from_cache_collection(self, data: Iterable[dict[str, Any]]) -> list[E]:
        return [self.from_cache(item) for item in data]
