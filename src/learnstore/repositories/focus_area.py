"""Focus area catalog repository."""

from __future__ import annotations

from typing import ClassVar

from learnstore.domain.focus_area import FocusArea
from learnstore.persistence.query import Order, contains
from learnstore.repositories.base import CatalogRepository
from learnstore.repositories.errors import ErrorMapper, repository_operation
from learnstore.repositories.mapping import challenge_error_mapper


class FocusAreaRepository(CatalogRepository[FocusArea]):
    entity_class: ClassVar[type[FocusArea]] = FocusArea
    table: ClassVar[str] = "challenge_focus_areas"
    cache_prefix: ClassVar[str] = "focusArea"
    order_by: ClassVar[tuple[Order, ...]] = (Order("display_order"), Order("code"))
    error_mapper: ClassVar[ErrorMapper] = challenge_error_mapper

    def predicate_names(self) -> tuple[str, ...]:
        return ("prerequisite", "related")

    @repository_operation("find_by_prerequisite")
    async def find_by_prerequisite(self, code: str) -> list[FocusArea]:
        """Active focus areas that list ``code`` as a prerequisite."""
        return await self._find_by_predicate(
            "find_by_prerequisite", "prerequisite", code, [contains("prerequisites", [code])]
        )

    @repository_operation("find_by_related_area")
    async def find_by_related_area(self, code: str) -> list[FocusArea]:
        """Active focus areas that list ``code`` as related."""
        return await self._find_by_predicate(
            "find_by_related_area", "related", code, [contains("related_areas", [code])]
        )
