"""Difficulty level catalog repository."""

from __future__ import annotations

from typing import ClassVar

from learnstore.domain.difficulty_level import DifficultyLevel
from learnstore.persistence.errors import ValidationError
from learnstore.persistence.query import Order, gte, lte
from learnstore.repositories.base import CatalogRepository
from learnstore.repositories.errors import ErrorMapper, repository_operation
from learnstore.repositories.mapping import challenge_error_mapper


class DifficultyLevelRepository(CatalogRepository[DifficultyLevel]):
    entity_class: ClassVar[type[DifficultyLevel]] = DifficultyLevel
    table: ClassVar[str] = "difficulty_levels"
    cache_prefix: ClassVar[str] = "difficultyLevel"
    order_by: ClassVar[tuple[Order, ...]] = (Order("sort_order"), Order("code"))
    error_mapper: ClassVar[ErrorMapper] = challenge_error_mapper

    def predicate_names(self) -> tuple[str, ...]:
        return ("sortOrder", "extreme")

    @repository_operation("find_by_sort_order_range")
    async def find_by_sort_order_range(
        self, min_order: int, max_order: int
    ) -> list[DifficultyLevel]:
        """Active levels with ``min_order <= sort_order <= max_order``."""
        for name, value in (("min_order", min_order), ("max_order", max_order)):
            if not isinstance(value, int) or isinstance(value, bool):
                raise ValidationError(f"{name} must be an integer", field=name, value=value)
        if min_order > max_order:
            raise ValidationError(
                "min_order must not exceed max_order",
                field="min_order",
                min_order=min_order,
                max_order=max_order,
            )
        return await self._find_by_predicate(
            "find_by_sort_order_range",
            "sortOrder",
            f"{min_order}-{max_order}",
            [gte("sort_order", min_order), lte("sort_order", max_order)],
        )

    async def _extreme(self, which: str, descending: bool) -> DifficultyLevel | None:
        levels = await self._find_by_predicate(
            f"find_{which}",
            "extreme",
            which,
            [],
            order_by=(Order("sort_order", descending=descending), Order("code")),
            limit=1,
        )
        return levels[0] if levels else None

    @repository_operation("find_easiest")
    async def find_easiest(self) -> DifficultyLevel | None:
        """The active level with the lowest sort order."""
        return await self._extreme("easiest", descending=False)

    @repository_operation("find_hardest")
    async def find_hardest(self) -> DifficultyLevel | None:
        """The active level with the highest sort order."""
        return await self._extreme("hardest", descending=True)
