"""Challenge type catalog repository."""

from __future__ import annotations

from typing import ClassVar

from learnstore.domain.challenge_type import ChallengeType
from learnstore.persistence.query import Order, contains
from learnstore.repositories.base import CatalogRepository
from learnstore.repositories.errors import ErrorMapper, repository_operation
from learnstore.repositories.mapping import challenge_error_mapper


class ChallengeTypeRepository(CatalogRepository[ChallengeType]):
    entity_class: ClassVar[type[ChallengeType]] = ChallengeType
    table: ClassVar[str] = "challenge_types"
    cache_prefix: ClassVar[str] = "challengeType"
    order_by: ClassVar[tuple[Order, ...]] = (Order("code"),)
    error_mapper: ClassVar[ErrorMapper] = challenge_error_mapper

    def predicate_names(self) -> tuple[str, ...]:
        return ("formatType", "focusArea")

    @repository_operation("find_by_format_type")
    async def find_by_format_type(self, format_type: str) -> list[ChallengeType]:
        """Active challenge types supporting ``format_type``."""
        return await self._find_by_predicate(
            "find_by_format_type",
            "formatType",
            format_type,
            [contains("format_types", [format_type])],
        )

    @repository_operation("find_by_focus_area")
    async def find_by_focus_area(self, focus_area: str) -> list[ChallengeType]:
        """Active challenge types available for ``focus_area``."""
        return await self._find_by_predicate(
            "find_by_focus_area",
            "focusArea",
            focus_area,
            [contains("focus_areas", [focus_area])],
        )
