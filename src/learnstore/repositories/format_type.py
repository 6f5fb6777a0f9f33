"""Format type catalog repository."""

from __future__ import annotations

from typing import ClassVar

from learnstore.domain.format_type import FormatType
from learnstore.persistence.query import Order, eq
from learnstore.repositories.base import CatalogRepository
from learnstore.repositories.errors import ErrorMapper, repository_operation
from learnstore.repositories.mapping import challenge_error_mapper


class FormatTypeRepository(CatalogRepository[FormatType]):
    entity_class: ClassVar[type[FormatType]] = FormatType
    table: ClassVar[str] = "format_types"
    cache_prefix: ClassVar[str] = "formatType"
    order_by: ClassVar[tuple[Order, ...]] = (Order("code"),)
    error_mapper: ClassVar[ErrorMapper] = challenge_error_mapper

    def predicate_names(self) -> tuple[str, ...]:
        return ("responseFormat",)

    @repository_operation("find_by_response_format")
    async def find_by_response_format(self, response_format: str) -> list[FormatType]:
        return await self._find_by_predicate(
            "find_by_response_format",
            "responseFormat",
            response_format,
            [eq("response_format", response_format)],
        )
