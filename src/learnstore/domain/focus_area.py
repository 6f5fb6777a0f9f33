"""Focus area catalog entity."""

from __future__ import annotations

from typing import Any, ClassVar

from pydantic import Field, field_validator

from learnstore.domain.catalog import CatalogEntity
from learnstore.events.events import EventTypes


class FocusArea(CatalogEntity):
    """A subject area a challenge can target.

    ``prerequisites`` and ``related_areas`` hold codes of other focus areas.
    """

    entity_type: ClassVar[str] = EventTypes.FOCUS_AREA

    display_order: int = 0
    prerequisites: list[str] = Field(default_factory=list)
    related_areas: list[str] = Field(default_factory=list)

    @field_validator("prerequisites", "related_areas", mode="before")
    @classmethod
    def default_lists(cls, v: Any) -> Any:
        return [] if v is None else v

    @field_validator("display_order")
    @classmethod
    def validate_display_order(cls, v: int) -> int:
        if v < 0:
            raise ValueError("display_order must not be negative")
        return v
