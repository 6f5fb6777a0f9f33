"""Challenge type catalog entity."""

from __future__ import annotations

from typing import Any, ClassVar

from pydantic import Field, field_validator

from learnstore.domain.catalog import CatalogEntity
from learnstore.events.events import EventTypes


class ChallengeType(CatalogEntity):
    """A kind of challenge, with the format types and focus areas it supports."""

    entity_type: ClassVar[str] = EventTypes.CHALLENGE_TYPE

    format_types: list[str] = Field(default_factory=list)
    focus_areas: list[str] = Field(default_factory=list)

    @field_validator("format_types", "focus_areas", mode="before")
    @classmethod
    def default_lists(cls, v: Any) -> Any:
        return [] if v is None else v

    def supports(self, format_type: str | None = None, focus_area: str | None = None) -> bool:
        """Whether this type accepts the given format type and focus area."""
        if format_type is not None and format_type not in self.format_types:
            return False
        return focus_area is None or focus_area in self.focus_areas
