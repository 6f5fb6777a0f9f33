"""Difficulty level catalog entity."""

from __future__ import annotations

from typing import ClassVar

from pydantic import Field

from learnstore.domain.catalog import CatalogEntity
from learnstore.events.events import EventTypes


class DifficultyLevel(CatalogEntity):
    """A difficulty tier; ``sort_order`` ranks tiers from easiest to hardest."""

    entity_type: ClassVar[str] = EventTypes.DIFFICULTY_LEVEL

    sort_order: int = 0
    question_count: int = Field(default=1, ge=1)
    context_complexity: float = Field(default=0.5, ge=0.0, le=1.0)
