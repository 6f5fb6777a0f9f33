"""Format type catalog entity."""

from __future__ import annotations

from typing import ClassVar

from learnstore.domain.catalog import CatalogEntity
from learnstore.events.events import EventTypes


class FormatType(CatalogEntity):
    """How a challenge is presented, and the shape of response it expects."""

    entity_type: ClassVar[str] = EventTypes.FORMAT_TYPE

    response_format: str = "text"
