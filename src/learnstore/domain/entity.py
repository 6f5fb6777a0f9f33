# SPDX-FileCopyrightText: 2024-present Richard Dahl <richard@dahl.us>
# SPDX-License-Identifier: MIT
# SPDX-Package-Name: learnstore
"""
Entity base class for learnstore domain objects.

Entities collect domain events from their business methods. The repository
takes them with ``pull_events()`` when the entity is saved and publishes
them once the write has committed.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, ClassVar
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr, field_validator

from learnstore.domain.status import StatusTransitionGuard
from learnstore.events.events import DomainEvent


class Entity(BaseModel):
    """Base class for all persisted domain entities."""

    entity_type: ClassVar[str] = "entity"
    status_guard: ClassVar[StatusTransitionGuard | None] = None

    id: str = Field(default_factory=lambda: str(uuid4()), frozen=True)
    created_at: datetime | None = None
    updated_at: datetime | None = None

    _pending_events: list[DomainEvent] = PrivateAttr(default_factory=list)

    model_config: ClassVar[ConfigDict] = ConfigDict(
        validate_assignment=True,
        use_enum_values=True,
        extra="ignore",
    )

    @field_validator("id", mode="before")
    @classmethod
    def validate_id(cls, v: Any) -> str:
        if v is None or not str(v).strip():
            raise ValueError("id must be a non-empty string")
        return str(v)

    def __eq__(self, other: object) -> bool:
        return isinstance(other, type(self)) and self.id == other.id

    def __hash__(self) -> int:
        return hash((type(self), self.id))

    @property
    def pending_events(self) -> list[DomainEvent]:
        """Return a copy of pending domain events."""
        return list(self._pending_events)

    def record_event(self, event_type: str, payload: dict[str, Any] | None = None) -> DomainEvent:
        event = DomainEvent.create(
            event_type,
            payload,
            metadata={"entity_type": self.entity_type, "entity_id": self.id},
        )
        self._pending_events.append(event)
        return event

    def pull_events(self) -> list[DomainEvent]:
        """Take every pending event, leaving the entity with none."""
        events, self._pending_events = self._pending_events, []
        return events

    def clear_events(self) -> None:
        self._pending_events = []

    @property
    def business_key(self) -> str | None:
        """Key used for upsert existence checks; ``None`` means use the id."""
        return None

    def identity(self) -> dict[str, Any]:
        """Identifying attributes carried by a synthesized creation event."""
        return {"id": self.id}

    def creation_event_type(self) -> str:
        return f"{self.entity_type}.created"

    @property
    def status_value(self) -> str | None:
        return None
