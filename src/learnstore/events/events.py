# SPDX-FileCopyrightText: 2024-present Richard Dahl <richard@dahl.us>
# SPDX-License-Identifier: MIT
# SPDX-Package-Name: learnstore
"""
events.events
Domain event model and the event type names raised by learnstore entities
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any, ClassVar, Final, Self
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, field_validator


class DomainEvent(BaseModel):
    """An immutable notification that something happened to an entity.

    Events are collected on the entity by its business methods and published
    by the repository only after the corresponding write has committed.
    """

    event_id: str = Field(default_factory=lambda: str(uuid4()))
    event_type: str
    payload: dict[str, Any] = Field(default_factory=dict)
    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))
    metadata: dict[str, Any] = Field(default_factory=dict)

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True)

    @field_validator("event_type")
    @classmethod
    def validate_event_type(cls, v: str) -> str:
        """Event types are non-empty dotted names."""
        if not v or not v.strip():
            raise ValueError("event_type must be a non-empty string")
        return v

    @classmethod
    def create(cls, event_type: str, payload: dict[str, Any] | None = None, **kwargs: Any) -> Self:
        """Create a new domain event."""
        return cls(event_type=event_type, payload=dict(payload or {}), **kwargs)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Self:
        """Create a domain event from a dictionary."""
        return cls.model_validate(data)

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json")


class EventTypes:
    """Event type names used across learnstore."""

    CHALLENGE_CREATED: Final = "challenge.created"
    CHALLENGE_UPDATED: Final = "challenge.updated"
    CHALLENGE_STATUS_CHANGED: Final = "challenge.status_changed"
    CHALLENGE_RESPONSES_SUBMITTED: Final = "challenge.responses_submitted"
    CHALLENGE_COMPLETED: Final = "challenge.completed"
    CHALLENGE_DELETED: Final = "challenge.deleted"

    FOCUS_AREA: Final = "focus_area"
    FORMAT_TYPE: Final = "format_type"
    DIFFICULTY_LEVEL: Final = "difficulty_level"
    CHALLENGE_TYPE: Final = "challenge_type"

    @staticmethod
    def created(entity_type: str) -> str:
        return f"{entity_type}.created"

    @staticmethod
    def updated(entity_type: str) -> str:
        return f"{entity_type}.updated"

    @staticmethod
    def deactivated(entity_type: str) -> str:
        return f"{entity_type}.deactivated"

    @staticmethod
    def activated(entity_type: str) -> str:
        return f"{entity_type}.activated"
