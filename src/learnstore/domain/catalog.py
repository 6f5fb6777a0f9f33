# SPDX-FileCopyrightText: 2024-present Richard Dahl <richard@dahl.us>
# SPDX-License-Identifier: MIT
# SPDX-Package-Name: learnstore
"""
Base class for configuration catalog entities.

Catalog entities (focus areas, format types, difficulty levels, challenge
types) are identified by a unique ``code`` and switched on and off with
``is_active`` rather than a status lifecycle.
"""

from __future__ import annotations

from typing import Any, ClassVar

from pydantic import Field, field_validator

from learnstore.domain.entity import Entity
from learnstore.domain.errors import ChallengeValidationError
from learnstore.events.events import EventTypes

_PROTECTED_FIELDS = frozenset({"id", "code", "created_at", "updated_at", "is_active"})


class CatalogEntity(Entity):
    """A configuration entity keyed by a unique code."""

    entity_type: ClassVar[str] = "catalog"

    code: str
    name: str
    description: str | None = None
    is_active: bool = True
    metadata: dict[str, Any] = Field(default_factory=dict)

    @field_validator("code", "name")
    @classmethod
    def validate_required_text(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must be a non-empty string")
        return v

    @field_validator("metadata", mode="before")
    @classmethod
    def default_metadata(cls, v: Any) -> Any:
        return {} if v is None else v

    @property
    def business_key(self) -> str:
        return self.code

    def identity(self) -> dict[str, Any]:
        return {"id": self.id, "code": self.code, "name": self.name}

    def deactivate(self) -> None:
        if not self.is_active:
            return
        self.is_active = False
        self.record_event(EventTypes.deactivated(self.entity_type), self.identity())

    def activate(self) -> None:
        if self.is_active:
            return
        self.is_active = True
        self.record_event(EventTypes.activated(self.entity_type), self.identity())

    def rename(self, name: str) -> None:
        previous = self.name
        self.name = name
        if previous != self.name:
            self.record_event(
                EventTypes.updated(self.entity_type),
                {**self.identity(), "fields": ["name"], "previousName": previous},
            )

    def update(self, **changes: Any) -> None:
        """Change descriptive fields; ``code`` and activation have their own paths."""
        protected = _PROTECTED_FIELDS.intersection(changes)
        if protected:
            raise ChallengeValidationError(
                f"cannot update protected fields: {', '.join(sorted(protected))}",
                field=sorted(protected)[0],
            )
        unknown = set(changes) - set(type(self).model_fields)
        if unknown:
            raise ChallengeValidationError(
                f"unknown fields: {', '.join(sorted(unknown))}", field=sorted(unknown)[0]
            )
        for name, value in changes.items():
            setattr(self, name, value)
        self.record_event(
            EventTypes.updated(self.entity_type),
            {**self.identity(), "fields": sorted(changes)},
        )
