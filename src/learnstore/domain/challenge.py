# SPDX-FileCopyrightText: 2024-present Richard Dahl <richard@dahl.us>
# SPDX-License-Identifier: MIT
# SPDX-Package-Name: learnstore
"""
Challenge entity.
"""

from __future__ import annotations

from typing import Any, ClassVar

from pydantic import Field, field_validator, model_validator

from learnstore.domain.entity import Entity
from learnstore.domain.errors import (
    ChallengeValidationError,
    InvalidChallengeStatusTransitionError,
)
from learnstore.domain.status import ChallengeStatus, StatusTransitionGuard, challenge_status_guard
from learnstore.events.events import EventTypes

# Fields that ``update`` may not touch
_PROTECTED_FIELDS = frozenset({"id", "status", "created_at", "updated_at"})


class Challenge(Entity):
    """A learning challenge issued to a user."""

    entity_type: ClassVar[str] = "challenge"
    status_guard: ClassVar[StatusTransitionGuard | None] = challenge_status_guard

    title: str | None = None
    content: dict[str, Any] = Field(default_factory=dict)
    user_id: str | None = None
    user_email: str | None = None
    focus_area: str
    focus_area_id: str | None = None
    challenge_type: str = "standard"
    format_type: str = "open-ended"
    difficulty: str = "intermediate"
    status: ChallengeStatus = Field(default=ChallengeStatus.DRAFT, validate_default=True)
    responses: list[dict[str, Any]] = Field(default_factory=list)
    evaluation: dict[str, Any] | None = None
    evaluation_criteria: list[str] = Field(default_factory=list)
    score: float | None = None

    @field_validator("content", mode="before")
    @classmethod
    def validate_content(cls, v: Any) -> Any:
        if v is None:
            return {}
        if isinstance(v, str):
            return {"text": v}
        return v

    @field_validator("responses", "evaluation_criteria", mode="before")
    @classmethod
    def default_lists(cls, v: Any) -> Any:
        return [] if v is None else v

    @field_validator("focus_area")
    @classmethod
    def validate_focus_area(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("focus_area must not be empty")
        return v

    @model_validator(mode="after")
    def require_owner(self) -> Challenge:
        if not self.user_id and not self.user_email:
            raise ValueError("a challenge needs a user_id or a user_email")
        return self

    @property
    def status_value(self) -> str:
        status = self.status
        return status.value if isinstance(status, ChallengeStatus) else str(status)

    def identity(self) -> dict[str, Any]:
        return {
            "challengeId": self.id,
            "userId": self.user_id or self.user_email,
            "challengeType": self.challenge_type,
            "focusArea": self.focus_area,
        }

    def _change_status(self, new_status: ChallengeStatus, **extra: Any) -> None:
        previous = self.status_value
        if not challenge_status_guard.is_valid_transition(previous, new_status):
            raise InvalidChallengeStatusTransitionError(
                f"Invalid status transition from {previous!r} to {new_status.value!r}",
                entity_id=self.id,
                current_status=previous,
                proposed_status=new_status.value,
            )
        if previous == new_status.value:
            return
        self.status = new_status
        self.record_event(
            EventTypes.CHALLENGE_STATUS_CHANGED,
            {
                "challengeId": self.id,
                "previousStatus": previous,
                "newStatus": new_status.value,
                **extra,
            },
        )

    def activate(self) -> None:
        self._change_status(ChallengeStatus.ACTIVE)

    def submit_responses(self, responses: list[dict[str, Any]]) -> None:
        """Attach the user's responses to an active challenge."""
        if not responses:
            raise ChallengeValidationError("responses must not be empty", field="responses")
        if self.status_value != ChallengeStatus.ACTIVE.value:
            raise ChallengeValidationError(
                "responses can only be submitted to an active challenge",
                field="status",
                challenge_id=self.id,
                status=self.status_value,
            )
        self.responses = [*self.responses, *responses]
        self.record_event(
            EventTypes.CHALLENGE_RESPONSES_SUBMITTED,
            {
                "challengeId": self.id,
                "userId": self.user_id or self.user_email,
                "responseCount": len(responses),
            },
        )

    def complete(self, evaluation: dict[str, Any], score: float | None = None) -> None:
        self._change_status(ChallengeStatus.COMPLETED)
        self.evaluation = evaluation
        self.score = score if score is not None else evaluation.get("score")
        self.record_event(
            EventTypes.CHALLENGE_COMPLETED,
            {
                "challengeId": self.id,
                "userId": self.user_id or self.user_email,
                "score": self.score,
            },
        )

    def expire(self) -> None:
        self._change_status(ChallengeStatus.EXPIRED)

    def cancel(self, reason: str | None = None) -> None:
        if reason:
            self._change_status(ChallengeStatus.CANCELLED, reason=reason)
        else:
            self._change_status(ChallengeStatus.CANCELLED)

    def archive(self) -> None:
        self._change_status(ChallengeStatus.ARCHIVED)

    def mark_deleted(self) -> None:
        self._change_status(ChallengeStatus.DELETED)

    def update(self, **changes: Any) -> None:
        """Change descriptive fields; status changes go through the lifecycle methods."""
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
            EventTypes.CHALLENGE_UPDATED,
            {"challengeId": self.id, "fields": sorted(changes)},
        )
