# SPDX-FileCopyrightText: 2024-present Richard Dahl <richard@dahl.us>
# SPDX-License-Identifier: MIT
# SPDX-Package-Name: learnstore
"""
Status values and the table-driven transition guard for status-bearing entities.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from enum import Enum
from typing import Final

from learnstore.persistence.errors import InvalidStatusTransitionError


class ChallengeStatus(str, Enum):
    """Lifecycle states of a challenge."""

    DRAFT = "draft"
    ACTIVE = "active"
    COMPLETED = "completed"
    EXPIRED = "expired"
    CANCELLED = "cancelled"
    ARCHIVED = "archived"
    DELETED = "deleted"


CHALLENGE_TRANSITIONS: Final[Mapping[str, frozenset[str]]] = {
    ChallengeStatus.DRAFT.value: frozenset({"active", "deleted"}),
    ChallengeStatus.ACTIVE.value: frozenset({"completed", "expired", "cancelled", "deleted"}),
    ChallengeStatus.COMPLETED.value: frozenset({"archived", "deleted"}),
    ChallengeStatus.EXPIRED.value: frozenset({"archived", "deleted"}),
    ChallengeStatus.CANCELLED.value: frozenset({"archived", "deleted"}),
    ChallengeStatus.ARCHIVED.value: frozenset({"deleted"}),
    ChallengeStatus.DELETED.value: frozenset(),
}


def _value(status: str | Enum) -> str:
    return status.value if isinstance(status, Enum) else str(status)


class StatusTransitionGuard:
    """Decides whether a status change is legal.

    A same-to-same change is always allowed; anything else must appear in the
    adjacency table. Unknown statuses have no outgoing transitions.
    """

    def __init__(self, transitions: Mapping[str, Iterable[str]]) -> None:
        self._transitions = {
            _value(current): frozenset(_value(s) for s in allowed)
            for current, allowed in transitions.items()
        }

    def allowed_from(self, current: str | Enum) -> frozenset[str]:
        return self._transitions.get(_value(current), frozenset())

    def is_valid_transition(self, current: str | Enum, proposed: str | Enum) -> bool:
        if _value(current) == _value(proposed):
            return True
        return _value(proposed) in self.allowed_from(current)

    def ensure(
        self, current: str | Enum, proposed: str | Enum, entity_id: str | None = None
    ) -> None:
        """Raise ``InvalidStatusTransitionError`` unless the change is legal."""
        if not self.is_valid_transition(current, proposed):
            raise InvalidStatusTransitionError(
                _value(current), _value(proposed), entity_id=entity_id
            )


challenge_status_guard: Final = StatusTransitionGuard(CHALLENGE_TRANSITIONS)
