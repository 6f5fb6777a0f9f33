"""Tests for the challenge status transition guard."""

import pytest

from learnstore.domain import (
    CHALLENGE_TRANSITIONS,
    ChallengeStatus,
    StatusTransitionGuard,
    challenge_status_guard,
)
from learnstore.persistence.errors import InvalidStatusTransitionError

ALLOWED = [
    ("draft", "active"),
    ("draft", "deleted"),
    ("active", "completed"),
    ("active", "expired"),
    ("active", "cancelled"),
    ("active", "deleted"),
    ("completed", "archived"),
    ("expired", "archived"),
    ("cancelled", "archived"),
    ("archived", "deleted"),
]


@pytest.mark.parametrize(("current", "proposed"), ALLOWED)
def test_allowed_transitions(current: str, proposed: str) -> None:
    assert challenge_status_guard.is_valid_transition(current, proposed)


@pytest.mark.parametrize(
    ("current", "proposed"),
    [
        ("completed", "active"),
        ("draft", "completed"),
        ("archived", "active"),
        ("deleted", "draft"),
        ("deleted", "active"),
        ("expired", "active"),
    ],
)
def test_rejected_transitions(current: str, proposed: str) -> None:
    assert not challenge_status_guard.is_valid_transition(current, proposed)


@pytest.mark.parametrize("status", list(ChallengeStatus))
def test_same_status_is_always_valid(status: ChallengeStatus) -> None:
    assert challenge_status_guard.is_valid_transition(status, status.value)


def test_table_covers_every_status() -> None:
    assert set(CHALLENGE_TRANSITIONS) == {s.value for s in ChallengeStatus}
    assert challenge_status_guard.allowed_from("deleted") == frozenset()


def test_unknown_status_has_no_transitions() -> None:
    assert not challenge_status_guard.is_valid_transition("pending", "active")


def test_ensure_raises_with_both_statuses() -> None:
    guard = StatusTransitionGuard({"open": ["closed"]})

    guard.ensure("open", "closed")
    with pytest.raises(InvalidStatusTransitionError) as excinfo:
        guard.ensure("closed", "open", entity_id="t1")

    assert excinfo.value.current_status == "closed"
    assert excinfo.value.proposed_status == "open"
    assert excinfo.value.entity_id == "t1"
