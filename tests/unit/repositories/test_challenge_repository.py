"""Tests for the challenge repository."""

from datetime import UTC, datetime

import pytest

from learnstore.domain import (
    Challenge,
    ChallengeNotFoundError,
    ChallengeRepositoryError,
    ChallengeStatus,
    ChallengeValidationError,
    InvalidChallengeStatusTransitionError,
)
from learnstore.events.events import DomainEvent, EventTypes
from learnstore.persistence import (
    STORAGE_ERROR,
    DatabaseError,
    EntityNotFoundError,
    InvalidStatusTransitionError,
    StorageFailure,
    ValidationError,
)
from learnstore.repositories import ChallengeRepository


@pytest.fixture
def challenges(repos) -> ChallengeRepository:
    return repos.challenges


def make_challenge(day: int = 1, user_id: str = "u1", **kwargs) -> Challenge:
    kwargs.setdefault("focus_area", "prompting")
    return Challenge(
        title=f"Challenge {day}",
        user_id=user_id,
        created_at=datetime(2024, 1, day, tzinfo=UTC),
        **kwargs,
    )


async def completed_challenge(challenges: ChallengeRepository) -> Challenge:
    challenge = make_challenge()
    challenge.activate()
    challenge.submit_responses([{"answer": "42"}])
    challenge.complete({"score": 90})
    return await challenges.save(challenge)


async def test_insert_without_events_synthesizes_creation_event(
    challenges: ChallengeRepository, published: list[DomainEvent]
) -> None:
    challenge = make_challenge(challenge_type="quiz")

    saved = await challenges.save(challenge)

    assert [e.event_type for e in published] == [EventTypes.CHALLENGE_CREATED]
    assert published[0].payload == {
        "challengeId": saved.id,
        "userId": "u1",
        "challengeType": "quiz",
        "focusArea": "prompting",
    }


async def test_events_are_published_in_recorded_order(
    challenges: ChallengeRepository, published: list[DomainEvent]
) -> None:
    saved = await completed_challenge(challenges)

    assert [e.event_type for e in published] == [
        EventTypes.CHALLENGE_STATUS_CHANGED,
        EventTypes.CHALLENGE_RESPONSES_SUBMITTED,
        EventTypes.CHALLENGE_STATUS_CHANGED,
        EventTypes.CHALLENGE_COMPLETED,
    ]
    assert saved.status == "completed"
    assert saved.score == 90
    assert saved.responses == [{"answer": "42"}]


async def test_completed_to_active_is_rejected_without_update(
    challenges: ChallengeRepository, storage
) -> None:
    saved = await completed_challenge(challenges)
    loaded = await challenges.find_by_id(saved.id)
    loaded.update(title="Sneaky")
    loaded.status = ChallengeStatus.ACTIVE

    with pytest.raises(InvalidStatusTransitionError) as excinfo:
        await challenges.save(loaded)

    error = excinfo.value
    assert isinstance(error, InvalidChallengeStatusTransitionError)
    assert error.current_status == "completed"
    assert error.proposed_status == "active"
    assert error.entity_id == saved.id
    assert storage.calls["update"] == 0
    assert loaded.pending_events == []
    assert (await challenges.find_by_id(saved.id)).title == "Challenge 1"


async def test_valid_status_change_updates(
    challenges: ChallengeRepository, storage, published: list[DomainEvent]
) -> None:
    saved = await completed_challenge(challenges)
    published.clear()

    saved.archive()
    archived = await challenges.save(saved)

    assert archived.status == "archived"
    assert storage.calls["update"] == 1
    assert [e.payload["newStatus"] for e in published] == ["archived"]


async def test_find_by_user_id_filters_and_orders(challenges: ChallengeRepository) -> None:
    first = await challenges.save(make_challenge(day=1))
    second = make_challenge(day=2)
    second.activate()
    second = await challenges.save(second)
    await challenges.save(make_challenge(day=3, user_id="u2"))
    deleted = make_challenge(day=4)
    deleted.mark_deleted()
    await challenges.save(deleted)

    assert [c.id for c in await challenges.find_by_user_id("u1")] == [second.id, first.id]
    assert [c.id for c in await challenges.find_by_user_id("u1", status="active")] == [second.id]
    assert [c.id for c in await challenges.find_by_user_id("u1", limit=1)] == [second.id]
    assert [c.id for c in await challenges.find_by_user_id("u1", limit=1, offset=1)] == [first.id]


async def test_find_by_user_id_is_invalidated_by_saves(challenges: ChallengeRepository) -> None:
    await challenges.save(make_challenge(day=1))
    assert len(await challenges.find_by_user_id("u1")) == 1

    await challenges.save(make_challenge(day=2))

    assert len(await challenges.find_by_user_id("u1")) == 2


async def test_find_by_user_id_validation(challenges: ChallengeRepository, storage) -> None:
    with pytest.raises(ChallengeValidationError):
        await challenges.find_by_user_id("")
    with pytest.raises(ChallengeValidationError) as excinfo:
        await challenges.find_by_user_id("u1", status="pending")
    assert excinfo.value.field == "status"
    with pytest.raises(ValidationError):
        await challenges.find_by_user_id("u1", limit=0)
    assert storage.calls["select"] == 0


async def test_find_all_hides_deleted_but_find_by_status_does_not(
    challenges: ChallengeRepository,
) -> None:
    kept = await challenges.save(make_challenge(day=1))
    gone = make_challenge(day=2)
    gone.mark_deleted()
    gone = await challenges.save(gone)

    assert [c.id for c in await challenges.find_all()] == [kept.id]
    assert [c.id for c in await challenges.find_by_status("deleted")] == [gone.id]
    assert [c.id for c in await challenges.find_by_status(ChallengeStatus.DRAFT)] == [kept.id]
    assert (await challenges.find_by_id(gone.id)).status == "deleted"


async def test_find_by_focus_area(challenges: ChallengeRepository) -> None:
    match = await challenges.save(make_challenge(day=1, focus_area="ethics"))
    await challenges.save(make_challenge(day=2, focus_area="prompting"))

    assert [c.id for c in await challenges.find_by_focus_area("ethics")] == [match.id]


async def test_soft_delete_through_save_invalidates_all(challenges: ChallengeRepository) -> None:
    saved = await challenges.save(make_challenge(day=1))
    assert len(await challenges.find_all()) == 1

    saved.mark_deleted()
    await challenges.save(saved)

    assert await challenges.find_all() == []


async def test_delete_publishes_deleted_event(
    challenges: ChallengeRepository, published: list[DomainEvent]
) -> None:
    saved = await challenges.save(make_challenge(day=1))
    assert await challenges.find_by_id(saved.id) is not None
    published.clear()

    assert await challenges.delete(saved.id) is True

    assert await challenges.find_by_id(saved.id) is None
    assert [e.event_type for e in published] == [EventTypes.CHALLENGE_DELETED]
    assert published[0].payload["challengeId"] == saved.id
    assert await challenges.delete(saved.id) is False


async def test_challenge_owned_by_email_only(challenges: ChallengeRepository) -> None:
    saved = await challenges.save(
        Challenge(user_email="learner@example.com", focus_area="prompting", content="Explain")
    )

    found = await challenges.find_by_id(saved.id)
    assert found.user_id is None
    assert found.user_email == "learner@example.com"
    assert found.content == {"text": "Explain"}


def make_owned(day: int, email: str = "learner@example.com", **kwargs) -> Challenge:
    kwargs.setdefault("focus_area", "prompting")
    return Challenge(
        title=f"Challenge {day}",
        user_email=email,
        created_at=datetime(2024, 1, day, tzinfo=UTC),
        **kwargs,
    )


async def test_find_by_id_can_treat_absence_as_an_error(challenges: ChallengeRepository) -> None:
    assert await challenges.find_by_id("missing") is None

    with pytest.raises(ChallengeNotFoundError) as excinfo:
        await challenges.find_by_id("missing", raise_if_not_found=True)

    assert isinstance(excinfo.value, EntityNotFoundError)
    assert excinfo.value.key == "missing"
    saved = await challenges.save(make_challenge())
    assert (await challenges.find_by_id(saved.id, raise_if_not_found=True)).id == saved.id


async def test_find_by_user_id_returns_one_page_by_default(challenges: ChallengeRepository) -> None:
    for day in range(1, 13):
        await challenges.save(make_challenge(day=day))

    page = await challenges.find_by_user_id("u1")

    assert len(page) == 10
    assert page[0].title == "Challenge 12"
    assert len(await challenges.find_by_user_id("u1", limit=None)) == 12


async def test_find_by_user_email_filters_sorts_and_pages(
    challenges: ChallengeRepository,
) -> None:
    first = await challenges.save(make_owned(1))
    second = make_owned(2)
    second.activate()
    second = await challenges.save(second)
    await challenges.save(make_owned(3, email="other@example.com"))
    gone = make_owned(4)
    gone.mark_deleted()
    await challenges.save(gone)

    email = "learner@example.com"
    assert [c.id for c in await challenges.find_by_user_email(email)] == [second.id, first.id]
    assert [c.id for c in await challenges.find_by_user_email(email, sort_dir="asc")] == [
        first.id,
        second.id,
    ]
    assert [c.id for c in await challenges.find_by_user_email(email, status="active")] == [
        second.id
    ]
    assert [c.id for c in await challenges.find_by_user_email(email, limit=1, offset=1)] == [
        first.id
    ]


async def test_find_by_user_email_is_invalidated_by_saves(challenges: ChallengeRepository) -> None:
    await challenges.save(make_owned(1))
    assert len(await challenges.find_by_user_email("learner@example.com")) == 1

    await challenges.save(make_owned(2))

    assert len(await challenges.find_by_user_email("learner@example.com")) == 2


async def test_find_recent_by_user_email_returns_newest_five(
    challenges: ChallengeRepository,
) -> None:
    for day in range(1, 8):
        await challenges.save(make_owned(day))

    recent = await challenges.find_recent_by_user_email("learner@example.com")

    assert [c.title for c in recent] == [f"Challenge {day}" for day in (7, 6, 5, 4, 3)]
    assert len(await challenges.find_recent_by_user_email("learner@example.com", limit=2)) == 2


async def test_paging_arguments_are_validated_before_io(
    challenges: ChallengeRepository, storage
) -> None:
    with pytest.raises(ChallengeValidationError) as excinfo:
        await challenges.find_by_user_email("learner@example.com", sort_by="password")
    assert excinfo.value.field == "sort_by"
    with pytest.raises(ChallengeValidationError) as excinfo:
        await challenges.search(sort_dir="sideways")
    assert excinfo.value.field == "sort_dir"
    with pytest.raises(ChallengeValidationError):
        await challenges.find_by_user_email("")
    with pytest.raises(ChallengeValidationError):
        await challenges.search(focus_area="  ")
    assert storage.calls["select"] == 0


async def test_search_combines_criteria(challenges: ChallengeRepository) -> None:
    easy = await challenges.save(
        make_challenge(day=1, difficulty="beginner", challenge_type="quiz")
    )
    hard = await challenges.save(
        make_challenge(day=2, difficulty="advanced", challenge_type="quiz")
    )
    other = await challenges.save(
        make_challenge(day=3, user_id="u2", difficulty="beginner", focus_area="ethics")
    )
    gone = make_challenge(day=4, difficulty="beginner")
    gone.mark_deleted()
    gone = await challenges.save(gone)

    assert [c.id for c in await challenges.search()] == [other.id, hard.id, easy.id]
    assert [c.id for c in await challenges.search(challenge_type="quiz")] == [hard.id, easy.id]
    assert [c.id for c in await challenges.search(difficulty="beginner")] == [other.id, easy.id]
    assert [
        c.id for c in await challenges.search(user_id="u1", difficulty="beginner")
    ] == [easy.id]
    assert [c.id for c in await challenges.search(focus_area="ethics")] == [other.id]
    assert [c.id for c in await challenges.search(status="deleted")] == [gone.id]
    assert [c.id for c in await challenges.search(limit=1, offset=1)] == [hard.id]


async def test_search_results_are_invalidated_by_saves(challenges: ChallengeRepository) -> None:
    await challenges.save(make_challenge(day=1, difficulty="beginner"))
    assert len(await challenges.search(difficulty="beginner")) == 1

    await challenges.save(make_challenge(day=2, difficulty="beginner"))

    assert len(await challenges.search(difficulty="beginner")) == 2


async def test_update_applies_changes_and_publishes(
    challenges: ChallengeRepository, published: list[DomainEvent]
) -> None:
    saved = await challenges.save(make_challenge())
    assert (await challenges.find_by_id(saved.id)).title == "Challenge 1"
    published.clear()

    updated = await challenges.update(saved.id, title="Renamed", difficulty="advanced")

    assert updated.title == "Renamed"
    assert (await challenges.find_by_id(saved.id)).difficulty == "advanced"
    assert [e.event_type for e in published] == [EventTypes.CHALLENGE_UPDATED]
    assert published[0].payload["fields"] == ["difficulty", "title"]


async def test_update_rejects_missing_and_protected(
    challenges: ChallengeRepository, storage
) -> None:
    with pytest.raises(ChallengeNotFoundError):
        await challenges.update("missing", title="Nope")

    saved = await challenges.save(make_challenge())
    with pytest.raises(ChallengeValidationError) as excinfo:
        await challenges.update(saved.id, status="completed")
    assert excinfo.value.field == "status"
    with pytest.raises(ChallengeValidationError):
        await challenges.update(saved.id)
    assert storage.calls["update"] == 0


async def test_storage_failure_on_delete_raises_instead_of_returning_false(
    challenges: ChallengeRepository, storage, cache, published: list[DomainEvent]
) -> None:
    saved = await challenges.save(make_challenge())
    assert len(await challenges.find_all()) == 1
    published.clear()
    storage.fail_next("delete", StorageFailure(STORAGE_ERROR, "connection reset"))

    with pytest.raises(DatabaseError) as excinfo:
        await challenges.delete(saved.id)

    assert isinstance(excinfo.value, ChallengeRepositoryError)
    assert excinfo.value.context["storage_code"] == STORAGE_ERROR
    assert published == []
    assert await cache.get("challenge:all") is not None
    assert (await challenges.find_by_id(saved.id)).id == saved.id
