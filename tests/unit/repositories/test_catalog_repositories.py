"""Tests for the format type, difficulty level and challenge type repositories."""

import pytest

from learnstore.domain import ChallengeType, ChallengeValidationError, DifficultyLevel, FormatType
from learnstore.events.events import DomainEvent


@pytest.fixture
async def levels(repos):
    await repos.difficulty_levels.seed(
        [
            {"code": "hard", "name": "Hard", "sort_order": 3},
            {"code": "easy", "name": "Easy", "sort_order": 1},
            {"code": "medium", "name": "Medium", "sort_order": 2},
            {"code": "legacy", "name": "Legacy", "sort_order": 0, "is_active": False},
            {"code": "expert", "name": "Expert", "sort_order": 4, "is_active": False},
        ]
    )
    return repos.difficulty_levels


async def test_difficulty_levels_are_ordered(levels) -> None:
    assert [level.code for level in await levels.find_all()] == ["easy", "medium", "hard"]


async def test_sort_order_range(levels) -> None:
    found = await levels.find_by_sort_order_range(1, 2)

    assert [level.code for level in found] == ["easy", "medium"]
    assert await levels.find_by_sort_order_range(5, 9) == []


@pytest.mark.parametrize(("low", "high"), [(3, 1), ("1", 2), (1, None), (True, 2)])
async def test_sort_order_range_validation(levels, storage, low, high) -> None:
    selects = storage.calls["select"]

    with pytest.raises(ChallengeValidationError):
        await levels.find_by_sort_order_range(low, high)
    assert storage.calls["select"] == selects


async def test_easiest_and_hardest_ignore_inactive(levels) -> None:
    assert (await levels.find_easiest()).code == "easy"
    assert (await levels.find_hardest()).code == "hard"


async def test_extremes_follow_writes(levels) -> None:
    assert (await levels.find_hardest()).code == "hard"

    await levels.save(DifficultyLevel(code="master", name="Master", sort_order=9))
    assert (await levels.find_hardest()).code == "master"

    expert = await levels.find_by_code("expert")
    expert.activate()
    await levels.save(expert)
    assert (await levels.find_hardest()).code == "master"

    await levels.delete("master")
    assert (await levels.find_hardest()).code == "expert"


async def test_easiest_on_empty_table(repos) -> None:
    assert await repos.difficulty_levels.find_easiest() is None


async def test_find_by_response_format(repos, published: list[DomainEvent]) -> None:
    formats = repos.format_types
    await formats.save(FormatType(code="mc", name="Multiple choice", response_format="choice"))
    await formats.save(FormatType(code="essay", name="Essay"))
    await formats.save(FormatType(code="short", name="Short answer", response_format="text"))

    assert [f.code for f in await formats.find_by_response_format("text")] == ["essay", "short"]

    mc = await formats.find_by_code("mc")
    mc.update(response_format="text")
    await formats.save(mc)

    assert [f.code for f in await formats.find_by_response_format("text")] == [
        "essay",
        "mc",
        "short",
    ]
    assert [e.event_type for e in published] == [
        "format_type.created",
        "format_type.created",
        "format_type.created",
        "format_type.updated",
    ]


async def test_challenge_type_containment_finders(repos) -> None:
    types = repos.challenge_types
    await types.save(
        ChallengeType(code="quiz", name="Quiz", format_types=["mc"], focus_areas=["basics", "ethics"])
    )
    await types.save(ChallengeType(code="essay", name="Essay", format_types=["essay"], focus_areas=["ethics"]))
    await types.save(
        ChallengeType(code="retired", name="Retired", format_types=["mc"], focus_areas=["basics"], is_active=False)
    )

    assert [t.code for t in await types.find_by_format_type("mc")] == ["quiz"]
    assert [t.code for t in await types.find_by_focus_area("ethics")] == ["essay", "quiz"]
    assert await types.find_by_focus_area("unknown") == []


async def test_invalidate_all(repos, cache) -> None:
    await repos.format_types.save(FormatType(code="mc", name="MC"))
    await repos.format_types.find_all()
    await repos.format_types.find_by_code("mc")
    assert await cache.keys("formatType:*")

    await repos.invalidate_all()

    assert await cache.keys() == []
