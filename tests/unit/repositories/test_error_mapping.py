"""Tests for error mapping, error collection and the entity mapper."""

from datetime import UTC, datetime

import pytest

from learnstore.domain import (
    Challenge,
    ChallengeDuplicateError,
    ChallengeError,
    ChallengeNotFoundError,
    ChallengeProcessingError,
    ChallengeRepositoryError,
    ChallengeValidationError,
    FocusArea,
    InvalidChallengeStatusTransitionError,
)
from learnstore.errors.base import ErrorSeverity
from learnstore.persistence import (
    DatabaseError,
    DuplicateEntityError,
    EntityNotFoundError,
    InvalidStatusTransitionError,
    ValidationError,
)
from learnstore.repositories import (
    EntityMapper,
    ErrorCollector,
    challenge_error_mapper,
    repository_operation,
)


@pytest.mark.parametrize(
    ("error", "expected"),
    [
        (EntityNotFoundError(entity_type="challenge", key="c1"), ChallengeNotFoundError),
        (ValidationError("bad id", field="id"), ChallengeValidationError),
        (DuplicateEntityError(entity_type="focus_area", key="fa1"), ChallengeDuplicateError),
        (InvalidStatusTransitionError("completed", "active"), InvalidChallengeStatusTransitionError),
        (DatabaseError("down", operation="select"), ChallengeRepositoryError),
        (RuntimeError("unexpected"), ChallengeProcessingError),
    ],
)
def test_mapping_table(error: Exception, expected: type) -> None:
    mapped = challenge_error_mapper.map(error, operation="find_by_id", entity_type="challenge")

    assert type(mapped) is expected
    assert mapped.__cause__ is error
    assert mapped.context["operation"] in ("find_by_id", "select")


def test_mapping_keeps_message_and_metadata() -> None:
    mapped = challenge_error_mapper.map(
        DuplicateEntityError(entity_type="focus_area", key="fa1"), operation="save"
    )

    assert mapped.message == "focus_area already exists: fa1"
    assert mapped.key == "fa1"
    assert mapped.entity_type == "focus_area"
    assert isinstance(mapped, DuplicateEntityError)


def test_unmapped_error_records_original_type() -> None:
    mapped = challenge_error_mapper.map(KeyError("x"))

    assert mapped.context["original_error"] == "KeyError"
    assert mapped.message == "'x'"


def test_domain_errors_pass_through() -> None:
    error = ChallengeValidationError("already domain", field="title")

    mapped = challenge_error_mapper.map(error, operation="save")

    assert mapped is error
    assert error.context["operation"] == "save"


class Sample:
    error_mapper = challenge_error_mapper
    entity_type = "sample"

    def __init__(self, logger) -> None:
        self._logger = logger

    @repository_operation("explode")
    async def explode(self, key: str, payload: list) -> None:
        raise DatabaseError("backend down", operation="select", entity_type="sample")

    @repository_operation()
    async def reject(self, key: str) -> None:
        raise ValidationError("key is required", field="key")

    @repository_operation()
    async def fine(self) -> str:
        return "ok"


async def test_repository_operation_maps_and_logs(fake_logger) -> None:
    sample = Sample(fake_logger)

    with pytest.raises(ChallengeRepositoryError) as excinfo:
        await sample.explode("c1", payload=[1, 2, 3])

    assert isinstance(excinfo.value.__cause__, DatabaseError)
    [context] = fake_logger.contexts("error")
    assert context["operation"] == "explode"
    assert context["entity_type"] == "sample"
    assert context["args"] == ["'c1'"]
    assert context["kwargs"] == {"payload": "list[3]"}


async def test_repository_operation_logs_validation_as_warning(fake_logger) -> None:
    sample = Sample(fake_logger)

    with pytest.raises(ChallengeValidationError) as excinfo:
        await sample.reject("")

    assert excinfo.value.severity is ErrorSeverity.WARNING
    assert fake_logger.messages("warning") == ["sample.reject failed"]
    assert fake_logger.messages("error") == []
    assert await sample.fine() == "ok"
    assert Sample.fine.__name__ == "fine"


def test_error_collector() -> None:
    collector = ErrorCollector()
    assert not collector

    collector.collect(ValidationError("a"), index=0)
    collector.collect(ValidationError("b"), index=1)
    collector.collect(ChallengeProcessingError("c"), index=2)

    assert len(collector) == 3
    assert collector.summary() == {"ValidationError": 2, "ChallengeProcessingError": 1}
    assert isinstance(collector.errors[2].error, ChallengeError)


def test_mapper_drops_null_columns_and_timestamps() -> None:
    mapper = EntityMapper(FocusArea)
    area = mapper.to_domain(
        {"id": "f1", "code": "fa1", "name": "Focus", "prerequisites": None, "description": None}
    )

    assert area.prerequisites == []
    row = mapper.to_persistence(area)
    assert "created_at" not in row and "updated_at" not in row
    assert row["code"] == "fa1"


def test_mapper_cache_payload_is_json_ready() -> None:
    mapper = EntityMapper(Challenge)
    challenge = Challenge(
        user_id="u1", focus_area="ethics", created_at=datetime(2024, 5, 1, tzinfo=UTC)
    )

    payload = mapper.to_cache(challenge)

    assert payload["created_at"] == "2024-05-01T00:00:00Z"
    assert payload["status"] == "draft"
    restored = mapper.from_cache(payload)
    assert restored == challenge
    assert restored.created_at == challenge.created_at
    assert mapper.from_cache_collection(mapper.to_cache_collection([challenge])) == [challenge]
