"""Error mappers shared by the challenge and catalog repositories."""

from __future__ import annotations

from typing import Final

from learnstore.domain.errors import (
    ChallengeDuplicateError,
    ChallengeError,
    ChallengeNotFoundError,
    ChallengeProcessingError,
    ChallengeRepositoryError,
    ChallengeValidationError,
    InvalidChallengeStatusTransitionError,
)
from learnstore.persistence.errors import (
    DatabaseError,
    DuplicateEntityError,
    EntityNotFoundError,
    InvalidStatusTransitionError,
    ValidationError,
)
from learnstore.repositories.errors import ErrorMapper

challenge_error_mapper: Final = ErrorMapper(
    {
        EntityNotFoundError: ChallengeNotFoundError,
        ValidationError: ChallengeValidationError,
        DuplicateEntityError: ChallengeDuplicateError,
        InvalidStatusTransitionError: InvalidChallengeStatusTransitionError,
        DatabaseError: ChallengeRepositoryError,
    },
    default=ChallengeProcessingError,
    domain_base=ChallengeError,
)
