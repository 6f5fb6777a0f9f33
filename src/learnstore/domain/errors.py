# SPDX-FileCopyrightText: 2024-present Richard Dahl <richard@dahl.us>
# SPDX-License-Identifier: MIT
# SPDX-Package-Name: learnstore
"""
Domain-specific error classes for challenges and their configuration catalog.

Each kind that corresponds to a generic persistence kind also subclasses it,
so callers may branch on either ``ChallengeNotFoundError`` or
``EntityNotFoundError``. Attributes such as ``key`` or ``current_status``
are read back from the error context.
"""

from __future__ import annotations

from typing import Any, ClassVar, Final

from learnstore.errors.base import ErrorCategory, ErrorCode, ErrorSeverity, LearnstoreError
from learnstore.persistence.errors import (
    DatabaseError,
    DuplicateEntityError,
    EntityNotFoundError,
    InvalidStatusTransitionError,
    ValidationError,
)

CHALLENGE = ErrorCategory.get_or_create("CHALLENGE")
CHALLENGE_ERROR: Final = ErrorCode.get_or_create("CHALLENGE_ERROR", CHALLENGE)
CHALLENGE_VALIDATION_ERROR: Final = ErrorCode.get_or_create(
    "CHALLENGE_VALIDATION_ERROR", CHALLENGE
)
CHALLENGE_NOT_FOUND: Final = ErrorCode.get_or_create("CHALLENGE_NOT_FOUND", CHALLENGE)
CHALLENGE_PROCESSING_ERROR: Final = ErrorCode.get_or_create(
    "CHALLENGE_PROCESSING_ERROR", CHALLENGE
)
CHALLENGE_REPOSITORY_ERROR: Final = ErrorCode.get_or_create(
    "CHALLENGE_REPOSITORY_ERROR", CHALLENGE
)
CHALLENGE_DUPLICATE: Final = ErrorCode.get_or_create("CHALLENGE_DUPLICATE", CHALLENGE)
CHALLENGE_INVALID_STATUS_TRANSITION: Final = ErrorCode.get_or_create(
    "CHALLENGE_INVALID_STATUS_TRANSITION", CHALLENGE
)


class ChallengeError(LearnstoreError):
    """Base class for challenge domain errors."""

    error_code: ClassVar[ErrorCode] = CHALLENGE_ERROR
    error_severity: ClassVar[ErrorSeverity] = ErrorSeverity.ERROR
    context_attributes: ClassVar[tuple[str, ...]] = ()

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        **kwargs: Any,
    ) -> None:
        LearnstoreError.__init__(
            self,
            message,
            code=self.error_code,
            severity=self.error_severity,
            context=context,
            **kwargs,
        )
        for name in self.context_attributes:
            setattr(self, name, self.context.get(name))


class ChallengeValidationError(ChallengeError, ValidationError):
    error_code = CHALLENGE_VALIDATION_ERROR
    error_severity = ErrorSeverity.WARNING
    context_attributes = ("field",)


class ChallengeNotFoundError(ChallengeError, EntityNotFoundError):
    error_code = CHALLENGE_NOT_FOUND
    context_attributes = ("entity_type", "key")


class ChallengeProcessingError(ChallengeError):
    """Raised for failures that have no more specific kind."""

    error_code = CHALLENGE_PROCESSING_ERROR


class ChallengeRepositoryError(ChallengeError, DatabaseError):
    error_code = CHALLENGE_REPOSITORY_ERROR
    context_attributes = ("operation", "entity_type")


class ChallengeDuplicateError(ChallengeError, DuplicateEntityError):
    error_code = CHALLENGE_DUPLICATE
    context_attributes = ("entity_type", "key")


class InvalidChallengeStatusTransitionError(ChallengeError, InvalidStatusTransitionError):
    error_code = CHALLENGE_INVALID_STATUS_TRANSITION
    context_attributes = ("entity_id", "current_status", "proposed_status")
