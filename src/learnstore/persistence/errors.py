# SPDX-FileCopyrightText: 2024-present Richard Dahl <richard@dahl.us>
# SPDX-License-Identifier: MIT
# SPDX-Package-Name: learnstore
"""
Persistence error classes for learnstore.

These are the generic error kinds raised below the repository boundary.
Repositories rewrite them into domain-specific kinds through an
``ErrorMapper`` before they reach callers.
"""

from __future__ import annotations

from typing import Any, Final

from learnstore.errors.base import ErrorCategory, ErrorCode, ErrorSeverity, LearnstoreError

PERSISTENCE = ErrorCategory.get_or_create("PERSISTENCE")
PERSISTENCE_ERROR: Final = ErrorCode.get_or_create("PERSISTENCE_ERROR", PERSISTENCE)
VALIDATION_ERROR: Final = ErrorCode.get_or_create("VALIDATION_ERROR", PERSISTENCE)
ENTITY_NOT_FOUND: Final = ErrorCode.get_or_create("ENTITY_NOT_FOUND", PERSISTENCE)
DATABASE_ERROR: Final = ErrorCode.get_or_create("DATABASE_ERROR", PERSISTENCE)
DUPLICATE_ENTITY: Final = ErrorCode.get_or_create("DUPLICATE_ENTITY", PERSISTENCE)
INVALID_STATUS_TRANSITION: Final = ErrorCode.get_or_create(
    "INVALID_STATUS_TRANSITION", PERSISTENCE
)


class PersistenceError(LearnstoreError):
    """Base class for all persistence errors."""

    def __init__(
        self,
        message: str,
        code: ErrorCode = PERSISTENCE_ERROR,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: dict[str, Any] | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(message, code=code, severity=severity, context=context, **kwargs)


class ValidationError(PersistenceError):
    """Raised when a caller supplies a missing or malformed key or object."""

    def __init__(
        self,
        message: str = "Validation failed",
        field: str | None = None,
        context: dict[str, Any] | None = None,
        **kwargs: Any,
    ) -> None:
        self.field = field
        if field is not None:
            kwargs["field"] = field
        super().__init__(
            message,
            code=VALIDATION_ERROR,
            severity=ErrorSeverity.WARNING,
            context=context,
            **kwargs,
        )


class EntityNotFoundError(PersistenceError):
    """Raised where the absence of a record is itself exceptional."""

    def __init__(
        self,
        message: str | None = None,
        entity_type: str | None = None,
        key: Any = None,
        context: dict[str, Any] | None = None,
        **kwargs: Any,
    ) -> None:
        self.entity_type = entity_type
        self.key = key
        super().__init__(
            message or f"{entity_type or 'Entity'} not found: {key}",
            code=ENTITY_NOT_FOUND,
            context=context,
            entity_type=entity_type,
            key=key,
            **kwargs,
        )


class DatabaseError(PersistenceError):
    """Raised when the storage or cache backend fails an operation."""

    def __init__(
        self,
        message: str,
        operation: str | None = None,
        entity_type: str | None = None,
        context: dict[str, Any] | None = None,
        **kwargs: Any,
    ) -> None:
        self.operation = operation
        self.entity_type = entity_type
        if operation is not None:
            kwargs["operation"] = operation
        if entity_type is not None:
            kwargs["entity_type"] = entity_type
        super().__init__(message, code=DATABASE_ERROR, context=context, **kwargs)


class DuplicateEntityError(PersistenceError):
    """Raised when an insert violates a uniqueness constraint."""

    def __init__(
        self,
        message: str | None = None,
        entity_type: str | None = None,
        key: Any = None,
        context: dict[str, Any] | None = None,
        **kwargs: Any,
    ) -> None:
        self.entity_type = entity_type
        self.key = key
        super().__init__(
            message or f"{entity_type or 'Entity'} already exists: {key}",
            code=DUPLICATE_ENTITY,
            context=context,
            entity_type=entity_type,
            key=key,
            **kwargs,
        )


class InvalidStatusTransitionError(PersistenceError):
    """Raised when a status change is not allowed by the transition table."""

    def __init__(
        self,
        current_status: str,
        proposed_status: str,
        entity_id: str | None = None,
        message: str | None = None,
        context: dict[str, Any] | None = None,
        **kwargs: Any,
    ) -> None:
        self.current_status = current_status
        self.proposed_status = proposed_status
        self.entity_id = entity_id
        super().__init__(
            message
            or f"Invalid status transition from {current_status!r} to {proposed_status!r}",
            code=INVALID_STATUS_TRANSITION,
            context=context,
            entity_id=entity_id,
            current_status=current_status,
            proposed_status=proposed_status,
            **kwargs,
        )
