# SPDX-FileCopyrightText: 2024-present Richard Dahl <richard@dahl.us>
# SPDX-License-Identifier: MIT
# SPDX-Package-Name: learnstore
"""
events.errors
Event bus-specific error classes for learnstore
"""

from __future__ import annotations

from typing import Any, Final

from learnstore.errors.base import ErrorCategory, ErrorCode, ErrorSeverity, LearnstoreError

# Define error category and codes
EVENT_BUS = ErrorCategory.get_or_create("EVENT_BUS")
EVENT_BUS_ERROR: Final = ErrorCode.get_or_create("EVENT_BUS_ERROR", EVENT_BUS)
EVENT_BUS_PUBLISH_ERROR: Final = ErrorCode.get_or_create(
    "EVENT_BUS_PUBLISH_ERROR", EVENT_BUS
)
EVENT_BUS_SUBSCRIBE_ERROR: Final = ErrorCode.get_or_create(
    "EVENT_BUS_SUBSCRIBE_ERROR", EVENT_BUS
)


class EventBusError(LearnstoreError):
    """Base class for all event bus-related errors."""

    def __init__(
        self,
        message: str,
        code: ErrorCode = EVENT_BUS_ERROR,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: dict[str, Any] | None = None,
        **kwargs: Any,
    ) -> None:
        """Initialize an event bus error.

        Args:
            message: Human-readable error message
            code: Error code
            severity: How severe this error is
            context: Additional context information
            **kwargs: Additional context keys (will be merged with context)
        """
        super().__init__(message, code=code, severity=severity, context=context, **kwargs)


class EventBusPublishError(EventBusError):
    """Raised after dispatch when one or more handlers failed for an event."""

    def __init__(
        self,
        message: str,
        failures: list[BaseException] | None = None,
        context: dict[str, Any] | None = None,
        **kwargs: Any,
    ) -> None:
        self.failures = list(failures or [])
        super().__init__(
            message,
            code=EVENT_BUS_PUBLISH_ERROR,
            context=context,
            failure_count=len(self.failures),
            **kwargs,
        )


class EventBusSubscribeError(EventBusError):
    """Raised when a handler cannot be registered."""

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(message, code=EVENT_BUS_SUBSCRIBE_ERROR, context=context, **kwargs)
