# SPDX-FileCopyrightText: 2024-present Richard Dahl <richard@dahl.us>
# SPDX-License-Identifier: MIT
# SPDX-Package-Name: learnstore
"""
Configuration-specific error classes for learnstore.
"""

from __future__ import annotations

from typing import Any, Final

from learnstore.errors.base import ErrorCategory, ErrorCode, ErrorSeverity, LearnstoreError

CONFIG = ErrorCategory.get_or_create("CONFIG")
CONFIG_ERROR: Final = ErrorCode.get_or_create("CONFIG_ERROR", CONFIG)
CONFIG_VALIDATION_ERROR: Final = ErrorCode.get_or_create("CONFIG_VALIDATION_ERROR", CONFIG)
CONFIG_ENVIRONMENT_ERROR: Final = ErrorCode.get_or_create("CONFIG_ENVIRONMENT_ERROR", CONFIG)


class ConfigError(LearnstoreError):
    """Raised when settings cannot be loaded or are inconsistent."""

    def __init__(
        self,
        message: str,
        code: ErrorCode = CONFIG_ERROR,
        severity: ErrorSeverity = ErrorSeverity.CRITICAL,
        context: dict[str, Any] | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(message, code=code, severity=severity, context=context, **kwargs)
