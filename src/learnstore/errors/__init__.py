# SPDX-FileCopyrightText: 2024-present Richard Dahl <richard@dahl.us>
# SPDX-License-Identifier: MIT
# SPDX-Package-Name: learnstore
"""
Structured error handling for learnstore.

Error codes and categories live in a single registry; concrete error kinds
are defined next to the components that raise them (persistence, cache,
events, config, domain).
"""

from learnstore.errors.base import (
    INTERNAL,
    INTERNAL_ERROR,
    ErrorCategory,
    ErrorCode,
    ErrorSeverity,
    LearnstoreError,
)
from learnstore.errors.registry import ErrorRegistry, registry

__all__ = [
    "INTERNAL",
    "INTERNAL_ERROR",
    "ErrorCategory",
    "ErrorCode",
    "ErrorRegistry",
    "ErrorSeverity",
    "LearnstoreError",
    "registry",
]
