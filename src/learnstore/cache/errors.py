"""Exceptions for the cache system."""

from __future__ import annotations

from typing import Any, Final

from learnstore.errors.base import ErrorCategory, ErrorCode, ErrorSeverity, LearnstoreError

CACHE = ErrorCategory.get_or_create("CACHE")
CACHE_ERROR: Final = ErrorCode.get_or_create("CACHE_ERROR", CACHE)
CACHE_BACKEND_ERROR: Final = ErrorCode.get_or_create("CACHE_BACKEND_ERROR", CACHE)
CACHE_SERIALIZATION_ERROR: Final = ErrorCode.get_or_create(
    "CACHE_SERIALIZATION_ERROR", CACHE
)
CACHE_CONFIGURATION_ERROR: Final = ErrorCode.get_or_create(
    "CACHE_CONFIGURATION_ERROR", CACHE
)


class CacheError(LearnstoreError):
    """Base class for cache errors."""

    def __init__(
        self,
        message: str,
        code: ErrorCode = CACHE_ERROR,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: dict[str, Any] | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(message, code=code, severity=severity, context=context, **kwargs)


class CacheBackendError(CacheError):
    """Raised when the cache backend cannot be reached or fails an operation."""

    def __init__(
        self,
        message: str,
        key: str | None = None,
        context: dict[str, Any] | None = None,
        **kwargs: Any,
    ) -> None:
        if key is not None:
            kwargs["cache_key"] = key
        super().__init__(message, code=CACHE_BACKEND_ERROR, context=context, **kwargs)


class CacheSerializationError(CacheError):
    """Raised when a value cannot be serialized for a shared cache backend."""

    def __init__(self, message: str, key: str | None = None, **kwargs: Any) -> None:
        if key is not None:
            kwargs["cache_key"] = key
        super().__init__(message, code=CACHE_SERIALIZATION_ERROR, **kwargs)


class CacheConfigurationError(CacheError):
    """Raised when cache settings cannot produce a working backend."""

    def __init__(self, message: str, **kwargs: Any) -> None:
        super().__init__(
            message,
            code=CACHE_CONFIGURATION_ERROR,
            severity=ErrorSeverity.CRITICAL,
            **kwargs,
        )
