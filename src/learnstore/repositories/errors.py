# SPDX-FileCopyrightText: 2024-present Richard Dahl <richard@dahl.us>
# SPDX-License-Identifier: MIT
# SPDX-Package-Name: learnstore
"""
Error mapping at repository method boundaries.

Low-level code raises the generic persistence kinds. ``repository_operation``
catches whatever escapes a repository method, rewrites it through the
repository's ``ErrorMapper`` and logs it once with the operation name, the
entity type and the shape of the arguments.
"""

from __future__ import annotations

import functools
from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, ParamSpec, TypeVar

from learnstore.errors.base import ErrorSeverity, LearnstoreError

if TYPE_CHECKING:
    from learnstore.logging import LoggerProtocol

P = ParamSpec("P")
R = TypeVar("R")


class ErrorMapper:
    """Declarative table rewriting generic error kinds into domain kinds.

    The first entry whose source type matches wins; anything unmatched
    becomes ``default``. Errors that are already domain errors pass through
    unchanged apart from the added context.
    """

    def __init__(
        self,
        mapping: Mapping[type[Exception], type[LearnstoreError]],
        default: type[LearnstoreError],
        domain_base: type[LearnstoreError] | None = None,
    ) -> None:
        self._mapping = dict(mapping)
        self._default = default
        self._domain_base = domain_base or default

    def target_for(self, error: BaseException) -> type[LearnstoreError]:
        for source, target in self._mapping.items():
            if isinstance(error, source):
                return target
        return self._default

    def map(self, error: Exception, **context: Any) -> LearnstoreError:
        """Return the domain error for ``error`` with ``context`` merged in."""
        if isinstance(error, self._domain_base):
            for key, value in context.items():
                error.context.setdefault(key, value)
            return error

        target = self.target_for(error)
        if isinstance(error, LearnstoreError):
            message = error.message
            merged = {**context, **error.context}
        else:
            message = str(error) or type(error).__name__
            merged = {**context, "original_error": type(error).__name__}
        mapped = target(message, context=merged)
        mapped.__cause__ = error
        return mapped


def _describe(value: Any) -> str:
    """Short description of an argument for logs (never the full payload)."""
    if value is None or isinstance(value, bool | int | float):
        return repr(value)
    if isinstance(value, str):
        return repr(value if len(value) <= 64 else value[:61] + "...")
    if isinstance(value, list | tuple | set | dict):
        return f"{type(value).__name__}[{len(value)}]"
    entity_id = getattr(value, "id", None)
    if entity_id is not None:
        return f"{type(value).__name__}({entity_id})"
    return type(value).__name__


class _MappedRepository:
    """Attributes ``repository_operation`` expects on the instance."""

    error_mapper: ErrorMapper
    entity_type: str
    _logger: LoggerProtocol


def repository_operation(
    name: str | None = None,
) -> Callable[[Callable[P, Awaitable[R]]], Callable[P, Awaitable[R]]]:
    """Map and log errors escaping an async repository method.

    Args:
        name: Operation name used in logs and error context (defaults to the
            function name)
    """

    def decorator(func: Callable[P, Awaitable[R]]) -> Callable[P, Awaitable[R]]:
        operation = name or func.__name__

        @functools.wraps(func)
        async def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
            repo: _MappedRepository = args[0]  # type: ignore[assignment]
            try:
                return await func(*args, **kwargs)
            except Exception as e:
                mapped = repo.error_mapper.map(
                    e, operation=operation, entity_type=repo.entity_type
                )
                log = (
                    repo._logger.warning
                    if mapped.severity in (ErrorSeverity.WARNING, ErrorSeverity.INFO)
                    else repo._logger.error
                )
                log(
                    f"{repo.entity_type}.{operation} failed",
                    operation=operation,
                    entity_type=repo.entity_type,
                    error_type=type(mapped).__name__,
                    error_code=str(mapped.code),
                    error=mapped.message,
                    args=[_describe(a) for a in args[1:]],
                    kwargs={k: _describe(v) for k, v in kwargs.items()},
                )
                if mapped is e:
                    raise
                raise mapped from e

        return wrapper

    return decorator


@dataclass
class CollectedError:
    error: Exception
    context: dict[str, Any] = field(default_factory=dict)


class ErrorCollector:
    """Accumulates non-fatal failures so a batch can finish."""

    def __init__(self) -> None:
        self.errors: list[CollectedError] = []

    def collect(self, error: Exception, **context: Any) -> None:
        self.errors.append(CollectedError(error, context))

    def __len__(self) -> int:
        return len(self.errors)

    def __bool__(self) -> bool:
        return bool(self.errors)

    def summary(self) -> dict[str, int]:
        """Count of collected errors by error type."""
        counts: dict[str, int] = {}
        for item in self.errors:
            kind = type(item.error).__name__
            counts[kind] = counts.get(kind, 0) + 1
        return counts
