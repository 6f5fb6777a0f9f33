# SPDX-FileCopyrightText: 2024-present Richard Dahl <richard@dahl.us>
# SPDX-License-Identifier: MIT
# SPDX-Package-Name: learnstore
"""
Logger implementation for learnstore.

This module provides the default logger implementation based on Python's
standard logging module, enhanced with structured logging capabilities.
Structured context travels on the log record as a dictionary and is merged
with any context bound to the logger or set through ``async_context``.
"""

from __future__ import annotations

import contextlib
import datetime
import enum
import json
import logging
import sys
import threading
import uuid
from contextvars import ContextVar
from logging import StreamHandler
from typing import TYPE_CHECKING, Any

from learnstore.logging.config import LoggingSettings
from learnstore.logging.level import LogLevel
from learnstore.logging.protocols import LoggerProtocol

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

ROOT_LOGGER_NAME = "learnstore"
CONTEXT_ATTR = "learnstore_context"

# Context variable for storing log context data
_log_context: ContextVar[dict[str, Any]] = ContextVar("log_context", default={})
_configure_lock = threading.Lock()
_configured = False


class StructuredJsonEncoder(json.JSONEncoder):
    """JSON encoder that handles the types that show up in log context."""

    def default(self, obj: Any) -> Any:
        if isinstance(obj, datetime.datetime | datetime.date):
            return obj.isoformat()
        if isinstance(obj, uuid.UUID):
            return str(obj)
        if isinstance(obj, enum.Enum):
            return obj.value
        if isinstance(obj, BaseException):
            return str(obj)
        if hasattr(obj, "model_dump"):  # Pydantic v2 models
            return obj.model_dump(mode="json")
        return str(obj)


class StructuredFormatter(logging.Formatter):
    """Formatter that supports structured logging with context data."""

    def __init__(
        self,
        json_format: bool = False,
        include_timestamp: bool = True,
        include_level: bool = True,
    ) -> None:
        """Initialize a structured formatter.

        Args:
            json_format: Whether to format logs as JSON
            include_timestamp: Whether to include timestamps in logs
            include_level: Whether to include log level in logs
        """
        self.json_format = json_format
        self.include_timestamp = include_timestamp
        self.include_level = include_level

        fmt = "%(message)s"
        if include_timestamp:
            fmt = "%(asctime)s " + fmt
        if include_level and not json_format:
            fmt = fmt + " [%(levelname)s]"

        super().__init__(fmt=fmt, datefmt="%Y-%m-%d %H:%M:%S")

    def format(self, record: logging.LogRecord) -> str:
        """Format a log record with structured data."""
        extra: dict[str, Any] = dict(_log_context.get())
        extra.update(getattr(record, CONTEXT_ATTR, None) or {})

        if self.json_format:
            return self._format_json(record, extra)
        message = super().format(record)
        return self._format_text(message, extra)

    def _format_json(self, record: logging.LogRecord, extra: dict[str, Any]) -> str:
        log_data: dict[str, Any] = {
            "message": record.getMessage(),
            "logger": record.name,
            **extra,
        }
        if self.include_level:
            log_data["level"] = record.levelname
        if self.include_timestamp:
            log_data["timestamp"] = self.formatTime(record, self.datefmt)
        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)
            log_data["error"] = str(record.exc_info[1])
        return json.dumps(log_data, cls=StructuredJsonEncoder, ensure_ascii=False)

    def _format_text(self, message: str, extra: dict[str, Any]) -> str:
        if not extra:
            return message
        ctx_str = " ".join(f"{k}={self._format_value(v)}" for k, v in extra.items())
        return f"{message} {ctx_str}"

    def _format_value(self, value: Any) -> str:
        """Format a value for text output."""
        if isinstance(value, str):
            # Quote strings that contain spaces
            if " " in value:
                return f'"{value}"'
            return value
        if isinstance(value, datetime.datetime | datetime.date):
            return value.isoformat()
        if isinstance(value, uuid.UUID):
            return str(value)
        if isinstance(value, enum.Enum):
            return str(value.value)
        if isinstance(value, BaseException):
            return f'"{value}"'
        try:
            return json.dumps(value, cls=StructuredJsonEncoder)
        except (TypeError, ValueError):
            return str(value)


def configure_logging(settings: LoggingSettings | None = None, force: bool = False) -> None:
    """Attach handlers to the package root logger.

    Handlers are installed once per process; pass ``force=True`` to replace
    them (tests and reconfiguration after settings change).
    """
    global _configured
    with _configure_lock:
        if _configured and not force:
            return
        settings = settings or LoggingSettings.load()
        root = logging.getLogger(ROOT_LOGGER_NAME)
        root.setLevel(LogLevel.from_string(settings.level).to_stdlib_level())

        for handler in list(root.handlers):
            root.removeHandler(handler)

        formatter = StructuredFormatter(
            json_format=settings.json_format,
            include_timestamp=settings.include_timestamp,
            include_level=settings.include_level,
        )
        if settings.console_enabled:
            console = StreamHandler(sys.stdout)
            console.setFormatter(formatter)
            root.addHandler(console)
        if settings.file_enabled and settings.file_path:
            file_handler = logging.FileHandler(settings.file_path)
            file_handler.setFormatter(formatter)
            root.addHandler(file_handler)
        _configured = True


class StructuredLogger(LoggerProtocol):
    """Default logger implementation for learnstore."""

    def __init__(self, name: str, bound_context: dict[str, Any] | None = None) -> None:
        """
        Initialize a new logger.

        Args:
            name: Logger name; names outside the package root are nested under it
            bound_context: Context added to every record from this logger
        """
        if name != ROOT_LOGGER_NAME and not name.startswith(f"{ROOT_LOGGER_NAME}."):
            name = f"{ROOT_LOGGER_NAME}.{name}"
        self.name = name
        self._logger = logging.getLogger(name)
        self._bound_context: dict[str, Any] = dict(bound_context or {})

    def _log(
        self, level: int, msg: str, exc_info: bool = False, **context: Any
    ) -> None:
        if not self._logger.isEnabledFor(level):
            return
        combined = {**self._bound_context, **context}
        self._logger.log(
            level, msg, exc_info=exc_info, extra={CONTEXT_ATTR: combined}, stacklevel=3
        )

    def debug(self, msg: str, **context: Any) -> None:
        self._log(logging.DEBUG, msg, **context)

    def info(self, msg: str, **context: Any) -> None:
        self._log(logging.INFO, msg, **context)

    def warning(self, msg: str, **context: Any) -> None:
        self._log(logging.WARNING, msg, **context)

    def error(self, msg: str, **context: Any) -> None:
        self._log(logging.ERROR, msg, **context)

    def critical(self, msg: str, **context: Any) -> None:
        self._log(logging.CRITICAL, msg, **context)

    def exception(self, msg: str, **context: Any) -> None:
        self._log(logging.ERROR, msg, exc_info=True, **context)

    def set_level(self, level: LogLevel) -> None:
        """Set the logger's level."""
        self._logger.setLevel(level.to_stdlib_level())

    def bind(self, **context: Any) -> StructuredLogger:
        """Create a new logger with bound context values.

        Args:
            **context: Context values to bind

        Returns:
            New logger instance with bound context
        """
        return StructuredLogger(self.name, {**self._bound_context, **context})

    @contextlib.asynccontextmanager
    async def async_context(self, **context: Any) -> AsyncGenerator[None]:
        """Add context information to all logs within this async context.

        The context is stored in a ContextVar, so it follows the current task
        and is visible to every logger, not only this one.
        """
        current = _log_context.get()
        token = _log_context.set({**current, **context})
        try:
            yield
        finally:
            _log_context.reset(token)


def get_logger(name: str, level: LogLevel | None = None) -> StructuredLogger:
    """Get a logger for the specified name.

    Args:
        name: Logger name (typically ``__name__``)
        level: Optional log level override

    Returns:
        Configured logger instance
    """
    configure_logging()
    logger = StructuredLogger(name)
    if level is not None:
        logger.set_level(level)
    return logger
