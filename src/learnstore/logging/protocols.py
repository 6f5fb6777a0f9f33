# SPDX-FileCopyrightText: 2024-present Richard Dahl <richard@dahl.us>
# SPDX-License-Identifier: MIT
# SPDX-Package-Name: learnstore
"""
Logging interface definitions for learnstore.

Every component takes a ``LoggerProtocol`` so tests and host applications
can supply their own implementation.
"""

from __future__ import annotations

from typing import Any, Protocol


class LoggerProtocol(Protocol):
    """
    Protocol defining the structured logger interface.

    Context is passed as keyword arguments and rendered as structured
    fields. This protocol is for static type checking only.
    """

    def debug(self, msg: str, **context: Any) -> None:
        """Log a debug message."""
        ...

    def info(self, msg: str, **context: Any) -> None:
        """Log an info message."""
        ...

    def warning(self, msg: str, **context: Any) -> None:
        """Log a warning message."""
        ...

    def error(self, msg: str, **context: Any) -> None:
        """Log an error message."""
        ...

    def critical(self, msg: str, **context: Any) -> None:
        """Log a critical message."""
        ...

    def exception(self, msg: str, **context: Any) -> None:
        """Log an error message with the active exception's traceback."""
        ...

    def bind(self, **context: Any) -> LoggerProtocol:
        """Return a logger that adds ``context`` to every record."""
        ...
