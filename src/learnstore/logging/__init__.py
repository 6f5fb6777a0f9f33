# SPDX-FileCopyrightText: 2024-present Richard Dahl <richard@dahl.us>
# SPDX-License-Identifier: MIT
# SPDX-Package-Name: learnstore

"""
Public API for the learnstore logging system.

This module exports structured logging capabilities and context management.
"""

from __future__ import annotations

from learnstore.logging.config import LoggingSettings
from learnstore.logging.level import LogLevel
from learnstore.logging.logger import (
    StructuredFormatter,
    StructuredLogger,
    configure_logging,
    get_logger,
)
from learnstore.logging.protocols import LoggerProtocol

__all__ = [
    "LogLevel",
    "LoggerProtocol",
    "LoggingSettings",
    "StructuredFormatter",
    "StructuredLogger",
    "configure_logging",
    "get_logger",
]
