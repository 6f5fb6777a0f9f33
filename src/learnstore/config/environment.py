# SPDX-FileCopyrightText: 2024-present Richard Dahl <richard@dahl.us>
# SPDX-License-Identifier: MIT
# SPDX-Package-Name: learnstore
"""
Environment definitions for the learnstore configuration system.
"""

from __future__ import annotations

from enum import Enum

from learnstore.config.errors import CONFIG_ENVIRONMENT_ERROR, ConfigError


class Environment(str, Enum):
    """Supported environment types."""

    DEVELOPMENT = "development"
    TESTING = "testing"
    PRODUCTION = "production"

    @classmethod
    def from_string(cls, value: str | None) -> Environment:
        """Convert a string to an Environment enum value.

        Raises:
            ConfigError: If the string doesn't match a valid environment
        """
        if value is None:
            return cls.DEVELOPMENT

        normalized = value.lower().strip()
        if normalized in ("dev", "development"):
            return cls.DEVELOPMENT
        if normalized in ("test", "testing"):
            return cls.TESTING
        if normalized in ("prod", "production"):
            return cls.PRODUCTION
        raise ConfigError(
            f"Invalid environment: {value}",
            code=CONFIG_ENVIRONMENT_ERROR,
            provided_value=value,
        )
