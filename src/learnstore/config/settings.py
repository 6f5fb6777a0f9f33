# SPDX-FileCopyrightText: 2024-present Richard Dahl <richard@dahl.us>
# SPDX-License-Identifier: MIT
# SPDX-Package-Name: learnstore
"""Application settings loading and caching.

Each component keeps its own ``BaseSettings`` class with its own
environment prefix; ``AppSettings`` gathers them so one object describes a
whole process.
"""

from __future__ import annotations

import threading
from typing import Any

from pydantic import Field, ValidationError, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from learnstore.cache.config import CacheSettings
from learnstore.config.environment import Environment
from learnstore.config.errors import CONFIG_VALIDATION_ERROR, ConfigError
from learnstore.logging.config import LoggingSettings
from learnstore.persistence.config import DatabaseSettings


class AppSettings(BaseSettings):
    """Settings for one learnstore process."""

    model_config = SettingsConfigDict(
        env_prefix="LEARNSTORE_",
        extra="ignore",
        case_sensitive=False,
    )

    environment: Environment = Field(
        default=Environment.DEVELOPMENT,
        description="Deployment environment (development, testing, production)",
    )
    event_history_size: int = Field(
        default=100,
        description="Number of published events the in-memory bus keeps",
    )
    cache: CacheSettings = Field(default_factory=CacheSettings)
    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings.load)

    @field_validator("environment", mode="before")
    @classmethod
    def validate_environment(cls, v: Any) -> Environment:
        if isinstance(v, Environment):
            return v
        return Environment.from_string(v)

    @field_validator("event_history_size")
    @classmethod
    def validate_history_size(cls, v: int) -> int:
        if v < 0:
            raise ValueError("event_history_size must not be negative")
        return v

    @model_validator(mode="after")
    def check_production(self) -> AppSettings:
        if self.environment == Environment.PRODUCTION and self.database.use_memory:
            raise ValueError("production requires LEARNSTORE_DB_URL")
        return self


_settings: AppSettings | None = None
_settings_lock = threading.Lock()


def load_settings(**overrides: Any) -> AppSettings:
    """Build settings from the environment, wrapping failures as ``ConfigError``."""
    try:
        return AppSettings(**overrides)
    except ValidationError as e:
        raise ConfigError(
            f"Invalid learnstore settings: {e.error_count()} error(s)",
            code=CONFIG_VALIDATION_ERROR,
            errors=e.errors(include_url=False),
        ) from e


def get_settings() -> AppSettings:
    """Process-wide settings, loaded once on first use."""
    global _settings
    if _settings is None:
        with _settings_lock:
            if _settings is None:
                _settings = load_settings()
    return _settings


def clear_settings_cache() -> None:
    """Forget loaded settings so the next ``get_settings`` reloads them."""
    global _settings
    with _settings_lock:
        _settings = None
