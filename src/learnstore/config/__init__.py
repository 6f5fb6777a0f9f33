"""Configuration for learnstore processes.

Settings come from environment variables through
pydantic-settings.
"""

from learnstore.config.environment import Environment
from learnstore.config.errors import ConfigError
from learnstore.config.settings import (
    AppSettings,
    clear_settings_cache,
    get_settings,
    load_settings,
)

__all__ = [
    "AppSettings",
    "ConfigError",
    "Environment",
    "clear_settings_cache",
    "get_settings",
    "load_settings",
]
