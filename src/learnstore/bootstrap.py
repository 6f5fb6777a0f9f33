# SPDX-FileCopyrightText: 2024-present Richard Dahl <richard@dahl.us>
# SPDX-License-Identifier: MIT
# SPDX-Package-Name: learnstore
"""
Explicit construction of the repository set.

Nothing is created at import time: a process (or a test) calls
``build_repositories`` once and passes the result to whoever needs it.
"""

from __future__ import annotations

from dataclasses import dataclass

from learnstore.cache.cache import create_cache
from learnstore.cache.protocols import CacheProtocol
from learnstore.config.settings import AppSettings, get_settings
from learnstore.events.bus import InMemoryEventBus
from learnstore.events.protocols import EventBusProtocol
from learnstore.logging import LoggerProtocol, configure_logging, get_logger
from learnstore.persistence.config import DatabaseSettings
from learnstore.persistence.memory import InMemoryStorage
from learnstore.persistence.protocols import StorageBackendProtocol
from learnstore.repositories.challenge import ChallengeRepository
from learnstore.repositories.challenge_type import ChallengeTypeRepository
from learnstore.repositories.difficulty_level import DifficultyLevelRepository
from learnstore.repositories.focus_area import FocusAreaRepository
from learnstore.repositories.format_type import FormatTypeRepository


@dataclass(frozen=True)
class Repositories:
    """One repository per entity type, sharing the same collaborators."""

    challenges: ChallengeRepository
    focus_areas: FocusAreaRepository
    format_types: FormatTypeRepository
    difficulty_levels: DifficultyLevelRepository
    challenge_types: ChallengeTypeRepository
    storage: StorageBackendProtocol
    cache: CacheProtocol
    event_bus: EventBusProtocol

    async def invalidate_all(self) -> None:
        """Evict every cached entry of every entity type."""
        for repository in (
            self.challenges,
            self.focus_areas,
            self.format_types,
            self.difficulty_levels,
            self.challenge_types,
        ):
            await repository.invalidate_cache()


def create_storage(
    settings: DatabaseSettings, logger: LoggerProtocol | None = None
) -> StorageBackendProtocol:
    """Build the storage backend selected by ``settings.url``."""
    if settings.use_memory:
        return InMemoryStorage()
    from learnstore.persistence.sql import SQLAlchemyStorage

    return SQLAlchemyStorage.from_settings(settings, logger=logger)


def build_repositories(
    settings: AppSettings | None = None,
    *,
    storage: StorageBackendProtocol | None = None,
    cache: CacheProtocol | None = None,
    event_bus: EventBusProtocol | None = None,
    logger: LoggerProtocol | None = None,
) -> Repositories:
    """Build every repository from settings; explicit collaborators win.

    Args:
        settings: Application settings (process-wide settings if omitted)
        storage: Storage backend overriding ``settings.database``
        cache: Cache overriding ``settings.cache``
        event_bus: Event bus (a new ``InMemoryEventBus`` if omitted)
        logger: Logger shared by every repository (per-type loggers if omitted)
    """
    settings = settings or get_settings()
    configure_logging(settings.logging)
    bootstrap_logger = get_logger("learnstore.bootstrap")

    storage = storage or create_storage(settings.database, logger=logger)
    cache = cache or create_cache(settings.cache, logger=logger)
    event_bus = event_bus or InMemoryEventBus(
        logger=logger, history_size=settings.event_history_size
    )
    ttls = {
        "ttl_all": settings.cache.ttl_all_timedelta,
        "ttl_single": settings.cache.ttl_single_timedelta,
    }

    def build(repository_class: type) -> object:
        return repository_class(storage, cache=cache, event_bus=event_bus, logger=logger, **ttls)

    repositories = Repositories(
        challenges=build(ChallengeRepository),  # type: ignore[arg-type]
        focus_areas=build(FocusAreaRepository),  # type: ignore[arg-type]
        format_types=build(FormatTypeRepository),  # type: ignore[arg-type]
        difficulty_levels=build(DifficultyLevelRepository),  # type: ignore[arg-type]
        challenge_types=build(ChallengeTypeRepository),  # type: ignore[arg-type]
        storage=storage,
        cache=cache,
        event_bus=event_bus,
    )
    bootstrap_logger.info(
        "Repositories ready",
        environment=settings.environment,
        storage=type(storage).__name__,
        cache=type(cache).__name__,
        event_bus=type(event_bus).__name__,
    )
    return repositories
