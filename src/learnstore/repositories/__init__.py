# SPDX-FileCopyrightText: 2024-present Richard Dahl <richard@dahl.us>
# SPDX-License-Identifier: MIT
# SPDX-Package-Name: learnstore
"""
Entity repositories: cache-aside reads, event-publishing writes and error
mapping at every method boundary.
"""

from learnstore.repositories.base import CatalogRepository, EntityRepository, SeedReport
from learnstore.repositories.challenge import ChallengeRepository
from learnstore.repositories.challenge_type import ChallengeTypeRepository
from learnstore.repositories.difficulty_level import DifficultyLevelRepository
from learnstore.repositories.errors import (
    CollectedError,
    ErrorCollector,
    ErrorMapper,
    repository_operation,
)
from learnstore.repositories.focus_area import FocusAreaRepository
from learnstore.repositories.format_type import FormatTypeRepository
from learnstore.repositories.mappers import EntityMapper
from learnstore.repositories.mapping import challenge_error_mapper

__all__ = [
    "CatalogRepository",
    "ChallengeRepository",
    "ChallengeTypeRepository",
    "CollectedError",
    "DifficultyLevelRepository",
    "EntityMapper",
    "EntityRepository",
    "ErrorCollector",
    "ErrorMapper",
    "FocusAreaRepository",
    "FormatTypeRepository",
    "SeedReport",
    "challenge_error_mapper",
    "repository_operation",
]
