# SPDX-FileCopyrightText: 2024-present Richard Dahl <richard@dahl.us>
# SPDX-License-Identifier: MIT
# SPDX-Package-Name: learnstore
"""
Domain entities, status lifecycle and domain error kinds.
"""

from learnstore.domain.catalog import CatalogEntity
from learnstore.domain.challenge import Challenge
from learnstore.domain.challenge_type import ChallengeType
from learnstore.domain.difficulty_level import DifficultyLevel
from learnstore.domain.entity import Entity
from learnstore.domain.errors import (
    ChallengeDuplicateError,
    ChallengeError,
    ChallengeNotFoundError,
    ChallengeProcessingError,
    ChallengeRepositoryError,
    ChallengeValidationError,
    InvalidChallengeStatusTransitionError,
)
from learnstore.domain.focus_area import FocusArea
from learnstore.domain.format_type import FormatType
from learnstore.domain.status import (
    CHALLENGE_TRANSITIONS,
    ChallengeStatus,
    StatusTransitionGuard,
    challenge_status_guard,
)

__all__ = [
    "CHALLENGE_TRANSITIONS",
    "CatalogEntity",
    "Challenge",
    "ChallengeDuplicateError",
    "ChallengeError",
    "ChallengeNotFoundError",
    "ChallengeProcessingError",
    "ChallengeRepositoryError",
    "ChallengeStatus",
    "ChallengeType",
    "ChallengeValidationError",
    "DifficultyLevel",
    "Entity",
    "FocusArea",
    "FormatType",
    "InvalidChallengeStatusTransitionError",
    "StatusTransitionGuard",
    "challenge_status_guard",
]
