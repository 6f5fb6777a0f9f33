# SPDX-FileCopyrightText: 2024-present Richard Dahl <richard@dahl.us>
# SPDX-License-Identifier: MIT
# SPDX-Package-Name: learnstore
"""
Storage backends and the generic persistence error kinds.

``SQLAlchemyStorage`` lives in ``learnstore.persistence.sql`` and is imported
on demand so the in-memory backend works without a database driver.
"""

from learnstore.persistence.config import DatabaseSettings
from learnstore.persistence.errors import (
    DatabaseError,
    DuplicateEntityError,
    EntityNotFoundError,
    InvalidStatusTransitionError,
    PersistenceError,
    ValidationError,
)
from learnstore.persistence.memory import InMemoryStorage
from learnstore.persistence.protocols import (
    STORAGE_ERROR,
    TIMEOUT,
    UNIQUE_VIOLATION,
    Row,
    StorageBackendProtocol,
    StorageFailure,
    StorageResult,
)
from learnstore.persistence.query import (
    Filter,
    FilterOp,
    Order,
    contains,
    eq,
    gte,
    in_,
    lte,
    neq,
)

__all__ = [
    "STORAGE_ERROR",
    "TIMEOUT",
    "UNIQUE_VIOLATION",
    "DatabaseError",
    "DatabaseSettings",
    "DuplicateEntityError",
    "EntityNotFoundError",
    "Filter",
    "FilterOp",
    "InMemoryStorage",
    "InvalidStatusTransitionError",
    "Order",
    "PersistenceError",
    "Row",
    "StorageBackendProtocol",
    "StorageFailure",
    "StorageResult",
    "ValidationError",
    "contains",
    "eq",
    "gte",
    "in_",
    "lte",
    "neq",
]
