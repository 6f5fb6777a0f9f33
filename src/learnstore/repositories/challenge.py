# SPDX-FileCopyrightText: 2024-present Richard Dahl <richard@dahl.us>
# SPDX-License-Identifier: MIT
# SPDX-Package-Name: learnstore
"""
Challenge repository.

Owner and search finders are paged: ``limit`` defaults to ``DEFAULT_PAGE_SIZE``
and results are ordered by ``sort_by``/``sort_dir`` (newest first unless asked
otherwise). Every distinct query shape is cached under its own predicate key.
"""

from __future__ import annotations

from typing import Any, ClassVar, Final

from learnstore.domain.challenge import Challenge
from learnstore.domain.status import ChallengeStatus
from learnstore.events.events import DomainEvent, EventTypes
from learnstore.persistence.errors import EntityNotFoundError, ValidationError
from learnstore.persistence.query import Filter, Order, eq, neq
from learnstore.repositories.base import EntityRepository
from learnstore.repositories.errors import ErrorMapper, repository_operation
from learnstore.repositories.mapping import challenge_error_mapper

DEFAULT_PAGE_SIZE: Final = 10
RECENT_PAGE_SIZE: Final = 5

_STATUSES = frozenset(s.value for s in ChallengeStatus)
_SORTABLE = frozenset(
    {
        "created_at",
        "updated_at",
        "title",
        "status",
        "score",
        "difficulty",
        "focus_area",
        "challenge_type",
    }
)
_SEARCHABLE = ("user_id", "user_email", "focus_area", "difficulty", "challenge_type")


class ChallengeRepository(EntityRepository[Challenge]):
    """Challenges, keyed by id; deleted challenges are hidden from collections."""

    entity_class: ClassVar[type[Challenge]] = Challenge
    table: ClassVar[str] = "challenges"
    cache_prefix: ClassVar[str] = "challenge"
    order_by: ClassVar[tuple[Order, ...]] = (Order("created_at", descending=True),)
    active_filters: ClassVar[tuple[Filter, ...]] = (neq("status", ChallengeStatus.DELETED.value),)
    error_mapper: ClassVar[ErrorMapper] = challenge_error_mapper

    def predicate_names(self) -> tuple[str, ...]:
        return ("user", "email", "focusArea", "status", "search")

    def _validate_status(self, status: str | ChallengeStatus) -> str:
        value = status.value if isinstance(status, ChallengeStatus) else status
        if value not in _STATUSES:
            raise ValidationError(
                f"Unknown challenge status: {value!r}",
                field="status",
                allowed=sorted(_STATUSES),
            )
        return value

    def _ordering(
        self, limit: int | None, offset: int, sort_by: str, sort_dir: str
    ) -> tuple[Order, ...]:
        if limit is not None and limit < 1:
            raise ValidationError("limit must be positive", field="limit", limit=limit)
        if offset < 0:
            raise ValidationError("offset must not be negative", field="offset", offset=offset)
        if sort_by not in _SORTABLE:
            raise ValidationError(
                f"Cannot sort challenges by {sort_by!r}",
                field="sort_by",
                allowed=sorted(_SORTABLE),
            )
        if sort_dir not in ("asc", "desc"):
            raise ValidationError(
                "sort_dir must be 'asc' or 'desc'", field="sort_dir", sort_dir=sort_dir
            )
        return (Order(sort_by, descending=sort_dir == "desc"),)

    async def _find_owned(
        self,
        operation: str,
        name: str,
        column: str,
        owner: str,
        status: str | ChallengeStatus | None,
        limit: int | None,
        offset: int,
        sort_by: str,
        sort_dir: str,
    ) -> list[Challenge]:
        self._require(owner, column)
        filters: list[Filter] = [eq(column, owner)]
        status_value = self._validate_status(status) if status is not None else None
        if status_value is not None:
            filters.append(eq("status", status_value))
        order = self._ordering(limit, offset, sort_by, sort_dir)
        shape = f"{owner}:{status_value or 'any'}:{limit or 'all'}:{offset}:{sort_by}:{sort_dir}"
        return await self._find_by_predicate(
            operation, name, shape, filters, order_by=order, limit=limit, offset=offset
        )

    @repository_operation("find_by_user_id")
    async def find_by_user_id(
        self,
        user_id: str,
        status: str | ChallengeStatus | None = None,
        limit: int | None = DEFAULT_PAGE_SIZE,
        offset: int = 0,
        sort_by: str = "created_at",
        sort_dir: str = "desc",
    ) -> list[Challenge]:
        """A page of a user's challenges, optionally narrowed to one status.

        Pass ``limit=None`` for every matching challenge.
        """
        return await self._find_owned(
            "find_by_user_id", "user", "user_id", user_id, status, limit, offset, sort_by, sort_dir
        )

    @repository_operation("find_by_user_email")
    async def find_by_user_email(
        self,
        email: str,
        status: str | ChallengeStatus | None = None,
        limit: int | None = DEFAULT_PAGE_SIZE,
        offset: int = 0,
        sort_by: str = "created_at",
        sort_dir: str = "desc",
    ) -> list[Challenge]:
        """Like ``find_by_user_id`` for challenges owned by an email address."""
        return await self._find_owned(
            "find_by_user_email",
            "email",
            "user_email",
            email,
            status,
            limit,
            offset,
            sort_by,
            sort_dir,
        )

    @repository_operation("find_recent_by_user_email")
    async def find_recent_by_user_email(
        self, email: str, limit: int = RECENT_PAGE_SIZE
    ) -> list[Challenge]:
        return await self._find_owned(
            "find_recent_by_user_email",
            "email",
            "user_email",
            email,
            None,
            limit,
            0,
            "created_at",
            "desc",
        )

    @repository_operation("find_by_focus_area")
    async def find_by_focus_area(self, focus_area: str) -> list[Challenge]:
        return await self._find_by_predicate(
            "find_by_focus_area", "focusArea", focus_area, [eq("focus_area", focus_area)]
        )

    @repository_operation("find_by_status")
    async def find_by_status(self, status: str | ChallengeStatus) -> list[Challenge]:
        """Challenges in one status (``deleted`` included when asked for)."""
        self._require(status, "status")
        value = self._validate_status(status)
        return await self._cached_many(
            self._keys.predicate("status", value),
            lambda: self._select("find_by_status", [eq("status", value)], key=value),
            self._ttl_single,
        )

    @repository_operation("search")
    async def search(
        self,
        *,
        user_id: str | None = None,
        user_email: str | None = None,
        focus_area: str | None = None,
        difficulty: str | None = None,
        challenge_type: str | None = None,
        status: str | ChallengeStatus | None = None,
        limit: int | None = DEFAULT_PAGE_SIZE,
        offset: int = 0,
        sort_by: str = "created_at",
        sort_dir: str = "desc",
    ) -> list[Challenge]:
        """Challenges matching every given criterion, paged and sorted.

        Deleted challenges are left out unless ``status`` asks for them.
        """
        criteria: dict[str, Any] = {
            "user_id": user_id,
            "user_email": user_email,
            "focus_area": focus_area,
            "difficulty": difficulty,
            "challenge_type": challenge_type,
        }
        filters: list[Filter] = []
        for column in _SEARCHABLE:
            if criteria[column] is not None:
                self._require(criteria[column], column)
                filters.append(eq(column, criteria[column]))
        if status is not None:
            criteria["status"] = self._validate_status(status)
            filters.append(eq("status", criteria["status"]))
        else:
            filters.extend(self.active_filters)
        order = self._ordering(limit, offset, sort_by, sort_dir)

        shape = ",".join(f"{k}={v}" for k, v in sorted(criteria.items()) if v is not None)
        shape = f"{shape or '*'}:{limit or 'all'}:{offset}:{sort_by}:{sort_dir}"
        return await self._cached_many(
            self._keys.predicate("search", shape),
            lambda: self._select(
                "search", filters, order_by=order, limit=limit, offset=offset, key=shape
            ),
            self._ttl_single,
        )

    @repository_operation("update")
    async def update(self, challenge_id: str, **changes: Any) -> Challenge:
        """Apply descriptive ``changes`` to a stored challenge and save it.

        Raises:
            ChallengeNotFoundError: No challenge has this id
            ChallengeValidationError: ``changes`` is empty or touches protected fields
        """
        self._require(challenge_id, "id")
        if not changes:
            raise ValidationError("update requires at least one field", field="changes")
        challenge = await self._select_one("find_existing", "id", challenge_id)
        if challenge is None:
            raise EntityNotFoundError(entity_type=self.entity_type, key=challenge_id)
        challenge.update(**changes)
        return await self._save(challenge)

    async def _after_delete(self, entity: Challenge) -> None:
        await self._publish(
            [
                DomainEvent.create(
                    EventTypes.CHALLENGE_DELETED,
                    {
                        "challengeId": entity.id,
                        "userId": entity.user_id or entity.user_email,
                        "status": entity.status_value,
                    },
                )
            ]
        )
