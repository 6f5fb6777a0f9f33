# SPDX-FileCopyrightText: 2024-present Richard Dahl <richard@dahl.us>
# SPDX-License-Identifier: MIT
# SPDX-Package-Name: learnstore
"""
events.bus
In-memory event bus implementation for learnstore
"""

from __future__ import annotations

from collections import deque
from typing import TYPE_CHECKING

from learnstore.events.errors import EventBusPublishError, EventBusSubscribeError
from learnstore.logging import LoggerProtocol, get_logger

if TYPE_CHECKING:
    from learnstore.events.events import DomainEvent
    from learnstore.events.protocols import EventHandler

WILDCARD = "*"


class InMemoryEventBus:
    """Ordered, in-process event bus.

    ``publish`` awaits each handler in subscription order before returning,
    so two events published one after the other are always delivered in that
    order. A failing handler does not stop the remaining handlers; the
    failures are logged and raised together as ``EventBusPublishError`` once
    dispatch is complete.
    """

    def __init__(
        self,
        logger: LoggerProtocol | None = None,
        history_size: int = 100,
    ) -> None:
        """Initialize the event bus.

        Args:
            logger: Logger instance for logging events and errors
            history_size: Number of published events kept for inspection
        """
        self._handlers: dict[str, list[EventHandler]] = {}
        self._logger = logger or get_logger("learnstore.events.bus")
        self._history: deque[DomainEvent] = deque(maxlen=history_size)

    @property
    def history(self) -> list[DomainEvent]:
        """Recently published events, oldest first."""
        return list(self._history)

    def subscribe(self, event_type: str, handler: EventHandler) -> None:
        """Register a handler for an event type, or ``"*"`` for every event."""
        if not event_type:
            raise EventBusSubscribeError("event_type is required to subscribe")
        if not callable(handler):
            raise EventBusSubscribeError(
                "Event handler must be callable", event_type=event_type
            )
        self._handlers.setdefault(event_type, []).append(handler)

    def unsubscribe(self, event_type: str, handler: EventHandler) -> bool:
        """Remove a handler; returns False if it was not registered."""
        handlers = self._handlers.get(event_type, [])
        if handler not in handlers:
            return False
        handlers.remove(handler)
        return True

    def _handlers_for(self, event_type: str) -> list[EventHandler]:
        return [*self._handlers.get(event_type, []), *self._handlers.get(WILDCARD, [])]

    async def publish(self, event: DomainEvent) -> None:
        self._history.append(event)
        failures: list[BaseException] = []
        for handler in self._handlers_for(event.event_type):
            try:
                await handler(event)
            except Exception as e:
                self._logger.error(
                    "Error in event handler",
                    handler=getattr(handler, "__qualname__", repr(handler)),
                    event_type=event.event_type,
                    event_id=event.event_id,
                    error=str(e),
                )
                failures.append(e)

        if failures:
            raise EventBusPublishError(
                f"{len(failures)} handler(s) failed for event {event.event_type}",
                failures=failures,
                event_type=event.event_type,
                event_id=event.event_id,
            ) from failures[0]

    async def publish_many(self, events: list[DomainEvent]) -> None:
        for event in events:
            await self.publish(event)


class NullEventBus:
    """Event bus used when nobody listens; publishing is a no-op."""

    async def publish(self, event: DomainEvent) -> None:
        return None

    async def publish_many(self, events: list[DomainEvent]) -> None:
        return None
