# SPDX-FileCopyrightText: 2024-present Richard Dahl <richard@dahl.us>
# SPDX-License-Identifier: MIT
# SPDX-Package-Name: learnstore
"""
events.protocols
Event system protocols for learnstore
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from learnstore.events.events import DomainEvent

EventHandler = Callable[["DomainEvent"], Awaitable[None]]


@runtime_checkable
class EventBusProtocol(Protocol):
    """Protocol for event bus implementations.

    Repositories only publish; subscribing is the concern of whoever builds
    the bus.
    """

    async def publish(self, event: DomainEvent) -> None:
        """Publish a single event.

        Args:
            event: The event to publish
        """
        ...

    async def publish_many(self, events: list[DomainEvent]) -> None:
        """Publish multiple events, preserving their order.

        Args:
            events: List of events to publish
        """
        ...
