# SPDX-FileCopyrightText: 2024-present Richard Dahl <richard@dahl.us>
# SPDX-License-Identifier: MIT
# SPDX-Package-Name: learnstore
"""
Domain events and the in-memory event bus.
"""

from learnstore.events.bus import WILDCARD, InMemoryEventBus, NullEventBus
from learnstore.events.errors import (
    EventBusError,
    EventBusPublishError,
    EventBusSubscribeError,
)
from learnstore.events.events import DomainEvent, EventTypes
from learnstore.events.protocols import EventBusProtocol, EventHandler

__all__ = [
    "WILDCARD",
    "DomainEvent",
    "EventBusError",
    "EventBusProtocol",
    "EventBusPublishError",
    "EventBusSubscribeError",
    "EventHandler",
    "EventTypes",
    "InMemoryEventBus",
    "NullEventBus",
]
