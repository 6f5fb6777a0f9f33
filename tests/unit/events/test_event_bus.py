"""Tests for domain events and the in-memory event bus."""

import pytest

from learnstore.events import (
    WILDCARD,
    DomainEvent,
    EventBusProtocol,
    EventBusPublishError,
    EventBusSubscribeError,
    EventTypes,
    InMemoryEventBus,
    NullEventBus,
)


def test_domain_event_defaults_and_serialization() -> None:
    event = DomainEvent.create(EventTypes.created("focus_area"), {"code": "fa1"})

    assert event.event_type == "focus_area.created"
    assert event.payload == {"code": "fa1"}
    assert event.timestamp.tzinfo is not None

    restored = DomainEvent.from_dict(event.to_dict())
    assert restored == event


def test_domain_event_is_immutable() -> None:
    event = DomainEvent.create("challenge.created")
    with pytest.raises(ValueError):
        event.event_type = "other"  # type: ignore[misc]


def test_domain_event_requires_type() -> None:
    with pytest.raises(ValueError):
        DomainEvent.create("  ")


async def test_handlers_run_in_order(event_bus: InMemoryEventBus) -> None:
    calls: list[str] = []

    async def first(event: DomainEvent) -> None:
        calls.append(f"first:{event.payload['n']}")

    async def second(event: DomainEvent) -> None:
        calls.append(f"second:{event.payload['n']}")

    async def everything(event: DomainEvent) -> None:
        calls.append(f"all:{event.payload['n']}")

    event_bus.subscribe("challenge.created", first)
    event_bus.subscribe(WILDCARD, everything)
    event_bus.subscribe("challenge.created", second)

    await event_bus.publish_many(
        [
            DomainEvent.create("challenge.created", {"n": 1}),
            DomainEvent.create("challenge.created", {"n": 2}),
        ]
    )

    assert calls == ["first:1", "second:1", "all:1", "first:2", "second:2", "all:2"]
    assert [e.payload["n"] for e in event_bus.history] == [1, 2]


async def test_failing_handler_does_not_stop_others(event_bus: InMemoryEventBus, fake_logger) -> None:
    delivered: list[DomainEvent] = []

    async def broken(event: DomainEvent) -> None:
        raise RuntimeError("handler down")

    async def working(event: DomainEvent) -> None:
        delivered.append(event)

    event_bus.subscribe("focus_area.created", broken)
    event_bus.subscribe("focus_area.created", working)
    event = DomainEvent.create("focus_area.created", {"code": "fa1"})

    with pytest.raises(EventBusPublishError) as excinfo:
        await event_bus.publish(event)

    assert delivered == [event]
    assert len(excinfo.value.failures) == 1
    assert excinfo.value.context["event_type"] == "focus_area.created"
    assert fake_logger.messages("error") == ["Error in event handler"]


def test_subscribe_validation(event_bus: InMemoryEventBus) -> None:
    with pytest.raises(EventBusSubscribeError):
        event_bus.subscribe("", lambda e: None)  # type: ignore[arg-type]
    with pytest.raises(EventBusSubscribeError):
        event_bus.subscribe("x", "not callable")  # type: ignore[arg-type]


async def test_unsubscribe(event_bus: InMemoryEventBus) -> None:
    received: list[DomainEvent] = []

    async def handler(event: DomainEvent) -> None:
        received.append(event)

    event_bus.subscribe("x", handler)
    assert event_bus.unsubscribe("x", handler) is True
    assert event_bus.unsubscribe("x", handler) is False

    await event_bus.publish(DomainEvent.create("x"))
    assert received == []


async def test_history_is_bounded(fake_logger) -> None:
    bus = InMemoryEventBus(logger=fake_logger, history_size=2)
    for n in range(3):
        await bus.publish(DomainEvent.create("x", {"n": n}))

    assert [e.payload["n"] for e in bus.history] == [1, 2]


async def test_null_event_bus() -> None:
    bus = NullEventBus()
    await bus.publish(DomainEvent.create("x"))
    await bus.publish_many([DomainEvent.create("x")])

    assert isinstance(bus, EventBusProtocol)
    assert isinstance(InMemoryEventBus(), EventBusProtocol)
