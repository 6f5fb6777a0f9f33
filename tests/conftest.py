"""Top-level pytest configuration for learnstore."""

from __future__ import annotations

from typing import Any

import pytest

# Import error modules for their side effects so the registry is populated
import learnstore.cache.errors
import learnstore.config.errors
import learnstore.domain.errors
import learnstore.events.errors
import learnstore.persistence.errors
from learnstore.cache.memory import MemoryCache
from learnstore.events.bus import WILDCARD, InMemoryEventBus
from learnstore.events.events import DomainEvent
from learnstore.persistence.memory import InMemoryStorage


# Skip integration tests by default unless explicitly requested
def pytest_configure(config):
    """Configure pytest to recognize our custom markers."""
    config.addinivalue_line(
        "markers",
        "integration: mark test as integration test (deselect with '-m "
        "not integration')",
    )


def pytest_addoption(parser):
    """Add command line options for pytest."""
    parser.addoption(
        "--run-integration",
        action="store_true",
        default=False,
        help="run integration tests that require external services",
    )


def pytest_collection_modifyitems(config, items):
    """Skip integration tests by default."""
    if not config.getoption("--run-integration"):
        skip_integration = pytest.mark.skip(
            reason="need --run-integration option to run"
        )
        for item in items:
            if "integration" in item.keywords:
                item.add_marker(skip_integration)


class FakeLogger:
    """Logger that records every call instead of emitting it."""

    def __init__(self, records: list[tuple[str, str, dict[str, Any]]] | None = None) -> None:
        self.records: list[tuple[str, str, dict[str, Any]]] = (
            records if records is not None else []
        )
        self._bound: dict[str, Any] = {}

    def _record(self, level: str, msg: str, context: dict[str, Any]) -> None:
        self.records.append((level, msg, {**self._bound, **context}))

    def debug(self, msg: str, **context: Any) -> None:
        self._record("debug", msg, context)

    def info(self, msg: str, **context: Any) -> None:
        self._record("info", msg, context)

    def warning(self, msg: str, **context: Any) -> None:
        self._record("warning", msg, context)

    def error(self, msg: str, **context: Any) -> None:
        self._record("error", msg, context)

    def critical(self, msg: str, **context: Any) -> None:
        self._record("critical", msg, context)

    def exception(self, msg: str, **context: Any) -> None:
        self._record("error", msg, context)

    def bind(self, **context: Any) -> FakeLogger:
        bound = FakeLogger(self.records)
        bound._bound = {**self._bound, **context}
        return bound

    def messages(self, level: str) -> list[str]:
        return [msg for lvl, msg, _ in self.records if lvl == level]

    def contexts(self, level: str) -> list[dict[str, Any]]:
        return [ctx for lvl, _, ctx in self.records if lvl == level]


@pytest.fixture
def fake_logger() -> FakeLogger:
    """Fixture providing a recording logger."""
    return FakeLogger()


@pytest.fixture
def storage() -> InMemoryStorage:
    """Fixture providing an empty in-memory storage backend."""
    return InMemoryStorage()


@pytest.fixture
def cache(fake_logger: FakeLogger) -> MemoryCache:
    """Fixture providing an in-memory cache."""
    return MemoryCache(logger=fake_logger)


@pytest.fixture
def event_bus(fake_logger: FakeLogger) -> InMemoryEventBus:
    """Fixture providing an in-memory event bus."""
    return InMemoryEventBus(logger=fake_logger)


@pytest.fixture
def published(event_bus: InMemoryEventBus) -> list[DomainEvent]:
    """Every event delivered by ``event_bus``, in delivery order."""
    received: list[DomainEvent] = []

    async def record(event: DomainEvent) -> None:
        received.append(event)

    event_bus.subscribe(WILDCARD, record)
    return received
