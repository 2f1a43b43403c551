"""Shared pytest fixtures for gateway-collectors tests.

Fixture summary
---------------
source          — fresh in-process LocalEventSource.
record          — attaches an EventRecorder to a collector's collect/dispose/end.
_fresh_settings — clears the cached Settings around every test so env
                  patches made with ``monkeypatch`` take effect.

All tests run without a network connection or a real gateway client.
"""

from __future__ import annotations

from typing import Any

import pytest

from gateway_collectors.client.local import LocalEventSource
from gateway_collectors.config.settings import get_settings
from gateway_collectors.core.engine import Collector


@pytest.fixture(autouse=True)
def _fresh_settings():
    """Drop the lru_cache on get_settings() before and after each test."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def source() -> LocalEventSource:
    """Return an in-process event source with no handlers attached."""
    return LocalEventSource()


class EventRecorder:
    """Records every collect/dispose/end emission of one collector."""

    def __init__(self, collector: Collector) -> None:
        self.collected: list[Any] = []
        self.disposed: list[Any] = []
        self.ends: list[tuple[Any, Any]] = []
        collector.on("collect", self.collected.append)
        collector.on("dispose", self.disposed.append)
        collector.on("end", lambda items, reason: self.ends.append((items.snapshot(), reason)))

    @property
    def end_reason(self) -> Any:
        assert len(self.ends) == 1, f"expected exactly one end event, got {len(self.ends)}"
        return self.ends[0][1]

    @property
    def end_snapshot(self) -> dict[str, Any]:
        assert len(self.ends) == 1, f"expected exactly one end event, got {len(self.ends)}"
        return self.ends[0][0]


@pytest.fixture
def record():
    """Return a callable that attaches an :class:`EventRecorder` to a collector."""
    return EventRecorder
