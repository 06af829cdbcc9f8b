"""Pytest fixtures for engine tests."""
from typing import Any

import pytest

from fairspin.logic.engine import GameEngine
from fairspin.logic.models import Outcome
from fairspin.logic.rng import SeededRNG
from fairspin.logic.validator import validate_table
from fairspin.telemetry import TelemetryService


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (long seeded simulations)"
    )


class RecordingTelemetrySink:
    """Sink that keeps every event for assertions."""

    def __init__(self):
        self.events: list[tuple[str, dict[str, Any]]] = []

    def emit(self, event_name: str, data: dict[str, Any]) -> None:
        self.events.append((event_name, data))

    def get_events(self, event_name: str) -> list[dict[str, Any]]:
        return [data for name, data in self.events if name == event_name]

    def clear(self) -> None:
        self.events.clear()


class CountingSource:
    """Random source that counts how often it is called."""

    def __init__(self, value: float = 0.5):
        self.value = value
        self.calls = 0

    def __call__(self) -> float:
        self.calls += 1
        return self.value


def make_outcomes(*rows: tuple) -> list[Outcome]:
    """Build outcomes from (id, weight, multiplier) rows."""
    return [Outcome(id=i, label=i, weight=w, multiplier=m) for i, w, m in rows]


@pytest.fixture
def basic_table():
    """65/35 lose/win table from the admin defaults."""
    return validate_table(make_outcomes(("lose", 65, 0), ("win", 35, 2)))


@pytest.fixture
def recording_telemetry() -> RecordingTelemetrySink:
    return RecordingTelemetrySink()


@pytest.fixture
def engine(recording_telemetry: RecordingTelemetrySink) -> GameEngine:
    """Seeded engine wired to a recording telemetry sink."""
    return GameEngine(
        rng=SeededRNG(seed=42),
        telemetry=TelemetryService(sink=recording_telemetry),
    )


@pytest.fixture
def counting_source() -> CountingSource:
    return CountingSource()
