from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest

from coldtrack.config import StationSpec, TrackerConfig


class FakeClock:
    """Manually advanced clock; optionally ticks on every read."""

    def __init__(self, start: datetime | None = None, *, tick: timedelta | None = None) -> None:
        self.now = start or datetime(2026, 1, 1, tzinfo=UTC)
        self._tick = tick

    def __call__(self) -> datetime:
        current = self.now
        if self._tick is not None:
            self.now = self.now + self._tick
        return current

    def advance(self, seconds: float) -> None:
        self.now = self.now + timedelta(seconds=seconds)


STATIONS = (
    StationSpec(id="production", name="Receiving"),
    StationSpec(id="cold_storage", name="Storage"),
    StationSpec(id="shipping", name="Shipping"),
)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def config() -> TrackerConfig:
    return TrackerConfig(stations=STATIONS, sweep_interval_seconds=0.01)
