from __future__ import annotations

import asyncio
from datetime import timedelta

import pytest
from conftest import STATIONS, FakeClock

from coldtrack.models.messages import OutboundMessage, StatusMessage
from coldtrack.models.station import StationStatus
from coldtrack.monitor import StalenessMonitor
from coldtrack.state.store import StateStore


def _monitor(clock: FakeClock, **kwargs: object) -> tuple[StateStore, StalenessMonitor]:
    store = StateStore(STATIONS, clock=clock)
    monitor = StalenessMonitor(store, stale_after=timedelta(seconds=30), clock=clock, **kwargs)  # type: ignore[arg-type]
    return store, monitor


def test_silent_station_goes_offline_exactly_once(clock: FakeClock) -> None:
    store, monitor = _monitor(clock)
    store.station("production").mark_reading(clock.now)

    clock.advance(31)
    first = monitor.sweep()
    clock.advance(10)
    second = monitor.sweep()
    clock.advance(100)
    third = monitor.sweep()

    assert first == [StatusMessage(station="production", status=StationStatus.OFFLINE)]
    assert second == []
    assert third == []
    assert store.station("production").status == StationStatus.OFFLINE


def test_threshold_is_exclusive(clock: FakeClock) -> None:
    store, monitor = _monitor(clock)
    store.station("production").mark_reading(clock.now)

    clock.advance(30)

    assert monitor.sweep() == []
    assert store.station("production").status == StationStatus.ONLINE


def test_station_without_readings_is_ignored(clock: FakeClock) -> None:
    store, monitor = _monitor(clock)
    store.station("shipping").status = StationStatus.ONLINE

    clock.advance(3600)

    assert monitor.sweep() == []
    assert store.station("shipping").status == StationStatus.ONLINE


def test_new_reading_rearms_station(clock: FakeClock) -> None:
    store, monitor = _monitor(clock)
    station = store.station("cold_storage")
    station.mark_reading(clock.now)
    clock.advance(31)
    assert len(monitor.sweep()) == 1

    station.mark_reading(clock.now)
    clock.advance(10)
    assert monitor.sweep() == []
    clock.advance(25)
    assert monitor.sweep() == [StatusMessage(station="cold_storage", status=StationStatus.OFFLINE)]


@pytest.mark.asyncio
async def test_scheduled_sweep_publishes_and_stops(clock: FakeClock) -> None:
    published: list[OutboundMessage] = []
    store, monitor = _monitor(clock, interval_seconds=0.01, on_messages=published.extend)
    store.station("production").mark_reading(clock.now)
    clock.advance(60)

    monitor.start()
    assert monitor.is_running
    for _ in range(100):
        if published:
            break
        await asyncio.sleep(0.01)
    await asyncio.sleep(0.05)
    await monitor.stop()

    assert not monitor.is_running
    assert published == [StatusMessage(station="production", status=StationStatus.OFFLINE)]
