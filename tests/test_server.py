from __future__ import annotations

from pathlib import Path

import pytest
from aiohttp.test_utils import TestClient, TestServer
from conftest import FakeClock

from coldtrack.config import TrackerConfig
from coldtrack.models.messages import MovementMessage, SnapshotMessage, decode_message
from coldtrack.server import build_app
from coldtrack.tracker import Tracker


@pytest.mark.asyncio
async def test_websocket_streams_snapshot_and_movements(config: TrackerConfig, clock: FakeClock) -> None:
    async with Tracker(config, clock=clock) as tracker:
        async with TestClient(TestServer(build_app(tracker))) as client:
            ws = await client.ws_connect("/ws")

            snapshot = decode_message(await ws.receive_str(timeout=2.0))
            assert isinstance(snapshot, SnapshotMessage)
            assert list(snapshot.stations) == ["production", "cold_storage", "shipping"]

            tracker.handle_message("coldchain/production/movement", b'{"itemId": "A1"}')
            movement = decode_message(await ws.receive_str(timeout=2.0))
            assert isinstance(movement, MovementMessage)
            assert movement.item.id == "A1"

            await ws.close()


@pytest.mark.asyncio
async def test_snapshot_endpoint_returns_wire_json(config: TrackerConfig, clock: FakeClock) -> None:
    async with Tracker(config, clock=clock) as tracker:
        tracker.handle_message("coldchain/production/movement", b'{"itemId": "A1"}')
        async with TestClient(TestServer(build_app(tracker))) as client:
            resp = await client.get("/api/snapshot")
            assert resp.status == 200
            body = await resp.json()

    assert body["type"] == "snapshot"
    assert body["stations"]["production"]["itemCount"] == 1
    assert body["items"]["A1"]["state"] == "production"
    assert body["events"][0]["itemId"] == "A1"


@pytest.mark.asyncio
async def test_static_dashboard_served(config: TrackerConfig, tmp_path: Path) -> None:
    (tmp_path / "index.html").write_text("<h1>cold chain</h1>")
    (tmp_path / "app.js").write_text("console.log('hi');")

    async with Tracker(config) as tracker:
        async with TestClient(TestServer(build_app(tracker, static_dir=tmp_path))) as client:
            index = await client.get("/")
            script = await client.get("/static/app.js")

            assert index.status == 200
            assert "cold chain" in await index.text()
            assert script.status == 200
