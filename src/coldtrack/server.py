"""Observer server.

Serves WebSocket observers, a JSON snapshot endpoint and, optionally, a
directory of dashboard assets.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from pathlib import Path

from aiohttp import WSMsgType, web

from coldtrack.broadcast import Observer
from coldtrack.tracker import Tracker

_logger = logging.getLogger(__name__)

TRACKER_KEY: web.AppKey[Tracker] = web.AppKey("tracker", Tracker)


async def _pump(observer: Observer, ws: web.WebSocketResponse) -> None:
    while True:
        text = await observer.get()
        if text is None or ws.closed:
            return
        await ws.send_str(text)


async def websocket_handler(request: web.Request) -> web.WebSocketResponse:
    tracker = request.app[TRACKER_KEY]
    ws = web.WebSocketResponse(heartbeat=30.0)
    await ws.prepare(request)

    observer = tracker.connect_observer(name=str(request.remote or ""))
    pump = asyncio.create_task(_pump(observer, ws))
    try:
        async for msg in ws:
            if msg.type == WSMsgType.ERROR:
                _logger.debug("WebSocket %s closed with error", observer.name, exc_info=ws.exception())
                break
            # Observers are read-only; anything they send is ignored.
    finally:
        tracker.disconnect_observer(observer)
        pump.cancel()
        with contextlib.suppress(asyncio.CancelledError, ConnectionResetError):
            await pump
    return ws


async def snapshot_handler(request: web.Request) -> web.Response:
    tracker = request.app[TRACKER_KEY]
    return web.json_response(tracker.snapshot().to_wire())


def build_app(tracker: Tracker, *, static_dir: str | Path | None = None) -> web.Application:
    """Create the aiohttp application bound to *tracker*."""
    app = web.Application()
    app[TRACKER_KEY] = tracker
    app.router.add_get("/ws", websocket_handler)
    app.router.add_get("/api/snapshot", snapshot_handler)

    if static_dir is not None:
        root = Path(static_dir)
        index = root / "index.html"

        async def index_handler(_request: web.Request) -> web.FileResponse:
            return web.FileResponse(index)

        if index.is_file():
            app.router.add_get("/", index_handler)
        app.router.add_static("/static/", root)
    return app


async def start_server(tracker: Tracker) -> web.AppRunner:
    """Start serving on the tracker's configured host and port."""
    config = tracker.config
    runner = web.AppRunner(build_app(tracker, static_dir=config.static_dir))
    await runner.setup()
    site = web.TCPSite(runner, config.http_host, config.http_port)
    await site.start()
    _logger.info("Observer server listening on http://%s:%s", config.http_host, config.http_port)
    return runner
