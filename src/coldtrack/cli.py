"""Command-line entry point: MQTT ingestion plus observer server."""

from __future__ import annotations

import argparse
import asyncio
import contextlib
import logging
import signal
from collections.abc import Sequence
from typing import Any

from coldtrack._mqtt import TrackerMqttRuntime
from coldtrack.config import TrackerConfig, parse_stations
from coldtrack.exceptions import TrackerConfigError
from coldtrack.server import start_server
from coldtrack.tracker import Tracker

_LOG = logging.getLogger("coldtrack")


def _parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="coldtrack",
        description="Track items through monitoring stations and stream state to observers.",
    )
    parser.add_argument("--broker-host", help="MQTT broker host (env COLDTRACK_BROKER_HOST).")
    parser.add_argument("--broker-port", type=int, help="MQTT broker port.")
    parser.add_argument("--topic-prefix", help="Topic root, e.g. 'coldchain'.")
    parser.add_argument("--http-host", help="Observer server bind address.")
    parser.add_argument("--http-port", type=int, help="Observer server port.")
    parser.add_argument("--static-dir", help="Directory of dashboard assets to serve.")
    parser.add_argument(
        "--stations",
        help="Station sequence as 'id:Name,id:Name' (env COLDTRACK_STATIONS).",
    )
    parser.add_argument(
        "--no-mqtt",
        action="store_true",
        help="Do not connect to a broker (observer server only).",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable debug logs.",
    )
    return parser.parse_args(argv)


def _config_from_args(args: argparse.Namespace) -> TrackerConfig:
    overrides: dict[str, Any] = {}
    for name in ("broker_host", "broker_port", "topic_prefix", "http_host", "http_port", "static_dir"):
        value = getattr(args, name)
        if value is not None:
            overrides[name] = value
    if args.stations:
        overrides["stations"] = parse_stations(args.stations)
    return TrackerConfig.from_env(**overrides)


async def _serve(config: TrackerConfig, *, use_mqtt: bool) -> None:
    loop = asyncio.get_running_loop()
    stop = asyncio.Event()
    for sig in (signal.SIGINT, signal.SIGTERM):
        with contextlib.suppress(NotImplementedError):
            loop.add_signal_handler(sig, stop.set)

    async with Tracker(config) as tracker:
        runner = await start_server(tracker)
        runtime: TrackerMqttRuntime | None = None
        try:
            if use_mqtt:
                runtime = TrackerMqttRuntime(loop=loop, on_message=tracker.handle_message, logger=_LOG)
                try:
                    await loop.run_in_executor(None, runtime.start, config)
                except OSError:
                    # Stations will read as offline until the broker is reachable.
                    _LOG.exception("MQTT connect to %s:%s failed", config.broker_host, config.broker_port)
            await stop.wait()
        finally:
            if runtime is not None:
                await loop.run_in_executor(None, runtime.stop)
            await runner.cleanup()


def main(argv: Sequence[str] | None = None) -> int:
    args = _parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        config = _config_from_args(args)
    except TrackerConfigError as exc:
        _LOG.error("Invalid configuration: %s", exc)
        return 2

    try:
        with contextlib.suppress(KeyboardInterrupt):
            asyncio.run(_serve(config, use_mqtt=not args.no_mqtt))
    except OSError as exc:
        _LOG.error("Observer server failed on %s:%s: %s", config.http_host, config.http_port, exc)
        return 2
    return 0
