#!/usr/bin/env python3
"""Publish simulated station traffic for local testing.

Sends heartbeats for every station and walks a few items through the
station sequence, optionally injecting an out-of-order reading so the
alert path can be observed on the dashboard.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
import time
from datetime import UTC, datetime
from pathlib import Path
from typing import Any, cast

# Allow running from repo root without installing the package.
_repo = Path(__file__).resolve().parent.parent
_src = _repo / "src"
if _src.is_dir():
    sys.path.insert(0, str(_src))

from coldtrack._mqtt import build_client_id  # noqa: E402
from coldtrack.config import TrackerConfig  # noqa: E402

try:
    import paho.mqtt.client as mqtt
except ImportError as exc:  # pragma: no cover - environment/setup issue
    raise SystemExit(
        "Missing dependency 'paho-mqtt'. Install with: pip install paho-mqtt",
    ) from exc

_LOG = logging.getLogger("simulate_stations")


def _parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Publish simulated coldtrack station traffic.")
    parser.add_argument("--items", type=int, default=3, help="Number of items to walk through the stations.")
    parser.add_argument("--delay", type=float, default=1.0, help="Seconds between readings.")
    parser.add_argument(
        "--skip",
        action="store_true",
        help="Make the last item skip a station to trigger an invalid-transition alert.",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logs.")
    return parser.parse_args()


def _publish(client: mqtt.Client, topic: str, payload: dict[str, Any]) -> None:
    body = json.dumps(payload)
    _LOG.info("%s %s", topic, body)
    client.publish(topic, body, qos=0).wait_for_publish()


def _main() -> int:
    args = _parse_args()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )
    config = TrackerConfig.from_env()
    stations = config.station_ids
    prefix = config.topic_prefix

    client = mqtt.Client(
        callback_api_version=cast(Any, mqtt).CallbackAPIVersion.VERSION2,
        client_id=build_client_id(),
    )
    if config.broker_username:
        client.username_pw_set(config.broker_username, config.broker_password)
    if config.broker_tls:
        client.tls_set()
    client.connect(config.broker_host, config.broker_port, keepalive=config.mqtt_keepalive)
    client.loop_start()

    try:
        for station in stations:
            _publish(client, f"{prefix}/{station}/heartbeat", {})

        for index in range(args.items):
            item_id = f"SIM-{index + 1:03d}"
            route = list(stations)
            if args.skip and index == args.items - 1 and len(route) > 2:
                route.pop(1)
            for station in route:
                payload = {"itemId": item_id, "timestamp": datetime.now(UTC).isoformat()}
                _publish(client, f"{prefix}/{station}/movement", payload)
                time.sleep(args.delay)
    except KeyboardInterrupt:
        pass
    finally:
        client.disconnect()
        client.loop_stop()
    return 0


if __name__ == "__main__":
    raise SystemExit(_main())
