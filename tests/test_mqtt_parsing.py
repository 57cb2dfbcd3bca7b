from __future__ import annotations

from datetime import UTC, datetime

import pytest

from coldtrack.exceptions import MalformedMessageError
from coldtrack.ingestion.mqtt import parse_message, parse_topic
from coldtrack.models.station import StationStatus
from coldtrack.state.events import EventKind, HeartbeatEvent, MovementEvent, StatusUpdateEvent

PREFIX = "coldchain"


def test_movement_payload_parsed() -> None:
    event = parse_message(
        "coldchain/production/movement",
        b'{"itemId": "A1", "timestamp": "2026-01-01T10:00:00Z"}',
        prefix=PREFIX,
    )

    assert isinstance(event, MovementEvent)
    assert event.station == "production"
    assert event.item_id == "A1"
    assert event.timestamp == datetime(2026, 1, 1, 10, 0, tzinfo=UTC)


def test_movement_accepts_firmware_tag_id_key_and_missing_timestamp() -> None:
    event = parse_message("coldchain/cold_storage/movement", '{"tag_id": "04:A2:3B"}', prefix=PREFIX)

    assert isinstance(event, MovementEvent)
    assert event.item_id == "04:A2:3B"
    assert event.timestamp is None


def test_topic_station_overrides_payload_station() -> None:
    event = parse_message(
        "coldchain/shipping/movement",
        b'{"itemId": "A1", "station": "production"}',
        prefix=PREFIX,
    )

    assert event.station == "shipping"


def test_empty_heartbeat_payload_accepted() -> None:
    event = parse_message("coldchain/shipping/heartbeat", b"", prefix=PREFIX)

    assert isinstance(event, HeartbeatEvent)
    assert event.kind == EventKind.HEARTBEAT


def test_status_payload_parsed() -> None:
    event = parse_message("coldchain/shipping/status", b'{"status": "offline"}', prefix=PREFIX)

    assert isinstance(event, StatusUpdateEvent)
    assert event.status == StationStatus.OFFLINE


def test_parse_topic_splits_station_and_kind() -> None:
    assert parse_topic("coldchain/cold_storage/HEARTBEAT", PREFIX) == ("cold_storage", EventKind.HEARTBEAT)


@pytest.mark.parametrize(
    ("topic", "payload"),
    [
        ("other/production/movement", b'{"itemId": "A1"}'),
        ("coldchain/production", b'{"itemId": "A1"}'),
        ("coldchain/production/movement/extra", b'{"itemId": "A1"}'),
        ("coldchain//movement", b'{"itemId": "A1"}'),
        ("coldchain/production/teleport", b'{"itemId": "A1"}'),
        ("coldchain/production/movement", b"not json"),
        ("coldchain/production/movement", b'["A1"]'),
        ("coldchain/production/movement", b"{}"),
        ("coldchain/production/movement", b'{"itemId": "  "}'),
        ("coldchain/production/movement", b'{"itemId": "A1", "timestamp": "yesterday"}'),
        ("coldchain/production/movement", b'{"itemId": "A1", "timestamp": Infinity}'),
        ("coldchain/production/movement", b'{"itemId": "A1", "timestamp": 1e300}'),
        ("coldchain/production/movement", b'{"itemId": "A1", "timestamp": 99999999999999999}'),
        ("coldchain/production/movement", b'{"itemId": "A\xff1"}'),
        ("coldchain/production/status", b'{"status": "sleeping"}'),
        ("coldchain/production/status", b"{}"),
    ],
)
def test_malformed_messages_rejected(topic: str, payload: bytes) -> None:
    with pytest.raises(MalformedMessageError) as excinfo:
        parse_message(topic, payload, prefix=PREFIX)
    assert excinfo.value.topic == topic
