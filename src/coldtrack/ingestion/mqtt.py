"""MQTT message decoding.

Translates a raw ``(topic, payload)`` pair into a normalized inbound
event. Topics follow ``<prefix>/<station-id>/<type>``.
"""

from __future__ import annotations

import json
from typing import Any

from pydantic import ValidationError

from coldtrack.exceptions import MalformedMessageError
from coldtrack.state.events import INBOUND_EVENT_ADAPTER, EventKind, InboundEvent


def parse_topic(topic: str, prefix: str) -> tuple[str, EventKind]:
    """Split *topic* into ``(station_id, kind)``."""
    parts = topic.split("/")
    if len(parts) != 3 or parts[0] != prefix:
        raise MalformedMessageError(f"Unexpected topic layout: {topic!r}", topic=topic)
    station, kind_text = parts[1].strip(), parts[2].strip().lower()
    if not station:
        raise MalformedMessageError("Topic has an empty station segment", topic=topic)
    try:
        kind = EventKind(kind_text)
    except ValueError as exc:
        raise MalformedMessageError(f"Unknown message type: {kind_text!r}", topic=topic) from exc
    return station, kind


def decode_payload(payload: bytes | str, *, topic: str = "") -> dict[str, Any]:
    """Decode a JSON object payload; an empty payload is an empty object."""
    if isinstance(payload, bytes):
        try:
            text = payload.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise MalformedMessageError("Payload is not valid UTF-8", topic=topic) from exc
    else:
        text = payload
    text = text.strip()
    if not text:
        return {}
    try:
        parsed = json.loads(text)
    except json.JSONDecodeError as exc:
        raise MalformedMessageError(f"Payload is not valid JSON: {exc}", topic=topic) from exc
    if not isinstance(parsed, dict):
        raise MalformedMessageError("Payload is not a JSON object", topic=topic)
    return parsed


def parse_message(topic: str, payload: bytes | str, *, prefix: str) -> InboundEvent:
    """Build the inbound event carried by one MQTT message.

    Raises
    ------
    MalformedMessageError
        For an unexpected topic, unknown message type, undecodable
        payload, or a payload missing required fields.
    """
    station, kind = parse_topic(topic, prefix)
    data = decode_payload(payload, topic=topic)
    # Topic segments win over anything the payload claims.
    data.update({"kind": kind, "station": station})
    try:
        return INBOUND_EVENT_ADAPTER.validate_python(data)
    except ValidationError as exc:
        raise MalformedMessageError(
            f"Invalid {kind} payload: {exc.error_count()} error(s): {exc.errors()[0]['msg']}",
            topic=topic,
        ) from exc
