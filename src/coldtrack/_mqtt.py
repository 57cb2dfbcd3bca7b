"""Internal MQTT runtime.

Runs the paho-mqtt network loop on its own thread and hands every
received message to the asyncio loop; nothing here touches tracker
state directly.
"""

from __future__ import annotations

import asyncio
import logging
import secrets
from collections.abc import Callable
from typing import Any, cast

import paho.mqtt.client as mqtt

from coldtrack.config import TrackerConfig


def subscription_topic(prefix: str) -> str:
    return f"{prefix}/#"


def build_client_id() -> str:
    return f"coldtrack-{secrets.token_hex(4)}"


class TrackerMqttRuntime:
    """Threaded paho-mqtt runtime that forwards raw messages onto an asyncio loop."""

    def __init__(
        self,
        *,
        loop: asyncio.AbstractEventLoop,
        on_message: Callable[[str, bytes], Any],
        logger: logging.Logger | None = None,
    ) -> None:
        self._loop = loop
        self._on_message = on_message
        self._logger = logger or logging.getLogger(__name__)
        self._client: mqtt.Client | None = None
        self._running = False
        self._topic: str | None = None

    @property
    def is_running(self) -> bool:
        """Whether the MQTT runtime is actively running."""
        return self._running

    def _dispatch(self, topic: str, payload: bytes) -> None:
        if self._loop.is_closed():
            return
        self._loop.call_soon_threadsafe(self._on_message, topic, payload)

    def start(self, config: TrackerConfig) -> None:
        """Connect to the configured broker and subscribe to the topic tree."""
        self.stop()
        client_id = build_client_id()
        self._topic = subscription_topic(config.topic_prefix)
        self._logger.info(
            "MQTT runtime start host=%s port=%s topic=%s client_id=%s",
            config.broker_host,
            config.broker_port,
            self._topic,
            client_id,
        )

        client = mqtt.Client(
            callback_api_version=cast(Any, mqtt).CallbackAPIVersion.VERSION2,
            client_id=client_id,
            clean_session=True,
        )
        client.enable_logger(self._logger)
        if config.broker_username:
            client.username_pw_set(config.broker_username, config.broker_password)
        if config.broker_tls:
            client.tls_set()

        def on_connect(
            c: mqtt.Client,
            _userdata: Any,
            _flags: Any,
            reason_code: Any,
            _properties: Any,
        ) -> None:
            if reason_code.value != 0:
                self._logger.warning("MQTT connect failed: %s", reason_code)
                return
            self._logger.info("MQTT connected to %s:%s", config.broker_host, config.broker_port)
            if self._topic:
                c.subscribe(self._topic, qos=0)

        def on_subscribe(
            _c: mqtt.Client,
            _userdata: Any,
            _mid: int,
            reason_codes: Any,
            _properties: Any,
        ) -> None:
            for code in reason_codes:
                if code.is_failure:
                    self._logger.error("MQTT subscribe to %s failed: %s", self._topic, code)
                else:
                    self._logger.info("MQTT subscribed to %s", self._topic)

        def on_message(_c: mqtt.Client, _userdata: Any, msg: mqtt.MQTTMessage) -> None:
            self._logger.debug("Received PUBLISH topic=%s bytes=%d", msg.topic, len(msg.payload))
            self._dispatch(msg.topic, bytes(msg.payload))

        def on_disconnect(
            _client: mqtt.Client,
            _userdata: Any,
            _disconnect_flags: Any,
            reason_code: Any,
            _properties: Any,
        ) -> None:
            if self._running:
                self._logger.warning("MQTT disconnected: %s", reason_code)

        client.on_connect = on_connect
        client.on_subscribe = on_subscribe
        client.on_message = on_message
        client.on_disconnect = on_disconnect

        client.connect(config.broker_host, config.broker_port, keepalive=config.mqtt_keepalive)
        client.loop_start()

        self._client = client
        self._running = True
        self._logger.debug("MQTT network loop started")

    def stop(self) -> None:
        """Stop and disconnect current MQTT client if running."""
        client = self._client
        self._client = None
        was_running = self._running
        self._running = False
        self._topic = None

        if client is None:
            return
        try:
            if was_running:
                self._logger.debug("MQTT disconnect requested")
                client.disconnect()
        finally:
            client.loop_stop()
            self._logger.debug("MQTT network loop stopped")
