from __future__ import annotations

import asyncio

import pytest

from coldtrack._mqtt import TrackerMqttRuntime, build_client_id, subscription_topic


def test_subscription_covers_whole_prefix() -> None:
    assert subscription_topic("coldchain") == "coldchain/#"


def test_client_ids_are_unique() -> None:
    first, second = build_client_id(), build_client_id()

    assert first.startswith("coldtrack-")
    assert first != second


def test_stop_without_start_is_noop() -> None:
    runtime = TrackerMqttRuntime(loop=asyncio.new_event_loop(), on_message=lambda _t, _p: None)
    try:
        runtime.stop()
        assert not runtime.is_running
    finally:
        runtime._loop.close()  # noqa: SLF001


@pytest.mark.asyncio
async def test_messages_from_network_thread_land_on_loop() -> None:
    loop = asyncio.get_running_loop()
    received: list[tuple[str, bytes, asyncio.AbstractEventLoop]] = []

    def on_message(topic: str, payload: bytes) -> None:
        received.append((topic, payload, asyncio.get_running_loop()))

    runtime = TrackerMqttRuntime(loop=loop, on_message=on_message)
    await loop.run_in_executor(None, runtime._dispatch, "coldchain/production/heartbeat", b"{}")  # noqa: SLF001

    for _ in range(100):
        if received:
            break
        await asyncio.sleep(0.01)

    assert received == [("coldchain/production/heartbeat", b"{}", loop)]
