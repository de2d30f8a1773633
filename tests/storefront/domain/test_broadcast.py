"""Tests for the restaurant status broadcaster."""

import asyncio
import json

from storefront.broadcast import StatusBroadcaster, format_sse


def _decode(frame: str) -> dict:
    lines = frame.strip().splitlines()
    assert lines[0] == "event: status"
    return json.loads(lines[1].removeprefix("data: "))


class TestFormatSse:
    def test_frame_layout(self):
        frame = format_sse({"is_open": True})
        assert frame == 'event: status\ndata: {"is_open": true}\n\n'


class TestSubscriptions:
    def test_subscribe_and_unsubscribe(self):
        broadcaster = StatusBroadcaster()
        subscriber_id, _ = broadcaster.subscribe()
        assert broadcaster.subscriber_count == 1
        assert broadcaster.unsubscribe(subscriber_id) is True
        assert broadcaster.unsubscribe(subscriber_id) is False
        assert broadcaster.subscriber_count == 0

    def test_publish_fans_out(self):
        broadcaster = StatusBroadcaster()
        _, first = broadcaster.subscribe()
        _, second = broadcaster.subscribe()

        delivered = broadcaster.publish({"is_open": True})

        assert delivered == 2
        assert first.get_nowait() == {"is_open": True}
        assert second.get_nowait() == {"is_open": True}

    def test_lagging_subscriber_drops_oldest(self):
        broadcaster = StatusBroadcaster(max_queue_size=2)
        _, queue = broadcaster.subscribe()
        for n in range(3):
            broadcaster.publish({"n": n})
        assert queue.get_nowait() == {"n": 1}
        assert queue.get_nowait() == {"n": 2}


class TestStream:
    def test_stream_yields_initial_then_updates(self):
        async def scenario():
            broadcaster = StatusBroadcaster()
            frames = broadcaster.stream(initial={"is_open": False})

            first = await frames.__anext__()
            broadcaster.publish({"is_open": True})
            second = await frames.__anext__()
            await frames.aclose()
            return broadcaster, first, second

        broadcaster, first, second = asyncio.run(scenario())
        assert _decode(first) == {"is_open": False}
        assert _decode(second) == {"is_open": True}
        assert broadcaster.subscriber_count == 0

    def test_idle_stream_sends_keep_alive(self):
        async def scenario():
            broadcaster = StatusBroadcaster()
            frames = broadcaster.stream(heartbeat=0.01)
            frame = await frames.__anext__()
            await frames.aclose()
            return frame

        assert asyncio.run(scenario()) == ": keep-alive\n\n"

    def test_unconsumed_stream_registers_nothing(self):
        broadcaster = StatusBroadcaster()
        broadcaster.stream(initial={"is_open": True})
        assert broadcaster.subscriber_count == 0

    def test_subscription_lives_while_streaming(self):
        async def scenario():
            broadcaster = StatusBroadcaster()
            frames = broadcaster.stream(initial={"is_open": True})
            await frames.__anext__()
            during = broadcaster.subscriber_count
            await frames.aclose()
            return during, broadcaster.subscriber_count

        assert asyncio.run(scenario()) == (1, 0)
