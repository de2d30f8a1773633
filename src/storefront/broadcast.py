"""Restaurant status broadcast: a registry of SSE subscribers.

Each subscriber owns a bounded asyncio queue. Publishing never waits: a
subscriber that falls behind loses its oldest pending update, since only
the latest status matters. Subscribers deregister when their stream ends,
including on client disconnect.
"""

import asyncio
import json
from collections.abc import AsyncIterator
from uuid import uuid4

import structlog

logger = structlog.get_logger(__name__)

HEARTBEAT_SECONDS = 15.0


def format_sse(payload: dict, event: str = "status") -> str:
    return f"event: {event}\ndata: {json.dumps(payload, default=str)}\n\n"


class StatusBroadcaster:
    def __init__(self, max_queue_size: int = 8) -> None:
        self.max_queue_size = max_queue_size
        self._subscribers: dict[str, asyncio.Queue] = {}

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    def subscribe(self, subscriber_id: str | None = None) -> tuple[str, asyncio.Queue]:
        subscriber_id = subscriber_id or uuid4().hex
        queue: asyncio.Queue = asyncio.Queue(maxsize=self.max_queue_size)
        self._subscribers[subscriber_id] = queue
        logger.debug("Status subscriber added", subscriber_id=subscriber_id)
        return subscriber_id, queue

    def unsubscribe(self, subscriber_id: str) -> bool:
        removed = self._subscribers.pop(subscriber_id, None) is not None
        if removed:
            logger.debug("Status subscriber removed", subscriber_id=subscriber_id)
        return removed

    def publish(self, payload: dict) -> int:
        """Queue ``payload`` for every subscriber. Returns the fan-out count."""
        for subscriber_id, queue in list(self._subscribers.items()):
            if queue.full():
                queue.get_nowait()
                logger.warning("Status subscriber lagging, dropped stale update", subscriber_id=subscriber_id)
            queue.put_nowait(payload)
        return len(self._subscribers)

    async def stream(
        self,
        initial: dict | None = None,
        heartbeat: float = HEARTBEAT_SECONDS,
    ) -> AsyncIterator[str]:
        """Yield SSE frames until the consumer goes away.

        The subscription is opened on first iteration, so a stream that is
        never consumed leaves nothing registered.
        """
        subscriber_id, queue = self.subscribe()
        try:
            if initial is not None:
                yield format_sse(initial)
            while True:
                try:
                    payload = await asyncio.wait_for(queue.get(), timeout=heartbeat)
                except TimeoutError:
                    yield ": keep-alive\n\n"
                    continue
                yield format_sse(payload)
        finally:
            self.unsubscribe(subscriber_id)
