"""Per-key mutual exclusion for order and agent writes.

Keys are always acquired in sorted order so that two operations holding
overlapping key sets cannot deadlock.
"""

import threading
from contextlib import contextmanager


def order_key(order_id) -> str | None:
    return f"order:{order_id}" if order_id else None


def agent_key(agent_id) -> str | None:
    return f"agent:{agent_id}" if agent_id else None


def phone_key(phone) -> str | None:
    return f"phone:{phone}" if phone else None


class KeyedLocks:
    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._locks: dict[str, threading.RLock] = {}

    def _lock_for(self, key: str) -> threading.RLock:
        with self._guard:
            lock = self._locks.get(key)
            if lock is None:
                lock = self._locks[key] = threading.RLock()
            return lock

    @contextmanager
    def hold(self, *keys):
        """Hold the locks for every non-empty key for the block's duration."""
        acquired = []
        try:
            for key in sorted({k for k in keys if k}):
                lock = self._lock_for(key)
                lock.acquire()
                acquired.append(lock)
            yield
        finally:
            for lock in reversed(acquired):
                lock.release()


locks = KeyedLocks()
