"""In-process lock registry serialising ledger mutations per key."""

import threading
from contextlib import contextmanager
from typing import Iterable, Iterator


class SkuLockRegistry:
    """Hands out one lock per key (SKU id or `code:<external code>`).

    `hold()` acquires every requested key in sorted order so two callers
    asking for overlapping key sets cannot deadlock.
    """

    def __init__(self):
        self._guard = threading.Lock()
        self._locks: dict[str, threading.Lock] = {}

    def _lock_for(self, key: str) -> threading.Lock:
        with self._guard:
            lock = self._locks.get(key)
            if lock is None:
                lock = threading.Lock()
                self._locks[key] = lock
            return lock

    @contextmanager
    def hold(self, keys: Iterable[str]) -> Iterator[None]:
        acquired = []
        try:
            for key in sorted(set(keys)):
                lock = self._lock_for(key)
                lock.acquire()
                acquired.append(lock)
            yield
        finally:
            for lock in reversed(acquired):
                lock.release()

    def __len__(self) -> int:
        with self._guard:
            return len(self._locks)


sku_locks = SkuLockRegistry()
