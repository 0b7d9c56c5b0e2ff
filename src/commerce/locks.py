"""Keyed lock registry serialising writers per stock row, cart and order.

Keys are namespaced strings (``stock:<product_id>``, ``cart:<customer_id>``,
``order:<order_id>``). ``hold`` always acquires in sorted key order, and
callers that widen their lock set must only add keys that sort after the
ones they already hold.
"""

import threading
from contextlib import contextmanager


def stock_key(product_id) -> str:
    return f"stock:{product_id}"


def cart_key(customer_id) -> str:
    return f"cart:{customer_id}"


def order_key(order_id) -> str:
    return f"order:{order_id}"


class KeyedLocks:
    """Lazily created re-entrant lock per key."""

    def __init__(self) -> None:
        self._locks: dict[str, threading.RLock] = {}
        self._registry_lock = threading.Lock()

    def lock_for(self, key: str) -> threading.RLock:
        with self._registry_lock:
            lock = self._locks.get(key)
            if lock is None:
                lock = threading.RLock()
                self._locks[key] = lock
            return lock

    @contextmanager
    def hold(self, *keys: str):
        acquired = []
        try:
            for key in sorted(set(keys)):
                lock = self.lock_for(key)
                lock.acquire()
                acquired.append(lock)
            yield
        finally:
            for lock in reversed(acquired):
                lock.release()


locks = KeyedLocks()
