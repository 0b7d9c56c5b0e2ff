"""Fixed-window request limiter.

Each key gets a counter and a window start. The first hit after the window
has aged past ``window_seconds`` starts a fresh window. Up to ``limit`` hits
are admitted per window, all of them possibly at its very start; there is
no smoothing.

Every key has its own lock, so the reset-and-increment is one step per key
and unrelated keys never contend.
"""

import threading
import time
from dataclasses import dataclass
from typing import Callable

import structlog

from commerce.errors import RateLimited

logger = structlog.get_logger(__name__)


@dataclass
class _Window:
    started_at: float
    count: int
    lock: threading.Lock


class FixedWindowLimiter:
    def __init__(self, limit: int = 60, window_seconds: float = 60.0, clock: Callable[[], float] = time.monotonic):
        if limit < 1:
            raise ValueError("limit must be at least 1")
        if window_seconds <= 0:
            raise ValueError("window_seconds must be positive")
        self.limit = limit
        self.window_seconds = window_seconds
        self.clock = clock
        self._windows: dict[str, _Window] = {}
        self._registry_lock = threading.Lock()

    def _window_for(self, key: str) -> _Window:
        window = self._windows.get(key)
        if window is None:
            with self._registry_lock:
                window = self._windows.get(key)
                if window is None:
                    window = _Window(started_at=self.clock(), count=0, lock=threading.Lock())
                    self._windows[key] = window
        return window

    def allow(self, key: str) -> bool:
        """Count one request against ``key``; False once the window is full."""
        window = self._window_for(key)
        with window.lock:
            now = self.clock()
            if now - window.started_at >= self.window_seconds:
                window.started_at = now
                window.count = 0
            if window.count >= self.limit:
                return False
            window.count += 1
            return True

    def enforce(self, key: str) -> None:
        if not self.allow(key):
            logger.info("admission_denied", key=key, limit=self.limit)
            raise RateLimited(key)

    def remaining(self, key: str) -> int:
        window = self._windows.get(key)
        if window is None:
            return self.limit
        with window.lock:
            if self.clock() - window.started_at >= self.window_seconds:
                return self.limit
            return max(0, self.limit - window.count)

    def reset(self) -> None:
        with self._registry_lock:
            self._windows.clear()
