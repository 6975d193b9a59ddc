"""
Per-client request limiting.

Counters live in process memory, so limits are not shared between
server instances. ``RateLimiter`` is the seam for swapping in a
distributed implementation.
"""

import logging
import threading
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable, Dict

logger = logging.getLogger(__name__)


class RateLimiter(ABC):
    """Decides whether a client identifier may make another request."""

    @abstractmethod
    def allow(self, identifier: str) -> bool:
        """Record a request for ``identifier`` and return whether it is allowed."""

    def retry_after(self, identifier: str) -> int:
        """Seconds until ``identifier`` may retry. Defaults to zero."""
        return 0

    @property
    def limit(self) -> int:
        return 0


@dataclass
class WindowRecord:
    """Request count for one client within its current window."""
    count: int
    reset_time: float


class FixedWindowRateLimiter(RateLimiter):
    """
    Fixed window limiter.

    The first request from a client opens a window of ``window_seconds``.
    Up to ``max_requests`` are allowed inside it; once the window elapses
    the next request opens a fresh one.
    """

    def __init__(
        self,
        max_requests: int = 60,
        window_seconds: float = 60.0,
        clock: Callable[[], float] = time.monotonic
    ):
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._clock = clock
        self._records: Dict[str, WindowRecord] = {}
        self._lock = threading.Lock()

    @property
    def limit(self) -> int:
        return self.max_requests

    def allow(self, identifier: str) -> bool:
        now = self._clock()
        with self._lock:
            record = self._records.get(identifier)

            if record is None or now > record.reset_time:
                self._records[identifier] = WindowRecord(count=1, reset_time=now + self.window_seconds)
                return True

            if record.count >= self.max_requests:
                return False

            record.count += 1
            return True

    def retry_after(self, identifier: str) -> int:
        with self._lock:
            record = self._records.get(identifier)
            if record is None:
                return 0
            return max(0, int(record.reset_time - self._clock()) + 1)

    def remaining(self, identifier: str) -> int:
        """Requests left in the client's current window."""
        now = self._clock()
        with self._lock:
            record = self._records.get(identifier)
            if record is None or now > record.reset_time:
                return self.max_requests
            return max(0, self.max_requests - record.count)

    def cleanup_expired(self) -> int:
        """Drop records whose window has elapsed. Returns how many were removed."""
        now = self._clock()
        with self._lock:
            expired = [key for key, record in self._records.items() if now > record.reset_time]
            for key in expired:
                del self._records[key]

        if expired:
            logger.debug(f"Cleaned up rate limit data for {len(expired)} expired clients")
        return len(expired)
