"""
Token bucket in front of the RPC transport.

Public endpoints throttle bursts; the pipeline issues one request per
signature, so an optional requests-per-second cap is applied before every
send. Blocking and thread-safe so it also covers the worker pool.
"""

from __future__ import annotations

import threading
import time
from typing import Callable


class RateLimiter:
    """Token bucket: up to `rate` requests per second, burst of `burst` (default: rate)."""

    def __init__(
        self,
        rate: float,
        burst: float | None = None,
        *,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        if rate <= 0:
            raise ValueError("rate must be positive")
        self._rate = float(rate)
        self._capacity = float(burst if burst is not None else max(rate, 1.0))
        self._tokens = self._capacity
        self._clock = clock
        self._sleep = sleep
        self._last = clock()
        self._lock = threading.Lock()

    def _refill(self) -> None:
        now = self._clock()
        elapsed = now - self._last
        self._last = now
        self._tokens = min(self._capacity, self._tokens + elapsed * self._rate)

    def acquire(self) -> float:
        """Block until a token is available. Returns seconds spent waiting."""
        waited = 0.0
        while True:
            with self._lock:
                self._refill()
                if self._tokens >= 1.0:
                    self._tokens -= 1.0
                    return waited
                delay = (1.0 - self._tokens) / self._rate
            self._sleep(delay)
            waited += delay
