"""
Rate limiter — fixed-window request limit per client.

Each client key (usually the remote address) gets ``max_requests``
within a window of ``window_seconds``. The window starts at the
client's first request and resets once it has elapsed. Expired windows
are swept out at most once per window length.

This is the only shared mutable state in the process, so every access
goes through one lock.
"""

from __future__ import annotations

import logging
import math
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

logger = logging.getLogger(__name__)


@dataclass
class RateDecision:
    """Outcome of one ``check`` call."""

    allowed: bool
    remaining: int
    retry_after: int = 0


@dataclass
class _Window:
    started: float
    count: int = 0


@dataclass
class RateLimiter:
    """In-memory fixed-window limiter.

    Args:
        max_requests: Requests allowed per window.
        window_seconds: Window length.
        clock: Monotonic time source, injectable for tests.
    """

    max_requests: int = 100
    window_seconds: float = 60.0
    clock: Callable[[], float] = time.monotonic

    _windows: dict[str, _Window] = field(default_factory=dict, repr=False)
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)
    _last_sweep: float = field(default=float("-inf"), repr=False)
    total_rejections: int = 0

    def check(self, key: str) -> RateDecision:
        """Count one request for ``key`` and say whether it may proceed."""
        now = self.clock()
        with self._lock:
            if now - self._last_sweep >= self.window_seconds:
                self._sweep(now)

            window = self._windows.get(key)
            if window is None or now - window.started >= self.window_seconds:
                window = _Window(started=now)
                self._windows[key] = window

            if window.count >= self.max_requests:
                self.total_rejections += 1
                retry = math.ceil(self.window_seconds - (now - window.started))
                logger.warning("Rate limit exceeded for %s (retry in %ds)", key, retry)
                return RateDecision(allowed=False, remaining=0, retry_after=max(retry, 1))

            window.count += 1
            return RateDecision(allowed=True, remaining=self.max_requests - window.count)

    def _sweep(self, now: float) -> None:
        expired = [k for k, w in self._windows.items() if now - w.started >= self.window_seconds]
        for k in expired:
            del self._windows[k]
        self._last_sweep = now
        if expired:
            logger.debug("Evicted %d expired rate-limit windows", len(expired))

    def reset(self, key: str | None = None) -> None:
        with self._lock:
            if key is None:
                self._windows.clear()
            else:
                self._windows.pop(key, None)

    def to_dict(self) -> dict[str, Any]:
        with self._lock:
            clients = len(self._windows)
        return {
            "max_requests": self.max_requests,
            "window_seconds": self.window_seconds,
            "clients": clients,
            "total_rejections": self.total_rejections,
        }
