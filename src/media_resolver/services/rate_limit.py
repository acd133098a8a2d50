"""Per-source fixed-window request admission."""

from __future__ import annotations

import threading
import time
from collections.abc import Callable
from dataclasses import dataclass

from media_resolver.errors import RateLimitExceeded

DEFAULT_BUDGET = 10
DEFAULT_WINDOW_SECONDS = 60.0


@dataclass
class _Window:
    count: int
    reset_at: float


class RateLimiter:
    """Process-wide admission control shared by every adapter.

    One window (count + reset timestamp) is tracked per source name. Construct a
    single instance at startup and inject it; windows are only reset by expiry.
    """

    def __init__(
        self,
        *,
        budget: int = DEFAULT_BUDGET,
        window_seconds: float = DEFAULT_WINDOW_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._budget = budget
        self._window_seconds = window_seconds
        self._clock = clock
        self._windows: dict[str, _Window] = {}
        self._lock = threading.Lock()

    @property
    def budget(self) -> int:
        return self._budget

    @property
    def window_seconds(self) -> float:
        return self._window_seconds

    def admit(self, source: str) -> bool:
        now = self._clock()
        with self._lock:
            window = self._windows.get(source)
            if window is None or now > window.reset_at:
                self._windows[source] = _Window(count=1, reset_at=now + self._window_seconds)
                return True

            if window.count >= self._budget:
                return False

            window.count += 1
            return True

    def require(self, source: str) -> None:
        """Admit one request for ``source`` or raise ``RateLimitExceeded``."""
        if not self.admit(source):
            raise RateLimitExceeded(source)


__all__ = ["DEFAULT_BUDGET", "DEFAULT_WINDOW_SECONDS", "RateLimiter"]
