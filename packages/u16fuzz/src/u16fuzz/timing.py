from __future__ import annotations
import time
from typing import Callable, Optional

__all__ = ["UPDATE_RATE_MS", "TimingGate"]

UPDATE_RATE_MS = 200


class TimingGate:
    """Opens at most once per `interval_ms` of wall-clock time (progress display only)."""

    def __init__(self, interval_ms: int = UPDATE_RATE_MS,
                 clock: Optional[Callable[[], float]] = None) -> None:
        if interval_ms < 0:
            raise ValueError("interval_ms must be >= 0")
        self.interval = interval_ms / 1000.0
        self._clock = clock or time.monotonic
        self._last = self._clock()

    def ready(self) -> bool:
        now = self._clock()
        if now - self._last > self.interval:
            self._last = now
            return True
        return False
