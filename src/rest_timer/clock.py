"""Monotonic time sources for the rest timer."""

from __future__ import annotations

import time
from typing import Protocol


class Clock(Protocol):
    def now(self) -> float:
        """Seconds on a monotonic scale. Only differences are meaningful."""
        ...


class MonotonicClock:
    """Default clock backed by time.monotonic(); unaffected by wall-clock changes."""

    def now(self) -> float:
        return time.monotonic()
