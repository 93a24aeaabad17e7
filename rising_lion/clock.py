"""
Clocks
=======
Wall-time sources for the timers that run on real seconds
(AA gun fire cadence and the game-over dwell). Tick-based timers
use the simulation's tick counter instead.
"""

import time
from typing import Protocol


class Clock(Protocol):
    def now(self) -> float:
        """Seconds from an arbitrary, monotonic origin."""
        ...


class SystemClock:
    """Monotonic wall clock."""

    def now(self) -> float:
        return time.monotonic()


class ManualClock:
    """Clock that only moves when told to. Used by tests and replays."""

    def __init__(self, start: float = 0.0):
        self._now = start

    def now(self) -> float:
        return self._now

    def advance(self, seconds: float) -> None:
        if seconds < 0:
            raise ValueError('clock cannot run backwards')
        self._now += seconds
