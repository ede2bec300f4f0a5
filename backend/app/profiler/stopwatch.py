"""Wall-clock stopwatch used for every project and mojo timer."""

from __future__ import annotations

import math
from time import perf_counter
from typing import Callable, Optional


class TimerStateError(RuntimeError):
    """Raised when a timer is started twice or stopped while idle."""


class Timer:
    """Accumulating stopwatch: idle until started, then running or stopped.

    A timer carries no lock of its own. Stores mutate it only while holding
    the lock that guards its key.
    """

    def __init__(self, clock: Callable[[], float] = perf_counter) -> None:
        self._clock = clock
        self._running = False
        self._accumulated = 0.0
        self._started_at: Optional[float] = None

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def has_started(self) -> bool:
        return self._started_at is not None

    def start(self) -> "Timer":
        if self._running:
            raise TimerStateError("timer is already running")
        self._running = True
        self._started_at = self._clock()
        return self

    def restart(self) -> "Timer":
        """Move the start instant of a running timer to now."""

        if not self._running:
            raise TimerStateError("timer is not running")
        self._started_at = self._clock()
        return self

    def stop(self) -> "Timer":
        if not self._running:
            raise TimerStateError("timer is already stopped")
        self._accumulated += self._clock() - self._started_at
        self._running = False
        return self

    @property
    def elapsed(self) -> float:
        """Elapsed seconds, including the in-flight interval while running."""

        if self._running:
            return self._accumulated + (self._clock() - self._started_at)
        return self._accumulated

    def elapsed_millis(self) -> int:
        """Whole milliseconds; any positive gap reports at least 1."""

        seconds = self.elapsed
        if seconds <= 0:
            return 0
        return max(1, math.floor(seconds * 1000.0))

    def __repr__(self) -> str:
        state = "running" if self._running else ("stopped" if self.has_started else "idle")
        return f"Timer({state}, {self.elapsed * 1000.0:.3f} ms)"
