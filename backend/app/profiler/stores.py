"""Thread-safe timer stores keyed by project and by (project, mojo execution)."""

from __future__ import annotations

import logging
import threading
from typing import Callable, Dict, Generic, Hashable, Iterator, List, NamedTuple, Optional, Set, Tuple, TypeVar

from ..models import ExecutionStep, Project
from .stopwatch import Timer

LOGGER = logging.getLogger(__name__)

K = TypeVar("K", bound=Hashable)


class _Stripe:
    __slots__ = ("lock", "timers")

    def __init__(self) -> None:
        self.lock = threading.Lock()
        self.timers: Dict[Hashable, Tuple[int, Timer]] = {}


class TimerStore(Generic[K]):
    """Maps keys to timers behind a fixed set of independently locked stripes.

    Lookup, lazy creation and the start/stop transition for a key happen
    under the one lock that owns that key, so racing starts on an absent key
    still produce a single timer while unrelated keys rarely contend.
    """

    def __init__(self, stripes: int = 16, timer_factory: Callable[[], Timer] = Timer) -> None:
        if stripes < 1:
            raise ValueError("stripes must be >= 1")
        self._stripes = [_Stripe() for _ in range(stripes)]
        self._timer_factory = timer_factory
        self._sequence_lock = threading.Lock()
        self._sequence = 0

    def _stripe_for(self, key: K) -> _Stripe:
        return self._stripes[hash(key) % len(self._stripes)]

    def _next_sequence(self) -> int:
        with self._sequence_lock:
            self._sequence += 1
            return self._sequence

    def start(self, key: K) -> Timer:
        """Get or create the timer for ``key`` and start it.

        Starting a running timer moves its start instant forward instead of
        raising.
        """

        stripe = self._stripe_for(key)
        with stripe.lock:
            entry = stripe.timers.get(key)
            if entry is None:
                entry = (self._next_sequence(), self._timer_factory())
                stripe.timers[key] = entry
            timer = entry[1]
            if timer.is_running:
                LOGGER.debug("Timer for %s already running, restarting it", key)
                timer.restart()
            else:
                timer.start()
            return timer

    def stop(self, key: K) -> Optional[Timer]:
        """Stop the timer for ``key`` if one exists; never creates a timer."""

        stripe = self._stripe_for(key)
        with stripe.lock:
            entry = stripe.timers.get(key)
            if entry is None:
                LOGGER.debug("No timer started for %s, ignoring stop", key)
                return None
            timer = entry[1]
            if timer.is_running:
                timer.stop()
            else:
                LOGGER.debug("Timer for %s already stopped", key)
            return timer

    def get(self, key: K) -> Optional[Timer]:
        stripe = self._stripe_for(key)
        with stripe.lock:
            entry = stripe.timers.get(key)
        return entry[1] if entry is not None else None

    def __contains__(self, key: object) -> bool:
        return self.get(key) is not None  # type: ignore[arg-type]

    def __len__(self) -> int:
        total = 0
        for stripe in self._stripes:
            with stripe.lock:
                total += len(stripe.timers)
        return total

    def __bool__(self) -> bool:
        return len(self) > 0

    def items(self) -> List[Tuple[K, Timer]]:
        """Return ``(key, timer)`` pairs in the order keys were first started."""

        collected: List[Tuple[int, K, Timer]] = []
        for stripe in self._stripes:
            with stripe.lock:
                collected.extend((seq, key, timer) for key, (seq, timer) in stripe.timers.items())
        collected.sort(key=lambda item: item[0])
        return [(key, timer) for _, key, timer in collected]

    def __iter__(self) -> Iterator[K]:
        return iter([key for key, _ in self.items()])

    def elapsed_millis(self) -> List[Tuple[K, int]]:
        """Return ``(key, elapsed milliseconds)`` pairs in first-started order."""

        return [(key, timer.elapsed_millis()) for key, timer in self.items()]

    def running(self) -> Set[K]:
        """Keys whose timer has not been stopped yet."""

        return {key for key, timer in self.items() if timer.is_running}

    def clear(self) -> None:
        for stripe in self._stripes:
            with stripe.lock:
                stripe.timers.clear()


class ProjectTimerStore(TimerStore[Project]):
    """One timer per project."""


class StepKey(NamedTuple):
    project: Project
    step: ExecutionStep

    def __str__(self) -> str:
        return f"{self.project.coordinate} {self.step}"


class StepTimerStore(TimerStore[StepKey]):
    """One timer per (project, mojo execution) pair, held in a single flat map."""

    def start_step(self, project: Project, step: ExecutionStep) -> Timer:
        return self.start(StepKey(project, step))

    def stop_step(self, project: Project, step: ExecutionStep) -> Optional[Timer]:
        return self.stop(StepKey(project, step))

    def get_step(self, project: Project, step: ExecutionStep) -> Optional[Timer]:
        return self.get(StepKey(project, step))

    def row(self, project: Project) -> Dict[ExecutionStep, Timer]:
        """Timers of every mojo execution recorded for ``project``."""

        return {key.step: timer for key, timer in self.items() if key.project == project}

    def projects(self) -> List[Project]:
        seen: Dict[Project, None] = {}
        for key, _ in self.items():
            seen.setdefault(key.project, None)
        return list(seen)

    def triples(self) -> List[Tuple[Project, ExecutionStep, int]]:
        return [(key.project, key.step, timer.elapsed_millis()) for key, timer in self.items()]
