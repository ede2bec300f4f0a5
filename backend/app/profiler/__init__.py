"""Build profiling: timers, timer stores and the lifecycle event collector."""

from .stopwatch import Timer, TimerStateError
from .stores import ProjectTimerStore, StepKey, StepTimerStore, TimerStore
from .collector import TimingCollector

__all__ = [
    "Timer",
    "TimerStateError",
    "TimerStore",
    "ProjectTimerStore",
    "StepKey",
    "StepTimerStore",
    "TimingCollector",
]
