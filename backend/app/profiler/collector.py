"""Event-driven timing collector fed by build lifecycle notifications."""

from __future__ import annotations

import logging
from typing import Callable, Optional

from ..config import get_settings, is_profiling_enabled
from ..models import EventType, ExecutionEvent
from .stores import ProjectTimerStore, StepTimerStore

LOGGER = logging.getLogger(__name__)

_PROJECT_ENDS = frozenset({EventType.PROJECT_SUCCEEDED, EventType.PROJECT_FAILED})
_MOJO_ENDS = frozenset({EventType.MOJO_SUCCEEDED, EventType.MOJO_FAILED})


class TimingCollector:
    """Starts and stops project and mojo timers as lifecycle events arrive.

    ``enabled`` is evaluated on every event. While it returns ``False`` the
    stores are left untouched. Bookkeeping failures are logged and swallowed
    so profiling can never fail the build it observes.
    """

    def __init__(
        self,
        enabled: Optional[Callable[[], bool]] = None,
        projects: Optional[ProjectTimerStore] = None,
        steps: Optional[StepTimerStore] = None,
    ) -> None:
        self._enabled = enabled if enabled is not None else is_profiling_enabled
        if projects is None or steps is None:
            stripes = get_settings().profile_lock_stripes
            projects = projects if projects is not None else ProjectTimerStore(stripes)
            steps = steps if steps is not None else StepTimerStore(stripes)
        self.projects = projects
        self.steps = steps

    @property
    def enabled(self) -> bool:
        return bool(self._enabled())

    def on_event(self, event: ExecutionEvent) -> None:
        try:
            if not self.enabled:
                return
            self._dispatch(event)
        except Exception:
            LOGGER.warning("Failed to record %s event for %s", event.type, event.project, exc_info=True)

    def _dispatch(self, event: ExecutionEvent) -> None:
        kind = event.type
        if kind is EventType.PROJECT_STARTED:
            self.projects.start(event.project)
        elif kind in _PROJECT_ENDS:
            self.projects.stop(event.project)
        elif kind is EventType.MOJO_STARTED:
            self.steps.start_step(event.project, _require_step(event))
        elif kind in _MOJO_ENDS:
            self.steps.stop_step(event.project, _require_step(event))
        else:
            LOGGER.debug("Ignoring %s event", kind)

    def reset(self) -> None:
        """Drop every recorded timer, e.g. before a new build session."""

        self.projects.clear()
        self.steps.clear()


def _require_step(event: ExecutionEvent):
    if event.mojo_execution is None:
        raise ValueError(f"{event.type.value} event for {event.project.coordinate} has no mojo execution")
    return event.mojo_execution
