"""Turn the collector's timer stores into a report once the build is over."""

from __future__ import annotations

import logging
from typing import Dict, List, Optional

from .config import get_settings
from .models import ProfileReport, Project, ProjectTiming, StepTiming
from .profiler import StepKey, TimingCollector

LOGGER = logging.getLogger(__name__)

SORT_BY_TIME = "time"
SORT_BY_EXECUTION = "execution"
LINE_WIDTH = 72


def build_report(collector: TimingCollector, sort: Optional[str] = None) -> ProfileReport:
    """Snapshot both stores into a :class:`ProfileReport`.

    Every project seen in either store gets an entry. Projects whose own
    timer was never started (profiling switched on mid-build) carry
    ``elapsed_ms=None`` but still list their mojo executions.
    """

    sort = sort or get_settings().profile_sort
    if sort not in (SORT_BY_TIME, SORT_BY_EXECUTION):
        raise ValueError(f"Unsupported report sort: {sort}")

    running_projects = collector.projects.running()
    entries: Dict[Project, ProjectTiming] = {}
    for project, elapsed_ms in collector.projects.elapsed_millis():
        entries[project] = ProjectTiming(
            project=project,
            elapsed_ms=elapsed_ms,
            running=project in running_projects,
        )

    running_steps = collector.steps.running()
    for project, step, elapsed_ms in collector.steps.triples():
        entry = entries.get(project)
        if entry is None:
            entry = entries[project] = ProjectTiming(project=project)
        entry.steps.append(
            StepTiming(step=step, elapsed_ms=elapsed_ms, running=StepKey(project, step) in running_steps)
        )

    projects: List[ProjectTiming] = list(entries.values())
    if sort == SORT_BY_TIME:
        for entry in projects:
            entry.steps.sort(key=lambda item: item.elapsed_ms, reverse=True)
        projects.sort(key=lambda item: item.elapsed_ms or 0, reverse=True)

    return ProfileReport(sort=sort, projects=projects)


def format_report(report: ProfileReport) -> str:
    """Render a plain-text table of projects and their mojo executions."""

    if not report.projects:
        return "No build timings recorded."

    lines = ["Build profile", "=" * LINE_WIDTH]
    for entry in report.projects:
        title = f"{entry.project.display_name} ({entry.project.coordinate})"
        lines.append(_dotted(title, _format_ms(entry.elapsed_ms, entry.running)))
        for step in entry.steps:
            lines.append(_dotted(f"  {step.step}", _format_ms(step.elapsed_ms, step.running)))
    lines.append("-" * LINE_WIDTH)
    lines.append(_dotted("Total", _format_ms(report.total_ms, False)))
    return "\n".join(lines)


def log_report(report: ProfileReport) -> None:
    for line in format_report(report).splitlines():
        LOGGER.info(line)


def _format_ms(value: Optional[int], running: bool) -> str:
    if value is None:
        return "n/a"
    suffix = " (running)" if running else ""
    return f"{value} ms{suffix}"


def _dotted(label: str, value: str) -> str:
    padding = LINE_WIDTH - len(label) - len(value) - 2
    if padding < 3:
        return f"{label} {value}"
    return f"{label} {'.' * padding} {value}"
