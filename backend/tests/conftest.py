"""Pytest configuration for backend tests."""

import sys
from pathlib import Path

import pytest

def ensure_app_on_path() -> None:
    root = Path(__file__).resolve().parents[1]
    if str(root) not in sys.path:
        sys.path.insert(0, str(root))

ensure_app_on_path()

from app.config import get_settings
from app.models import EventType, ExecutionEvent, ExecutionStep, Project


class FakeClock:
    """Clock that only moves when told to."""

    def __init__(self) -> None:
        self.now = 100.0

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class Switch:
    """Mutable enablement flag for toggling profiling mid-build."""

    def __init__(self, on: bool = True) -> None:
        self.on = on

    def __call__(self) -> bool:
        return self.on


def a_project(artifact_id: str = "artifactId", name: str = "project") -> Project:
    return Project(group_id="groupId", artifact_id=artifact_id, version="1.0", name=name)


def a_step(goal: str = "goal", execution_id: str = "execution.id") -> ExecutionStep:
    return ExecutionStep(plugin="org.example:example-plugin:1.0", goal=goal, execution_id=execution_id)


def a_project_event(kind: EventType, project: Project = None) -> ExecutionEvent:
    return ExecutionEvent(type=kind, project=project or a_project())


def a_mojo_event(kind: EventType, project: Project = None, step: ExecutionStep = None) -> ExecutionEvent:
    return ExecutionEvent(type=kind, project=project or a_project(), mojo_execution=step or a_step())


@pytest.fixture(autouse=True)
def _fresh_settings(monkeypatch):
    monkeypatch.delenv("PROFILE", raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def switch() -> Switch:
    return Switch(on=True)
