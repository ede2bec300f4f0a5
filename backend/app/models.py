"""Pydantic models for build lifecycle events and timing reports."""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field, model_validator


class EventType(str, Enum):
    """Lifecycle notifications a build orchestrator can emit."""

    SESSION_STARTED = "SessionStarted"
    SESSION_ENDED = "SessionEnded"
    PROJECT_DISCOVERY_STARTED = "ProjectDiscoveryStarted"
    PROJECT_SKIPPED = "ProjectSkipped"
    PROJECT_STARTED = "ProjectStarted"
    PROJECT_SUCCEEDED = "ProjectSucceeded"
    PROJECT_FAILED = "ProjectFailed"
    MOJO_SKIPPED = "MojoSkipped"
    MOJO_STARTED = "MojoStarted"
    MOJO_SUCCEEDED = "MojoSucceeded"
    MOJO_FAILED = "MojoFailed"
    FORK_STARTED = "ForkStarted"
    FORK_SUCCEEDED = "ForkSucceeded"
    FORK_FAILED = "ForkFailed"
    FORKED_PROJECT_STARTED = "ForkedProjectStarted"
    FORKED_PROJECT_SUCCEEDED = "ForkedProjectSucceeded"
    FORKED_PROJECT_FAILED = "ForkedProjectFailed"

    @classmethod
    def lookup(cls, value: str) -> Optional["EventType"]:
        """Return the matching member, or ``None`` for kinds this version does not know."""

        try:
            return cls(value)
        except ValueError:
            return None


STEP_EVENTS = frozenset({EventType.MOJO_STARTED, EventType.MOJO_SUCCEEDED, EventType.MOJO_FAILED})


class Project(BaseModel):
    """A module of the build, identified by its group/artifact/version coordinate."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    group_id: str = Field(..., alias="groupId")
    artifact_id: str = Field(..., alias="artifactId")
    version: str
    name: Optional[str] = Field(default=None, description="Display name; not part of the identity")

    @property
    def coordinate(self) -> str:
        return f"{self.group_id}:{self.artifact_id}:{self.version}"

    @property
    def display_name(self) -> str:
        return self.name or self.artifact_id

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, Project):
            return NotImplemented
        return self.coordinate == other.coordinate

    def __hash__(self) -> int:
        return hash(self.coordinate)


class ExecutionStep(BaseModel):
    """One plugin goal execution within a project."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    plugin: str = Field(..., description="Plugin coordinate, e.g. org.apache.maven.plugins:maven-compiler-plugin:3.11.0")
    goal: str
    execution_id: str = Field(..., alias="executionId")

    def __str__(self) -> str:
        return f"{self.plugin}:{self.goal} ({self.execution_id})"


class ExecutionEvent(BaseModel):
    """A lifecycle notification as consumed by the timing collector."""

    model_config = ConfigDict(populate_by_name=True)

    type: EventType
    project: Project
    mojo_execution: Optional[ExecutionStep] = Field(default=None, alias="mojoExecution")


class EventPayload(BaseModel):
    """Wire shape of an event posted by a build orchestrator.

    ``type`` stays a plain string so kinds added by newer orchestrators are
    accepted and ignored rather than rejected.
    """

    model_config = ConfigDict(populate_by_name=True)

    type: str
    project: Project
    mojo_execution: Optional[ExecutionStep] = Field(default=None, alias="mojoExecution")

    @model_validator(mode="after")
    def require_step_for_mojo_events(self) -> "EventPayload":
        if EventType.lookup(self.type) in STEP_EVENTS and self.mojo_execution is None:
            raise ValueError(f"'{self.type}' events must carry a mojo_execution")
        return self

    def to_event(self) -> Optional[ExecutionEvent]:
        """Return the typed event, or ``None`` when the kind is unknown."""

        kind = EventType.lookup(self.type)
        if kind is None:
            return None
        return ExecutionEvent(type=kind, project=self.project, mojo_execution=self.mojo_execution)


class StepTiming(BaseModel):
    """Elapsed time of a single mojo execution."""

    step: ExecutionStep
    elapsed_ms: int = Field(..., ge=0)
    running: bool = False


class ProjectTiming(BaseModel):
    """Elapsed time of a project along with its mojo executions."""

    project: Project
    elapsed_ms: Optional[int] = Field(default=None, ge=0, description="None when only mojo executions were timed")
    running: bool = False
    steps: List[StepTiming] = Field(default_factory=list)


class ProfileReport(BaseModel):
    """Snapshot of every timer recorded during a build."""

    generated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    sort: str = "time"
    projects: List[ProjectTiming] = Field(default_factory=list)

    @computed_field
    @property
    def total_ms(self) -> int:
        return sum(item.elapsed_ms or 0 for item in self.projects)
