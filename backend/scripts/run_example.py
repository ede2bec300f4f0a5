"""Simulate a parallel multi-module build in-process and print its profile."""

import random
import sys
import time
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

# Add backend directory to Python path
BACKEND_DIR = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(BACKEND_DIR))

from app.models import EventType, ExecutionEvent, ExecutionStep, Project
from app.profiler import TimingCollector
from app.reporting import build_report, format_report

MODULES = ["core", "api", "persistence", "web", "cli"]
LIFECYCLE = [
    ("org.apache.maven.plugins:maven-resources-plugin:3.3.1", "resources", "default-resources"),
    ("org.apache.maven.plugins:maven-compiler-plugin:3.11.0", "compile", "default-compile"),
    ("org.apache.maven.plugins:maven-surefire-plugin:3.2.2", "test", "default-test"),
    ("org.apache.maven.plugins:maven-jar-plugin:3.3.0", "jar", "default-jar"),
]


def build_module(collector: TimingCollector, name: str) -> None:
    project = Project(group_id="com.example", artifact_id=name, version="1.0.0-SNAPSHOT", name=name)
    collector.on_event(ExecutionEvent(type=EventType.PROJECT_STARTED, project=project))
    for plugin, goal, execution_id in LIFECYCLE:
        step = ExecutionStep(plugin=plugin, goal=goal, execution_id=execution_id)
        collector.on_event(ExecutionEvent(type=EventType.MOJO_STARTED, project=project, mojo_execution=step))
        time.sleep(random.uniform(0.005, 0.05))
        collector.on_event(ExecutionEvent(type=EventType.MOJO_SUCCEEDED, project=project, mojo_execution=step))
    collector.on_event(ExecutionEvent(type=EventType.PROJECT_SUCCEEDED, project=project))


def run() -> None:
    collector = TimingCollector(enabled=lambda: True)
    with ThreadPoolExecutor(max_workers=3) as pool:
        list(pool.map(lambda name: build_module(collector, name), MODULES))
    print(format_report(build_report(collector)))


if __name__ == "__main__":
    run()
