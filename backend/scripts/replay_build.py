"""Replay a simulated multi-module build against a running profiler API."""

import asyncio
import random
import time
from typing import Optional

import aiohttp

API_URL = "http://localhost:8001"
GROUP_ID = "com.example"
VERSION = "1.0.0-SNAPSHOT"
MODULES = ["core", "api", "persistence", "web", "cli"]
LIFECYCLE = [
    ("org.apache.maven.plugins:maven-resources-plugin:3.3.1", "resources", "default-resources"),
    ("org.apache.maven.plugins:maven-compiler-plugin:3.11.0", "compile", "default-compile"),
    ("org.apache.maven.plugins:maven-surefire-plugin:3.2.2", "test", "default-test"),
    ("org.apache.maven.plugins:maven-jar-plugin:3.3.0", "jar", "default-jar"),
]


def _project(module: str) -> dict:
    return {"groupId": GROUP_ID, "artifactId": module, "version": VERSION, "name": module}


async def post_event(session: aiohttp.ClientSession, event_type: str, module: str, step: Optional[tuple] = None) -> str:
    payload = {"type": event_type, "project": _project(module)}
    if step is not None:
        plugin, goal, execution_id = step
        payload["mojoExecution"] = {"plugin": plugin, "goal": goal, "executionId": execution_id}
    async with session.post(f"{API_URL}/events", json=payload) as response:
        body = await response.json()
        if response.status != 202:
            raise RuntimeError(f"{event_type} for {module} rejected: {body}")
        return body["status"]


async def build_module(session: aiohttp.ClientSession, module: str) -> float:
    """Emit the lifecycle of one module, returning its wall-clock duration."""

    start = time.perf_counter()
    await post_event(session, "ProjectStarted", module)
    for step in LIFECYCLE:
        await post_event(session, "MojoStarted", module, step)
        await asyncio.sleep(random.uniform(0.01, 0.1))
        await post_event(session, "MojoSucceeded", module, step)
    await post_event(session, "ProjectSucceeded", module)
    return time.perf_counter() - start


async def run_sequential(session: aiohttp.ClientSession) -> float:
    print("\n=== Sequential build ===")
    total_start = time.perf_counter()
    for module in MODULES:
        duration = await build_module(session, module)
        print(f"  {module}: {duration:.2f}s")
    return time.perf_counter() - total_start


async def run_parallel(session: aiohttp.ClientSession) -> float:
    print("\n=== Parallel build ===")
    total_start = time.perf_counter()
    durations = await asyncio.gather(*(build_module(session, module) for module in MODULES))
    for module, duration in zip(MODULES, durations):
        print(f"  {module}: {duration:.2f}s")
    return time.perf_counter() - total_start


async def print_report(session: aiohttp.ClientSession) -> None:
    async with session.get(f"{API_URL}/report") as response:
        report = await response.json()
    for entry in report["projects"]:
        project = entry["project"]
        print(f"  {project['artifactId']}: {entry['elapsed_ms']} ms, {len(entry['steps'])} mojo executions")
    print(f"  total: {report['total_ms']} ms")


async def main():
    """Replay the build twice, clearing the profiler in between."""

    async with aiohttp.ClientSession() as session:
        async with session.get(f"{API_URL}/health") as response:
            health = await response.json()
        if not health.get("profiling"):
            print("Profiling is disabled on the server; set PROFILE=true and restart it.")
            return

        for runner in (run_sequential, run_parallel):
            async with session.delete(f"{API_URL}/report"):
                pass
            wall = await runner(session)
            print(f"Wall time: {wall:.2f}s")
            await print_report(session)


if __name__ == "__main__":
    asyncio.run(main())
