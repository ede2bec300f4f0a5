import threading

import pytest

from app.profiler import ProjectTimerStore, StepKey, StepTimerStore, Timer, TimerStore

from conftest import FakeClock, a_project, a_step


def test_start_creates_one_running_timer_per_key():
    store = ProjectTimerStore()
    project = a_project()

    timer = store.start(project)

    assert len(store) == 1
    assert store.get(project) is timer
    assert timer.is_running is True


def test_projects_are_keyed_by_coordinate_not_instance():
    store = ProjectTimerStore()
    store.start(a_project(name="first"))

    same = a_project(name="renamed")
    assert same in store
    assert store.stop(same) is not None
    assert len(store) == 1


def test_double_start_keeps_single_timer():
    store = ProjectTimerStore()
    project = a_project()
    first = store.start(project)
    second = store.start(project)

    assert first is second
    assert len(store) == 1
    assert second.is_running is True


def test_stop_without_start_creates_nothing():
    store = ProjectTimerStore()
    assert store.stop(a_project()) is None
    assert len(store) == 0
    assert not store


def test_double_stop_is_tolerated():
    store = ProjectTimerStore()
    project = a_project()
    store.start(project)
    first = store.stop(project)
    elapsed = first.elapsed
    second = store.stop(project)

    assert second is first
    assert second.is_running is False
    assert second.elapsed == elapsed


def test_items_keep_first_started_order():
    store = ProjectTimerStore(stripes=4)
    projects = [a_project(artifact_id=f"module-{index}") for index in range(10)]
    for project in projects:
        store.start(project)
    store.start(projects[0])

    assert [key for key, _ in store.items()] == projects
    assert list(store) == projects


def test_clear_empties_every_stripe():
    store = ProjectTimerStore(stripes=3)
    for index in range(6):
        store.start(a_project(artifact_id=f"module-{index}"))
    store.clear()
    assert len(store) == 0
    assert store.items() == []


def test_stripes_must_be_positive():
    with pytest.raises(ValueError):
        TimerStore(stripes=0)


def test_step_store_uses_composite_keys():
    store = StepTimerStore()
    core, web = a_project(artifact_id="core"), a_project(artifact_id="web")
    compile_step, test_step = a_step(goal="compile"), a_step(goal="test")

    store.start_step(core, compile_step)
    store.start_step(core, test_step)
    store.start_step(web, compile_step)
    store.stop_step(core, compile_step)

    assert len(store) == 3
    assert StepKey(core, compile_step) in store
    assert store.get_step(core, compile_step).is_running is False
    assert store.get_step(web, compile_step).is_running is True
    assert set(store.row(core)) == {compile_step, test_step}
    assert store.projects() == [core, web]
    assert [(project, step) for project, step, _ in store.triples()] == [
        (core, compile_step),
        (core, test_step),
        (web, compile_step),
    ]


def test_racing_starts_on_absent_key_create_one_timer():
    store = ProjectTimerStore()
    project = a_project()
    barrier = threading.Barrier(8)
    timers = []

    def start():
        barrier.wait()
        timers.append(store.start(project))

    threads = [threading.Thread(target=start) for _ in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert len(store) == 1
    assert all(timer is timers[0] for timer in timers)


def test_concurrent_starts_on_distinct_keys():
    store = StepTimerStore(stripes=4)
    projects = [a_project(artifact_id=f"module-{index}") for index in range(16)]
    steps = [a_step(goal=f"goal-{index}") for index in range(10)]

    def build(project):
        for step in steps:
            store.start_step(project, step)
            store.stop_step(project, step)

    threads = [threading.Thread(target=build, args=(project,)) for project in projects]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert len(store) == len(projects) * len(steps)
    assert all(not timer.is_running for _, timer in store.items())


def test_elapsed_millis_pairs_report_exact_durations():
    clock = FakeClock()
    store = ProjectTimerStore(timer_factory=lambda: Timer(clock=clock))
    core, web = a_project(artifact_id="core"), a_project(artifact_id="web")

    store.start(core)
    store.start(web)
    clock.advance(0.25)
    store.stop(core)
    clock.advance(0.125)

    assert store.elapsed_millis() == [(core, 250), (web, 375)]
    assert store.running() == {web}


def test_step_triples_carry_elapsed_millis():
    clock = FakeClock()
    store = StepTimerStore(timer_factory=lambda: Timer(clock=clock))
    project = a_project()
    compile_step, test_step = a_step(goal="compile"), a_step(goal="test")

    store.start_step(project, compile_step)
    clock.advance(0.5)
    store.stop_step(project, compile_step)
    store.start_step(project, test_step)
    clock.advance(0.0625)
    store.stop_step(project, test_step)

    assert store.triples() == [(project, compile_step, 500), (project, test_step, 62)]
    assert store.running() == set()
