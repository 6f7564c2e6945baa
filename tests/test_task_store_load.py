# tests/test_task_store_load.py

from __future__ import annotations

import asyncio

import pytest

from taskboard.tasks.loader import TaskLoadError
from taskboard.tasks.task_store import LoadGuard, TaskStore

from .fakes import SAMPLE_RECORDS, FailingTaskSource, FixedClock, SequentialIds, StaticTaskSource


@pytest.mark.asyncio
async def test_load_normalizes_records(store: TaskStore) -> None:
    assert store.loading is True
    assert store.tasks == []

    await store.load(StaticTaskSource(SAMPLE_RECORDS))

    assert store.loading is False
    assert store.error is None
    assert [t.id for t in store.tasks] == ["t-1", "t-2", "t-3"]
    assert store.metrics.total_revenue == 4200


@pytest.mark.asyncio
async def test_load_runs_only_once(store: TaskStore) -> None:
    first = StaticTaskSource(SAMPLE_RECORDS)
    second = StaticTaskSource([{"id": "other"}])

    await store.load(first)
    await store.load(second)

    assert first.calls == 1
    assert second.calls == 0
    assert [t.id for t in store.tasks] == ["t-1", "t-2", "t-3"]


@pytest.mark.asyncio
async def test_guard_is_shared_between_stores(clock: FixedClock) -> None:
    guard = LoadGuard()
    a = TaskStore(clock=clock, load_guard=guard)
    b = TaskStore(clock=clock, load_guard=guard)
    src = StaticTaskSource(SAMPLE_RECORDS)

    await a.load(src)
    await b.load(src)

    assert src.calls == 1
    assert guard.claimed
    assert len(a.tasks) == 3
    # The duplicate call leaves the loading state without fetching.
    assert b.loading is False
    assert b.tasks == []


@pytest.mark.asyncio
async def test_concurrent_load_is_noop_while_first_is_pending(store: TaskStore) -> None:
    gate = asyncio.Event()
    src = StaticTaskSource(SAMPLE_RECORDS, gate=gate)

    first = asyncio.create_task(store.load(src))
    await asyncio.sleep(0)
    assert store.loading is True
    assert store.tasks == []

    await store.load(src)
    assert src.calls == 1
    assert store.loading is True

    gate.set()
    await first
    assert len(store.tasks) == 3


@pytest.mark.asyncio
async def test_empty_result_falls_back_to_seed_data(clock: FixedClock) -> None:
    store = TaskStore(clock=clock, id_factory=SequentialIds(), load_guard=LoadGuard(), seed_count=7)

    await store.load(StaticTaskSource({"unexpected": "shape"}))

    assert store.error is None
    assert len(store.tasks) == 7
    assert all(t.id.startswith("seed-") for t in store.tasks)


@pytest.mark.asyncio
async def test_load_failure_is_recorded_not_raised(store: TaskStore) -> None:
    src = FailingTaskSource(TaskLoadError("Failed to load tasks.json (404)"))

    await store.load(src)

    assert store.error == "Failed to load tasks.json (404)"
    assert store.tasks == []
    assert store.loading is False
    assert store.metrics.total_revenue == 0


@pytest.mark.asyncio
async def test_load_failure_without_message_gets_default(store: TaskStore) -> None:
    await store.load(FailingTaskSource(RuntimeError()))

    assert store.error == "Failed to load tasks"


@pytest.mark.asyncio
async def test_duplicate_ids_in_batch_both_kept(store: TaskStore) -> None:
    await store.load(StaticTaskSource([{"id": "dup", "title": "one"}, {"id": "dup", "title": "two"}]))

    assert [(t.id, t.title) for t in store.tasks] == [("dup", "one"), ("dup-1", "two")]


@pytest.mark.asyncio
async def test_one_overflowing_field_does_not_drop_the_batch(store: TaskStore) -> None:
    records = [{"id": "a", "createdAt": 10**400}, {"id": "b", "title": "Fine"}]

    await store.load(StaticTaskSource(records))

    assert store.error is None
    assert [t.id for t in store.tasks] == ["a", "b"]


@pytest.mark.asyncio
async def test_non_positive_seed_count_still_fills_empty_store(clock: FixedClock) -> None:
    store = TaskStore(clock=clock, id_factory=SequentialIds(), load_guard=LoadGuard(), seed_count=0)

    await store.load(StaticTaskSource([]))

    assert len(store.tasks) == 1
