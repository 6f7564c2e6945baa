# tests/conftest.py

from __future__ import annotations

import asyncio
from pathlib import Path
from types import SimpleNamespace

import pytest

from taskboard.core.state import AppState
from taskboard.tasks.task_store import LoadGuard, TaskStore

from .fakes import SAMPLE_RECORDS, FixedClock, SequentialIds, StaticTaskSource


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and command handlers.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated and deterministic.
    """
    return SimpleNamespace(
        app_name="taskboard-test",
        log_level="DEBUG",
        tasks_source=str(tmp_path / "tasks.json"),
        load_timeout_seconds=1.0,
        seed_count=5,
        seed=7,
        undo_window_seconds=10.0,
        data_dir=tmp_path,
        export_path=tmp_path / "export" / "tasks.csv",
    )


@pytest.fixture()
def clock() -> FixedClock:
    return FixedClock()


@pytest.fixture()
def ids() -> SequentialIds:
    return SequentialIds()


@pytest.fixture()
def store(clock: FixedClock, ids: SequentialIds) -> TaskStore:
    """
    Empty store with its own LoadGuard, so tests never touch the
    process-wide guard.
    """
    return TaskStore(clock=clock, id_factory=ids, load_guard=LoadGuard(), seed_count=5)


@pytest.fixture()
def state(settings: SimpleNamespace, store: TaskStore) -> AppState:
    """AppState whose store has already loaded SAMPLE_RECORDS."""
    source = StaticTaskSource(SAMPLE_RECORDS)
    asyncio.run(store.load(source))
    return AppState(settings=settings, task_store=store, task_source=source)
