# src/taskboard/core/state.py

from __future__ import annotations

from dataclasses import dataclass

from .ports import TaskSource
from ..tasks.task_store import TaskStore


@dataclass
class AppState:
    # Settings are stored on the state so command handlers can read them.
    settings: object

    task_store: TaskStore
    task_source: TaskSource

    # time.monotonic() deadline after which a pending undo is dropped.
    undo_deadline: float | None = None
