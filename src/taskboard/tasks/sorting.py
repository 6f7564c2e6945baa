# src/taskboard/tasks/sorting.py

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from .task_models import DerivedTask


def sort_key(task: DerivedTask) -> tuple[Any, ...]:
    """
    Importance order:
    1. ROI descending (no ROI -> after every defined value)
    2. title ascending (case-sensitive)
    3. created_at ascending
    4. id ascending

    The remaining fields close the key so equal keys mean equal records.
    """
    has_roi = task.roi is not None
    return (
        0 if has_roi else 1,
        -task.roi if task.roi is not None else 0.0,
        task.title,
        task.created_at,
        task.id,
        task.revenue,
        task.time_taken,
        task.priority.value,
        task.status.value,
        task.notes,
        task.completed_at or "",
    )


def sort_tasks(derived: Iterable[DerivedTask]) -> list[DerivedTask]:
    """Return a new list; the input is left untouched."""
    return sorted(derived, key=sort_key)
