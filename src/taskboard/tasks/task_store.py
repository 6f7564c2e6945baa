# src/taskboard/tasks/task_store.py

from __future__ import annotations

import logging
import random
from collections.abc import Mapping
from dataclasses import dataclass, replace
from datetime import UTC, datetime
from typing import Any

from ..core.ports import Clock, TaskSource
from .metrics import compute_metrics, with_derived
from .normalize import (
    DEFAULT_PRIORITY,
    DEFAULT_STATUS,
    IdFactory,
    clean_id,
    clean_notes,
    clean_revenue,
    clean_time_taken,
    clean_title,
    field_value,
    format_timestamp,
    new_task_id,
    normalize_tasks,
    unique_id,
)
from .seed import generate_sales_tasks
from .sorting import sort_tasks
from .task_models import DerivedTask, Metrics, Priority, Task, TaskStatus

logger = logging.getLogger(__name__)


class LoadGuard:
    """
    Idempotent-initialization flag.

    Unset at process start, set permanently by the first claim, never reset.
    """

    def __init__(self) -> None:
        self._claimed = False

    @property
    def claimed(self) -> bool:
        return self._claimed

    def claim(self) -> bool:
        """True only for the very first caller."""
        if self._claimed:
            return False
        self._claimed = True
        return True


PROCESS_LOAD_GUARD = LoadGuard()


@dataclass(frozen=True, slots=True)
class Empty:
    """No pending undo."""


@dataclass(frozen=True, slots=True)
class Holding:
    task: Task


UndoSlot = Empty | Holding

EMPTY_SLOT = Empty()


def _utc_now() -> datetime:
    return datetime.now(UTC)


class TaskStore:
    """
    In-memory task collection with single-slot undo.

    - the collection keeps insertion order; presentation order is computed
      by sort_tasks on read
    - every mutation goes through field sanitization (see normalize.py)
    - derived views are memoized on a version counter bumped by each mutation

    All mutators are synchronous; load() is the only coroutine.
    """

    def __init__(
        self,
        *,
        clock: Clock | None = None,
        id_factory: IdFactory | None = None,
        load_guard: LoadGuard | None = None,
        seed_count: int = 50,
        seed_random: random.Random | None = None,
    ) -> None:
        self._clock = clock or _utc_now
        self._id_factory = id_factory or new_task_id
        self._load_guard = load_guard if load_guard is not None else PROCESS_LOAD_GUARD
        self._seed_count = max(1, seed_count)
        self._seed_random = seed_random

        self._tasks: list[Task] = []
        self._slot: UndoSlot = EMPTY_SLOT
        self._loading = True
        self._load_started = False
        self._error: str | None = None

        self._version = 0
        self._derived_cache: tuple[int, list[DerivedTask]] | None = None
        self._metrics_cache: tuple[int, Metrics] | None = None

    # ---- read side ----

    @property
    def tasks(self) -> list[Task]:
        return list(self._tasks)

    @property
    def loading(self) -> bool:
        return self._loading

    @property
    def error(self) -> str | None:
        return self._error

    @property
    def version(self) -> int:
        return self._version

    @property
    def undo_slot(self) -> UndoSlot:
        return self._slot

    @property
    def last_deleted(self) -> Task | None:
        slot = self._slot
        if isinstance(slot, Holding):
            return slot.task
        return None

    @property
    def derived_sorted(self) -> list[DerivedTask]:
        cached = self._derived_cache
        if cached is None or cached[0] != self._version:
            cached = (self._version, sort_tasks(with_derived(t) for t in self._tasks))
            self._derived_cache = cached
        return list(cached[1])

    @property
    def metrics(self) -> Metrics:
        cached = self._metrics_cache
        if cached is None or cached[0] != self._version:
            cached = (self._version, compute_metrics(self._tasks))
            self._metrics_cache = cached
        return cached[1]

    def get_task(self, task_id: str) -> Task | None:
        idx = self._index_of(task_id)
        return self._tasks[idx] if idx is not None else None

    # ---- low-level helpers ----

    def _index_of(self, task_id: Any) -> int | None:
        for i, t in enumerate(self._tasks):
            if t.id == task_id:
                return i
        return None

    def _touch(self) -> None:
        self._version += 1

    def _reserved_ids(self) -> set[str]:
        ids = {t.id for t in self._tasks}
        held = self.last_deleted
        if held is not None:
            # Keep the held id free so undo never produces a duplicate.
            ids.add(held.id)
        return ids

    # ---- lifecycle ----

    async def load(self, source: TaskSource) -> None:
        """
        One-time initial load.

        Only the first call in the process (per LoadGuard) fetches. Later calls
        on a store that never loaded just leave the loading state; on the
        loading store itself they change nothing. Failures are recorded in
        `error` and never raised.
        """
        if not self._load_guard.claim():
            logger.debug("Initial load already claimed; skipping.")
            if not self._load_started:
                self._loading = False
            return
        self._load_started = True

        try:
            raw = await source.fetch()
            normalized = normalize_tasks(raw, now=self._clock(), id_factory=self._id_factory)
            if not normalized:
                logger.info("Source returned no usable tasks; generating %d placeholder tasks.", self._seed_count)
                normalized = generate_sales_tasks(
                    self._seed_count,
                    rng=self._seed_random,
                    now=self._clock(),
                    id_factory=self._id_factory,
                )
            self._tasks = normalized
            self._touch()
            logger.info("TaskStore loaded total=%d", len(self._tasks))
        except Exception as e:
            self._error = str(e) or "Failed to load tasks"
            logger.warning("Initial task load failed: %s", self._error, exc_info=True)
        finally:
            self._loading = False

    # ---- public API ----

    def add_task(self, partial: Mapping[str, Any]) -> Task:
        if not isinstance(partial, Mapping):
            partial = {}
        now = format_timestamp(self._clock())

        _, raw_id = field_value(partial, "id")
        task_id = clean_id(raw_id) or self._id_factory()
        task_id = unique_id(task_id, self._reserved_ids(), len(self._tasks))

        _, raw_status = field_value(partial, "status")
        status = TaskStatus.parse(raw_status, DEFAULT_STATUS) or DEFAULT_STATUS
        _, raw_priority = field_value(partial, "priority")

        task = Task(
            id=task_id,
            title=clean_title(field_value(partial, "title")[1]),
            revenue=clean_revenue(field_value(partial, "revenue")[1]),
            time_taken=clean_time_taken(field_value(partial, "timeTaken")[1]),
            priority=Priority.parse(raw_priority, DEFAULT_PRIORITY) or DEFAULT_PRIORITY,
            status=status,
            notes=clean_notes(field_value(partial, "notes")[1]),
            created_at=now,
            completed_at=now if status is TaskStatus.DONE else None,
        )
        self._tasks.append(task)
        self._touch()
        logger.debug("Task added id=%s status=%s", task.id, task.status.value)
        return task

    def update_task(self, task_id: str, patch: Mapping[str, Any]) -> Task | None:
        """
        Apply the fields present in `patch`.

        Invalid values keep the current value. id / createdAt / completedAt
        are not patchable; completed_at follows the status transition.
        Returns the updated task, or None if `task_id` is unknown.
        """
        idx = self._index_of(task_id)
        if idx is None:
            logger.debug("update_task: unknown id=%s", task_id)
            return None
        if not isinstance(patch, Mapping):
            patch = {}

        current = self._tasks[idx]
        changes: dict[str, Any] = {}

        present, raw = field_value(patch, "title")
        if present:
            changes["title"] = clean_title(raw, default=current.title)
        present, raw = field_value(patch, "revenue")
        if present:
            changes["revenue"] = clean_revenue(raw, default=current.revenue)
        present, raw = field_value(patch, "timeTaken")
        if present:
            changes["time_taken"] = clean_time_taken(raw, default=current.time_taken)
        present, raw = field_value(patch, "priority")
        if present:
            changes["priority"] = Priority.parse(raw, current.priority)
        present, raw = field_value(patch, "status")
        if present:
            changes["status"] = TaskStatus.parse(raw, current.status)
        present, raw = field_value(patch, "notes")
        if present:
            changes["notes"] = clean_notes(raw, default=current.notes)

        merged = replace(current, **changes)

        if merged.status is TaskStatus.DONE:
            if not merged.completed_at:
                merged = replace(merged, completed_at=format_timestamp(self._clock()))
        elif merged.completed_at is not None:
            merged = replace(merged, completed_at=None)

        if merged.time_taken <= 0:
            merged = replace(merged, time_taken=1)

        if merged != current:
            self._tasks[idx] = merged
            self._touch()
            logger.debug("Task updated id=%s fields=%s", task_id, sorted(changes))
        return merged

    def delete_task(self, task_id: str) -> Task | None:
        """Move the task into the undo slot, discarding whatever was held."""
        idx = self._index_of(task_id)
        if idx is None:
            logger.debug("delete_task: unknown id=%s", task_id)
            return None

        removed = self._tasks.pop(idx)
        discarded = self.last_deleted
        if discarded is not None:
            logger.debug("Undo slot overwritten; dropping id=%s", discarded.id)
        self._slot = Holding(removed)
        self._touch()
        logger.debug("Task deleted id=%s", removed.id)
        return removed

    def undo_delete(self) -> Task | None:
        """Re-append the held task at the end of the collection."""
        slot = self._slot
        if not isinstance(slot, Holding):
            return None

        self._slot = EMPTY_SLOT
        self._tasks.append(slot.task)
        self._touch()
        logger.debug("Task restored id=%s", slot.task.id)
        return slot.task

    def clear_last_deleted(self) -> None:
        self._slot = EMPTY_SLOT
