# src/taskboard/tasks/normalize.py

"""
Ingestion normalization.

Converts loosely-typed external records into strict Task objects. Nothing in
here raises on bad input: every field is sanitized on its own and falls back
to a fixed default.

The per-field helpers are reused by TaskStore for add/update so that every
mutation site applies the same policy.
"""

from __future__ import annotations

import logging
import math
import uuid
from collections.abc import Callable, Mapping
from datetime import UTC, datetime, timedelta
from typing import Any

from .task_models import Priority, Task, TaskStatus

logger = logging.getLogger(__name__)

DEFAULT_TITLE = "Untitled Task"
DEFAULT_PRIORITY = Priority.LOW
DEFAULT_STATUS = TaskStatus.TODO

ONE_DAY = timedelta(days=1)

IdFactory = Callable[[], str]

# Python callers tend to use snake_case, JSON feeds use camelCase.
_ALIASES: dict[str, tuple[str, ...]] = {
    "timeTaken": ("timeTaken", "time_taken"),
    "createdAt": ("createdAt", "created_at"),
    "completedAt": ("completedAt", "completed_at"),
}


def new_task_id() -> str:
    return str(uuid.uuid4())


def field_value(record: Mapping[str, Any], name: str) -> tuple[bool, Any]:
    """Return (present, value) for a wire field, honoring snake_case aliases."""
    for key in _ALIASES.get(name, (name,)):
        if key in record:
            return True, record[key]
    return False, None


def _to_number(raw: Any) -> float:
    """
    Loose numeric coercion.

    bool -> 0/1, numbers as-is, numeric strings parsed ("" -> 0),
    anything else -> nan.
    """
    if isinstance(raw, bool):
        return float(raw)
    if isinstance(raw, (int, float)):
        try:
            return float(raw)
        except OverflowError:
            return math.nan
    if isinstance(raw, str):
        s = raw.strip()
        if not s:
            return 0.0
        try:
            return float(s)
        except ValueError:
            return math.nan
    return math.nan


def clean_id(raw: Any) -> str | None:
    if isinstance(raw, str) and raw.strip():
        return raw.strip()
    return None


def clean_title(raw: Any, default: str = DEFAULT_TITLE) -> str:
    if isinstance(raw, str) and raw.strip():
        return raw.strip()
    return default


def clean_revenue(raw: Any, default: float = 0.0) -> float:
    n = _to_number(raw)
    return n if math.isfinite(n) else default


def clean_time_taken(raw: Any, default: int = 1) -> int:
    n = _to_number(raw)
    if not math.isfinite(n) or n <= 0:
        return default
    # Round half up, then floor at 1.
    return max(1, math.floor(n + 0.5))


def clean_notes(raw: Any, default: str = "") -> str:
    return raw if isinstance(raw, str) else default


def parse_timestamp(raw: Any) -> datetime | None:
    """
    Accepts ISO-8601 strings, datetime objects and epoch milliseconds.
    Naive values are taken as UTC.
    """
    dt: datetime | None = None
    if isinstance(raw, datetime):
        dt = raw
    elif isinstance(raw, bool):
        return None
    elif isinstance(raw, (int, float)):
        try:
            if not math.isfinite(raw):
                return None
            dt = datetime.fromtimestamp(raw / 1000.0, tz=UTC)
        except (OverflowError, OSError, ValueError):
            return None
    elif isinstance(raw, str):
        s = raw.strip()
        if not s:
            return None
        try:
            dt = datetime.fromisoformat(s)
        except ValueError:
            return None
    else:
        return None

    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)
    try:
        return dt.astimezone(UTC)
    except OverflowError:
        return None


def format_timestamp(dt: datetime) -> str:
    """2024-05-01T12:00:00.000Z"""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def unique_id(candidate: str, taken: set[str] | frozenset[str], suffix: int) -> str:
    """Suffix `candidate` with `-<suffix>` until it no longer collides."""
    out = candidate
    while out in taken:
        out = f"{out}-{suffix}"
    return out


def normalize_task(
    raw: Any,
    index: int,
    *,
    now: datetime,
    taken_ids: set[str],
    id_factory: IdFactory = new_task_id,
) -> Task:
    """Normalize one record; `taken_ids` is updated with the assigned id."""
    record: Mapping[str, Any] = raw if isinstance(raw, Mapping) else {}

    _, raw_id = field_value(record, "id")
    task_id = clean_id(raw_id) or id_factory()
    if task_id in taken_ids:
        task_id = unique_id(task_id, taken_ids, index)
    taken_ids.add(task_id)

    _, raw_title = field_value(record, "title")
    _, raw_revenue = field_value(record, "revenue")
    _, raw_time = field_value(record, "timeTaken")
    _, raw_priority = field_value(record, "priority")
    _, raw_status = field_value(record, "status")
    _, raw_notes = field_value(record, "notes")
    _, raw_created = field_value(record, "createdAt")
    _, raw_completed = field_value(record, "completedAt")

    status = TaskStatus.parse(raw_status, DEFAULT_STATUS) or DEFAULT_STATUS

    created = parse_timestamp(raw_created)
    if created is None:
        # Stable, strictly ordered fallback: one day further back per index.
        created = now - ONE_DAY * (index + 1)
    created_at = format_timestamp(created)

    completed_at: str | None = None
    if status is TaskStatus.DONE:
        if isinstance(raw_completed, str) and raw_completed.strip():
            completed_at = raw_completed
        else:
            try:
                completed_at = format_timestamp(created + ONE_DAY)
            except OverflowError:
                completed_at = created_at

    return Task(
        id=task_id,
        title=clean_title(raw_title),
        revenue=clean_revenue(raw_revenue),
        time_taken=clean_time_taken(raw_time),
        priority=Priority.parse(raw_priority, DEFAULT_PRIORITY) or DEFAULT_PRIORITY,
        status=status,
        notes=clean_notes(raw_notes),
        created_at=created_at,
        completed_at=completed_at,
    )


def normalize_tasks(
    raw_records: Any,
    *,
    now: datetime | None = None,
    id_factory: IdFactory | None = None,
) -> list[Task]:
    """
    Normalize an untrusted batch of records.

    - non-list input is treated as empty
    - ids are unique within the batch (collisions get "-<index>")
    - synthesized timestamps are relative to `now` (default: current UTC time)
    """
    if not isinstance(raw_records, (list, tuple)):
        if raw_records is not None:
            logger.warning("Expected a list of task records, got %s", type(raw_records).__name__)
        return []

    if now is None:
        now = datetime.now(UTC)
    factory = id_factory or new_task_id

    taken: set[str] = set()
    out = [
        normalize_task(raw, idx, now=now, taken_ids=taken, id_factory=factory)
        for idx, raw in enumerate(raw_records)
    ]
    logger.debug("Normalized %d task records", len(out))
    return out
