# src/taskboard/tasks/export.py

from __future__ import annotations

import logging
import math
import re
from collections.abc import Iterable
from pathlib import Path

from .task_models import Task

logger = logging.getLogger(__name__)

CSV_HEADERS = ("id", "title", "revenue", "timeTaken", "priority", "status", "notes")

_NEEDS_QUOTES = re.compile(r'[",\r\n]')


def escape_csv(value: str) -> str:
    """Quote fields containing a comma, quote or line break; double inner quotes."""
    if not _NEEDS_QUOTES.search(value):
        return value
    return '"' + value.replace('"', '""') + '"'


def _format_number(value: float) -> str:
    """100.0 -> "100", 12.5 -> "12.5", nan/inf -> ""."""
    if not math.isfinite(value):
        return ""
    if float(value).is_integer():
        return str(int(value))
    return repr(float(value))


def to_csv(tasks: Iterable[Task]) -> str:
    """
    Render tasks as CSV with a fixed column order.

    Rows are joined with "\\n" (no trailing newline).
    """
    lines = [",".join(CSV_HEADERS)]
    for t in tasks:
        row = (
            t.id,
            t.title,
            _format_number(t.revenue),
            _format_number(t.time_taken),
            t.priority.value,
            t.status.value,
            t.notes,
        )
        lines.append(",".join(escape_csv(v) for v in row))
    return "\n".join(lines)


def write_csv(path: str | Path, tasks: Iterable[Task]) -> Path:
    path = Path(path).expanduser()
    path.parent.mkdir(parents=True, exist_ok=True)
    rows = list(tasks)
    path.write_text(to_csv(rows), "utf-8")
    logger.info("Exported %d tasks to %s", len(rows), path)
    return path
