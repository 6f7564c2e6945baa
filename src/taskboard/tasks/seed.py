# src/taskboard/tasks/seed.py

"""Placeholder sales dataset used when the configured source yields nothing."""

from __future__ import annotations

import random
from datetime import UTC, datetime, timedelta

from .normalize import IdFactory, format_timestamp, normalize_tasks
from .task_models import Priority, Task, TaskStatus

_ACTIONS = (
    "Follow up with",
    "Prepare proposal for",
    "Demo for",
    "Negotiate renewal with",
    "Discovery call with",
    "Send quote to",
    "Onboard",
    "Upsell to",
)

_ACCOUNTS = (
    "Acme Corp",
    "Globex",
    "Initech",
    "Umbrella Ltd",
    "Stark Industries",
    "Wayne Enterprises",
    "Hooli",
    "Soylent",
    "Vandelay Imports",
    "Wonka Foods",
)

_NOTES = (
    "",
    "",
    "Decision maker on vacation until next week.",
    "Asked for a discount, check with finance.",
    "Warm lead from the webinar.",
    'Wants a "pilot" first, then annual plan.',
    "Budget approved, waiting on legal.",
)


def generate_sales_tasks(
    count: int = 50,
    *,
    rng: random.Random | None = None,
    now: datetime | None = None,
    id_factory: IdFactory | None = None,
) -> list[Task]:
    """
    Build `count` plausible sales tasks.

    Records go through normalize_tasks, so the result satisfies the same
    invariants as loaded data.
    """
    rng = rng or random.Random()
    now = now or datetime.now(UTC)

    records: list[dict[str, object]] = []
    for i in range(max(0, int(count))):
        created = now - timedelta(days=i + 1, hours=rng.randint(0, 23))
        status = rng.choice(list(TaskStatus))
        record: dict[str, object] = {
            "id": f"seed-{i + 1:03d}",
            "title": f"{rng.choice(_ACTIONS)} {rng.choice(_ACCOUNTS)}",
            "revenue": rng.randrange(0, 25_001, 50),
            "timeTaken": rng.randint(1, 40),
            "priority": rng.choice(list(Priority)).value,
            "status": status.value,
            "notes": rng.choice(_NOTES),
            "createdAt": format_timestamp(created),
        }
        if status is TaskStatus.DONE:
            record["completedAt"] = format_timestamp(created + timedelta(days=rng.randint(1, 5)))
        records.append(record)

    return normalize_tasks(records, now=now, id_factory=id_factory)
