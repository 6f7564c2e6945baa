# src/taskboard/tasks/task_models.py

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Any


class Priority(StrEnum):
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"

    @classmethod
    def parse(cls, raw: Any, default: Priority | None = None) -> Priority | None:
        """Exact match against the wire values; anything else yields `default`."""
        if isinstance(raw, str):
            try:
                return cls(raw)
            except ValueError:
                return default
        return default


class TaskStatus(StrEnum):
    """
    Task lifecycle status.

    Notes:
    - the wire spelling of IN_PROGRESS has a space ("In Progress")
    - completed_at is tied to DONE (see TaskStore)
    """

    TODO = "Todo"
    IN_PROGRESS = "In Progress"
    DONE = "Done"

    @classmethod
    def parse(cls, raw: Any, default: TaskStatus | None = None) -> TaskStatus | None:
        if isinstance(raw, str):
            try:
                return cls(raw)
            except ValueError:
                return default
        return default


class PerformanceGrade(StrEnum):
    # Ordered from worst to best.
    NEEDS_IMPROVEMENT = "Needs Improvement"
    GOOD = "Good"
    EXCELLENT = "Excellent"


@dataclass(frozen=True, slots=True)
class Task:
    id: str
    title: str
    revenue: float
    time_taken: int
    priority: Priority
    status: TaskStatus
    notes: str
    created_at: str

    completed_at: str | None = None

    def to_record(self) -> dict[str, Any]:
        """camelCase dict, same shape the loader accepts."""
        out: dict[str, Any] = {
            "id": self.id,
            "title": self.title,
            "revenue": self.revenue,
            "timeTaken": self.time_taken,
            "priority": self.priority.value,
            "status": self.status.value,
            "notes": self.notes,
            "createdAt": self.created_at,
        }
        if self.completed_at is not None:
            out["completedAt"] = self.completed_at
        return out


@dataclass(frozen=True, slots=True)
class DerivedTask(Task):
    # None when ROI is not available (never inf/nan).
    roi: float | None = None


@dataclass(frozen=True, slots=True)
class Metrics:
    total_revenue: float
    total_time_taken: int
    time_efficiency_pct: float
    revenue_per_hour: float
    average_roi: float
    performance_grade: PerformanceGrade


INITIAL_METRICS = Metrics(
    total_revenue=0.0,
    total_time_taken=0,
    time_efficiency_pct=0.0,
    revenue_per_hour=0.0,
    average_roi=0.0,
    performance_grade=PerformanceGrade.NEEDS_IMPROVEMENT,
)
