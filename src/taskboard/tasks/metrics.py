# src/taskboard/tasks/metrics.py

"""
Derived metrics.

Every function here is total: empty collections, zero time and non-finite
intermediate values resolve to 0 (aggregates) or None (per-task ROI).
Nothing returned to a caller is ever inf or nan.
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Sequence
from dataclasses import fields

from .task_models import INITIAL_METRICS, DerivedTask, Metrics, PerformanceGrade, Task, TaskStatus

# Grade thresholds on average ROI (revenue per hour).
EXCELLENT_ROI_ABOVE = 500.0
GOOD_ROI_FROM = 200.0

_TASK_FIELDS = tuple(f.name for f in fields(Task))


def _finite_or_zero(value: float) -> float:
    return value if math.isfinite(value) else 0.0


def compute_roi(task: Task) -> float | None:
    revenue = task.revenue
    time_taken = task.time_taken
    if not isinstance(revenue, (int, float)) or not math.isfinite(revenue):
        return None
    if not isinstance(time_taken, (int, float)) or not math.isfinite(time_taken) or time_taken <= 0:
        return None
    roi = revenue / time_taken
    return roi if math.isfinite(roi) else None


def with_derived(task: Task) -> DerivedTask:
    values = {name: getattr(task, name) for name in _TASK_FIELDS}
    return DerivedTask(**values, roi=compute_roi(task))


def compute_total_revenue(tasks: Iterable[Task]) -> float:
    return _finite_or_zero(sum((t.revenue for t in tasks if math.isfinite(t.revenue)), 0.0))


def compute_total_time_taken(tasks: Iterable[Task]) -> int:
    return sum(t.time_taken for t in tasks)


def compute_time_efficiency(tasks: Sequence[Task]) -> float:
    """Share of time (percent) spent on Done tasks; 0 when no time was logged."""
    total = compute_total_time_taken(tasks)
    if total <= 0:
        return 0.0
    done = sum(t.time_taken for t in tasks if t.status is TaskStatus.DONE)
    return _finite_or_zero(done / total * 100.0)


def compute_revenue_per_hour(tasks: Sequence[Task]) -> float:
    total_time = compute_total_time_taken(tasks)
    if total_time <= 0:
        return 0.0
    return _finite_or_zero(compute_total_revenue(tasks) / total_time)


def compute_average_roi(tasks: Iterable[Task]) -> float:
    """Mean over tasks with an available ROI; tasks without one are left out."""
    rois = [roi for roi in (compute_roi(t) for t in tasks) if roi is not None]
    if not rois:
        return 0.0
    return _finite_or_zero(sum(rois) / len(rois))


def compute_performance_grade(avg_roi: float) -> PerformanceGrade:
    """
    avg_roi > 500         -> Excellent
    200 <= avg_roi <= 500 -> Good
    otherwise             -> Needs Improvement (nan/inf included)
    """
    if not isinstance(avg_roi, (int, float)) or not math.isfinite(avg_roi):
        return PerformanceGrade.NEEDS_IMPROVEMENT
    if avg_roi > EXCELLENT_ROI_ABOVE:
        return PerformanceGrade.EXCELLENT
    if avg_roi >= GOOD_ROI_FROM:
        return PerformanceGrade.GOOD
    return PerformanceGrade.NEEDS_IMPROVEMENT


def compute_metrics(tasks: Sequence[Task]) -> Metrics:
    if not tasks:
        return INITIAL_METRICS
    average_roi = compute_average_roi(tasks)
    return Metrics(
        total_revenue=compute_total_revenue(tasks),
        total_time_taken=compute_total_time_taken(tasks),
        time_efficiency_pct=compute_time_efficiency(tasks),
        revenue_per_hour=compute_revenue_per_hour(tasks),
        average_roi=average_roi,
        performance_grade=compute_performance_grade(average_roi),
    )


def format_roi(roi: float | None, digits: int = 2) -> str:
    if roi is None:
        return "n/a"
    return f"{roi:.{digits}f}"
