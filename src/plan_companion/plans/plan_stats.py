# src/plan_companion/plans/plan_stats.py

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Any

from .plan_filters import week_bounds
from .plan_models import Category, Plan, Status


def completion_rate(completed: int, total: int) -> int:
    """Whole-number percentage, half rounded up; 0 for an empty collection."""
    if total <= 0:
        return 0
    return (200 * completed + total) // (2 * total)


def is_overdue(plan: Plan, today: date) -> bool:
    """Pending, with a parseable deadline strictly before today."""
    if plan.status != Status.PENDING:
        return False
    d = plan.deadline_date
    return d is not None and d < today


@dataclass(frozen=True, slots=True)
class StatsSnapshot:
    total: int = 0
    completed: int = 0
    pending: int = 0
    overdue: int = 0
    completion_rate: int = 0

    def to_dict(self) -> dict[str, int]:
        return {
            "total": self.total,
            "completed": self.completed,
            "pending": self.pending,
            "overdue": self.overdue,
            "completionRate": self.completion_rate,
        }


def aggregate(plans: Iterable[Plan], *, today: date | None = None) -> StatsSnapshot:
    if today is None:
        today = date.today()

    total = completed = pending = overdue = 0
    for plan in plans:
        total += 1
        if plan.status == Status.COMPLETED:
            completed += 1
        elif plan.status == Status.PENDING:
            pending += 1
            if is_overdue(plan, today):
                overdue += 1

    return StatsSnapshot(
        total=total,
        completed=completed,
        pending=pending,
        overdue=overdue,
        completion_rate=completion_rate(completed, total),
    )


def category_breakdown(plans: Iterable[Plan]) -> list[dict[str, Any]]:
    """Per-category totals for every category, in enum order."""
    counts = {c: [0, 0] for c in Category}
    for plan in plans:
        row = counts[plan.category]
        row[0] += 1
        if plan.status == Status.COMPLETED:
            row[1] += 1

    return [
        {
            "category": c.value,
            "total": total,
            "completed": done,
            "completionRate": completion_rate(done, total),
        }
        for c, (total, done) in counts.items()
    ]


def weekly_breakdown(
    plans: Iterable[Plan],
    *,
    today: date | None = None,
    week_start: int = 0,
) -> list[dict[str, Any]]:
    """Seven rows, one per day of the current week, counting plans due that day."""
    if today is None:
        today = date.today()
    start, _ = week_bounds(today, week_start)
    days = [start + timedelta(days=i) for i in range(7)]
    counts = {d: [0, 0] for d in days}

    for plan in plans:
        d = plan.deadline_date
        if d not in counts:
            continue
        counts[d][0] += 1
        if plan.status == Status.COMPLETED:
            counts[d][1] += 1

    return [
        {
            "date": d.isoformat(),
            "name": d.strftime("%a"),
            "total": counts[d][0],
            "completed": counts[d][1],
        }
        for d in days
    ]
