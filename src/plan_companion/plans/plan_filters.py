# src/plan_companion/plans/plan_filters.py

"""
Dashboard filter pipeline.

search -> category -> mode -> ordering.

The pipeline is pure and total: it never mutates its input and never raises
for any combination of plans and criteria. Deadlines that do not parse simply
fall out of the date-based modes.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import date, timedelta

from .plan_models import ALL_CATEGORIES, FilterCriteria, FilterMode, Plan, Status


def week_bounds(today: date, week_start: int = 0) -> tuple[date, date]:
    """First and last calendar day of the week containing `today` (0 = Monday)."""
    offset = (today.weekday() - week_start) % 7
    start = today - timedelta(days=offset)
    return start, start + timedelta(days=6)


def _matches_search(plan: Plan, query: str) -> bool:
    if plan.title and query in plan.title.lower():
        return True
    return bool(plan.description) and query in plan.description.lower()


def _matches_mode(plan: Plan, mode: FilterMode, today: date, week: tuple[date, date]) -> bool:
    if mode == FilterMode.PENDING:
        return plan.status == Status.PENDING
    if mode == FilterMode.COMPLETED:
        return plan.status == Status.COMPLETED
    if mode in (FilterMode.TODAY, FilterMode.WEEK):
        d = plan.deadline_date
        if d is None:
            return False
        if mode == FilterMode.TODAY:
            return d == today
        return week[0] <= d <= week[1]
    return True


def sort_key(plan: Plan) -> tuple[int, int]:
    return (1 if plan.status == Status.COMPLETED else 0, plan.priority.rank)


def filter_plans(
    plans: Iterable[Plan],
    mode: FilterMode | str = FilterMode.ALL,
    search: str = "",
    category: str = ALL_CATEGORIES,
    *,
    today: date | None = None,
    week_start: int = 0,
) -> list[Plan]:
    """
    Reduce `plans` to the ordered subset the dashboard shows.

    Ordering: non-completed before completed, then high < medium < low.
    `sorted` is stable, so ties keep their input order.
    """
    if today is None:
        today = date.today()
    mode = FilterMode.from_raw(mode)
    query = (search or "").lower()
    category = category or ALL_CATEGORIES
    week = week_bounds(today, week_start)

    out: list[Plan] = []
    for plan in plans:
        if query and not _matches_search(plan, query):
            continue
        if category != ALL_CATEGORIES and plan.category != category:
            continue
        if not _matches_mode(plan, mode, today, week):
            continue
        out.append(plan)

    return sorted(out, key=sort_key)


def apply_criteria(
    plans: Iterable[Plan],
    criteria: FilterCriteria,
    *,
    today: date | None = None,
    week_start: int = 0,
) -> list[Plan]:
    return filter_plans(
        plans,
        criteria.mode,
        criteria.search,
        criteria.category,
        today=today,
        week_start=week_start,
    )
