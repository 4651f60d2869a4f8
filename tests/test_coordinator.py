# tests/test_coordinator.py

from __future__ import annotations

from datetime import date

import pytest

from plan_companion.ai.normalizer import PrioritizedEntry
from plan_companion.client.coordinator import MutationCoordinator, MutationKind, MutationPhase
from plan_companion.client.view_cache import PLANS_QUERY
from plan_companion.core.errors import InternalError, NotFound, ProviderError
from plan_companion.plans.plan_models import FilterCriteria, FilterMode, Priority, Status

from .fakes import FakeBackend, make_plan


def _ops(backend: FakeBackend) -> list[str]:
    return [op for op, _ in backend.calls]


@pytest.mark.asyncio
async def test_load_plans_uses_cache_until_invalidated() -> None:
    backend = FakeBackend([make_plan(title="a")])
    coord = MutationCoordinator(backend)

    await coord.load_plans()
    await coord.load_plans()
    assert _ops(backend) == ["list"]

    coord.cache.invalidate(PLANS_QUERY)
    await coord.load_plans()
    assert _ops(backend) == ["list", "list"]


@pytest.mark.asyncio
async def test_create_success_closes_dialog_invalidates_and_notifies() -> None:
    backend = FakeBackend()
    seen = []
    coord = MutationCoordinator(backend, notify=seen.append)
    await coord.load_plans()
    coord.open_create_dialog()

    plan = await coord.submit({"title": "New"})

    assert plan is not None and plan.title == "New"
    assert coord.dialogs.edit_open is False
    assert not coord.cache.is_fresh(PLANS_QUERY)
    assert coord.trackers[MutationKind.CREATE].phase == MutationPhase.SUCCESS
    assert [(n.title, n.variant) for n in seen] == [("Task created", "default")]

    # view changes only after the re-fetch
    assert coord.plans == []
    await coord.load_plans()
    assert [p.title for p in coord.plans] == ["New"]


@pytest.mark.asyncio
async def test_failed_mutation_keeps_view_and_dialog() -> None:
    existing = make_plan(title="Keep me")
    backend = FakeBackend([existing])
    backend.failures["update"] = InternalError("Failed to update plan")
    coord = MutationCoordinator(backend)
    await coord.load_plans()
    coord.open_edit_dialog(existing)

    result = await coord.submit({"title": "Changed"})

    assert result is None
    tracker = coord.trackers[MutationKind.UPDATE]
    assert tracker.phase == MutationPhase.ERROR
    assert tracker.error_kind == "internal"
    assert not tracker.is_pending
    assert coord.dialogs.edit_open is True
    assert coord.cache.is_fresh(PLANS_QUERY)
    assert [p.title for p in coord.plans] == ["Keep me"]
    assert [(n.title, n.variant) for n in coord.notifications] == [("Error", "destructive")]
    # no retry
    assert _ops(backend).count("update") == 1


@pytest.mark.asyncio
async def test_submit_routes_to_update_when_editing() -> None:
    plan = make_plan(title="Old")
    backend = FakeBackend([plan])
    coord = MutationCoordinator(backend)
    coord.open_edit_dialog(plan)

    updated = await coord.submit({"title": "Renamed"})

    assert updated.title == "Renamed"
    assert backend.calls == [("update", (plan.id, {"title": "Renamed"}))]
    assert coord.notifications[-1].title == "Task updated"


@pytest.mark.asyncio
async def test_toggle_status_sends_only_status() -> None:
    plan = make_plan()
    backend = FakeBackend([plan])
    coord = MutationCoordinator(backend)

    updated = await coord.toggle_status(plan.id, Status.COMPLETED)

    assert updated.status == Status.COMPLETED
    assert backend.calls == [("update", (plan.id, {"status": "completed"}))]


@pytest.mark.asyncio
async def test_delete_flow_through_confirmation_dialog() -> None:
    plan = make_plan()
    backend = FakeBackend([plan])
    coord = MutationCoordinator(backend)

    assert await coord.confirm_delete() is False
    coord.request_delete(plan.id)
    assert await coord.confirm_delete() is True

    assert coord.dialogs.delete_open is False
    assert coord.dialogs.deleting_id is None
    assert plan.id not in backend.plans
    assert coord.notifications[-1].title == "Task deleted"


@pytest.mark.asyncio
async def test_failed_delete_keeps_confirmation_open() -> None:
    plan = make_plan()
    backend = FakeBackend([plan])
    backend.failures["delete"] = NotFound("Plan not found")
    coord = MutationCoordinator(backend)
    coord.request_delete(plan.id)

    assert await coord.confirm_delete() is False
    assert coord.dialogs.delete_open is True
    assert coord.trackers[MutationKind.DELETE].error_kind == "not_found"


@pytest.mark.asyncio
async def test_failed_refetch_keeps_last_known_view() -> None:
    backend = FakeBackend([make_plan(title="a")])
    coord = MutationCoordinator(backend)
    await coord.load_plans()

    coord.cache.invalidate(PLANS_QUERY)
    backend.failures["list"] = InternalError("Failed to fetch plans")

    assert [p.title for p in await coord.load_plans()] == ["a"]
    assert [(n.title, n.description, n.variant) for n in coord.notifications] == [
        ("Error", "Failed to load tasks. Please try again.", "destructive")
    ]
    assert coord.trackers[MutationKind.LOAD].error_kind == "internal"
    assert not coord.cache.is_fresh(PLANS_QUERY)

    # next read tries again and recovers
    del backend.failures["list"]
    assert [p.title for p in await coord.load_plans()] == ["a"]
    assert coord.cache.is_fresh(PLANS_QUERY)
    assert len(coord.notifications) == 1


@pytest.mark.asyncio
async def test_auto_prioritize_success_and_failure() -> None:
    backend = FakeBackend()
    backend.prioritized = [PrioritizedEntry(title="x", priority=Priority.HIGH, priority_label="High")]
    coord = MutationCoordinator(backend)

    assert [e.title for e in await coord.auto_prioritize()] == ["x"]

    backend.failures["prioritize"] = ProviderError()
    assert await coord.auto_prioritize() == []
    assert coord.prioritized == []
    assert coord.trackers[MutationKind.SORT].error_kind == "provider"
    assert coord.notifications[-1].description == "Failed to prioritize tasks. Please try again."


@pytest.mark.asyncio
async def test_ai_results_never_touch_plans_cache() -> None:
    backend = FakeBackend([make_plan()])
    coord = MutationCoordinator(backend)
    await coord.load_plans()

    assert await coord.suggest() == backend.suggestion_text
    assert await coord.plan_day("light day") == backend.plan_text
    assert coord.cache.is_fresh(PLANS_QUERY)
    assert ("plan_day", "light day") in backend.calls
    assert coord.notifications == []


@pytest.mark.asyncio
async def test_dashboard_filters_view_but_stats_cover_everything() -> None:
    today = date(2024, 5, 15)
    backend = FakeBackend(
        [
            make_plan(title="today", deadline="2024-05-15"),
            make_plan(title="done", status=Status.COMPLETED),
            make_plan(title="late", deadline="2024-05-01"),
        ]
    )
    coord = MutationCoordinator(backend)
    await coord.load_plans()

    view = coord.dashboard(FilterCriteria(mode=FilterMode.TODAY), today=today)

    assert [p.title for p in view.plans] == ["today"]
    assert (view.stats.total, view.stats.completed, view.stats.overdue) == (3, 1, 1)


@pytest.mark.asyncio
async def test_invalid_status_is_a_tracked_validation_error() -> None:
    plan = make_plan()
    backend = FakeBackend([plan])
    coord = MutationCoordinator(backend)

    assert await coord.toggle_status(plan.id, "archived") is None

    assert backend.calls == []
    assert coord.trackers[MutationKind.UPDATE].error_kind == "validation"
    assert [(n.title, n.variant) for n in coord.notifications] == [("Error", "destructive")]
