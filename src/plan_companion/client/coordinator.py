# src/plan_companion/client/coordinator.py

"""
Client-side mutation coordinator.

Holds the client's view of the plan collection and runs every fetch and
mutation through the same lifecycle:

    IDLE -> PENDING -> SUCCESS | ERROR

Key invariants:
- the visible list is never changed speculatively; it only changes when the
  cache is invalidated after a confirmed success and re-fetched,
- on error the previous view stays, one error notification is emitted with a
  generic message, and the failure category is kept on the tracker,
- there is no retry and no queue: concurrent mutations of the same plan are
  sent independently and the last response wins,
- AI operations share the lifecycle but only fill ephemeral annotation state
  (suggestions / prioritized / plan_text); they never write plans.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from datetime import date
from enum import StrEnum
from typing import Any, TypeVar

from ..ai.normalizer import PrioritizedEntry
from ..core.errors import AppError, ValidationError
from ..core.ports import PlanBackend
from ..plans.plan_filters import apply_criteria
from ..plans.plan_models import FilterCriteria, Plan, Status
from ..plans.plan_stats import StatsSnapshot, aggregate
from .view_cache import PLANS_QUERY, ViewCache

logger = logging.getLogger(__name__)

T = TypeVar("T")


class MutationKind(StrEnum):
    LOAD = "load"
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"
    SUGGEST = "suggest"
    SORT = "sort"
    PLAN = "plan"


class MutationPhase(StrEnum):
    IDLE = "idle"
    PENDING = "pending"
    SUCCESS = "success"
    ERROR = "error"


@dataclass(slots=True)
class MutationTracker:
    phase: MutationPhase = MutationPhase.IDLE
    error_kind: str | None = None
    in_flight: int = 0

    @property
    def is_pending(self) -> bool:
        return self.in_flight > 0


@dataclass(frozen=True, slots=True)
class Notification:
    title: str
    description: str
    variant: str = "default"  # "default" | "destructive"


@dataclass(slots=True)
class DialogState:
    edit_open: bool = False
    editing: Plan | None = None
    delete_open: bool = False
    deleting_id: str | None = None


@dataclass(frozen=True, slots=True)
class DashboardView:
    plans: list[Plan]
    stats: StatsSnapshot
    criteria: FilterCriteria


_SUCCESS_TEXT = {
    MutationKind.CREATE: ("Task created", "Your new task has been added successfully."),
    MutationKind.UPDATE: ("Task updated", "Your task has been updated successfully."),
    MutationKind.DELETE: ("Task deleted", "The task has been removed."),
}

_ERROR_TEXT = {
    MutationKind.LOAD: "Failed to load tasks. Please try again.",
    MutationKind.CREATE: "Failed to create task. Please try again.",
    MutationKind.UPDATE: "Failed to update task. Please try again.",
    MutationKind.DELETE: "Failed to delete task. Please try again.",
    MutationKind.SUGGEST: "Failed to get AI suggestions. Please try again.",
    MutationKind.SORT: "Failed to prioritize tasks. Please try again.",
    MutationKind.PLAN: "Failed to generate a plan. Please try again.",
}


class MutationCoordinator:
    def __init__(
        self,
        backend: PlanBackend,
        *,
        cache: ViewCache | None = None,
        notify: Callable[[Notification], None] | None = None,
        week_start: int = 0,
    ) -> None:
        self._backend = backend
        self.cache = cache or ViewCache()
        self._notify_cb = notify
        self._week_start = week_start

        self.notifications: list[Notification] = []
        self.dialogs = DialogState()
        self.trackers: dict[MutationKind, MutationTracker] = {k: MutationTracker() for k in MutationKind}

        # Ephemeral AI annotations; never authoritative.
        self.suggestions: str | None = None
        self.prioritized: list[PrioritizedEntry] = []
        self.plan_text: str | None = None

    # ---- view ----

    @property
    def plans(self) -> list[Plan]:
        """Last known-good collection (possibly stale)."""
        entry = self.cache.get(PLANS_QUERY)
        return list(entry.value) if entry is not None else []

    async def load_plans(self) -> list[Plan]:
        """Return the cached collection, re-fetching it when missing or stale."""
        if self.cache.is_fresh(PLANS_QUERY):
            return self.plans

        version = self.cache.version(PLANS_QUERY)
        ok, fetched = await self._run(MutationKind.LOAD, self._backend.list_plans)
        if not ok:
            # last known view stays
            return self.plans

        if not self.cache.put(PLANS_QUERY, fetched, version=version):
            logger.debug("Discarded plans fetched before an invalidation")
        return list(fetched)

    def dashboard(self, criteria: FilterCriteria | None = None, *, today: date | None = None) -> DashboardView:
        criteria = criteria or FilterCriteria()
        plans = self.plans
        return DashboardView(
            plans=apply_criteria(plans, criteria, today=today, week_start=self._week_start),
            stats=aggregate(plans, today=today),
            criteria=criteria,
        )

    # ---- dialogs ----

    def open_create_dialog(self) -> None:
        self.dialogs.editing = None
        self.dialogs.edit_open = True

    def open_edit_dialog(self, plan: Plan) -> None:
        self.dialogs.editing = plan
        self.dialogs.edit_open = True

    def close_edit_dialog(self) -> None:
        self.dialogs.edit_open = False
        self.dialogs.editing = None

    def request_delete(self, plan_id: str) -> None:
        self.dialogs.deleting_id = plan_id
        self.dialogs.delete_open = True

    def cancel_delete(self) -> None:
        self.dialogs.delete_open = False
        self.dialogs.deleting_id = None

    # ---- lifecycle ----

    def _notify(self, notification: Notification) -> None:
        self.notifications.append(notification)
        if self._notify_cb is not None:
            self._notify_cb(notification)

    async def _run(self, kind: MutationKind, call: Callable[[], Awaitable[T]]) -> tuple[bool, T | None]:
        tracker = self.trackers[kind]
        tracker.phase = MutationPhase.PENDING
        tracker.error_kind = None
        tracker.in_flight += 1
        try:
            result = await call()
        except AppError as e:
            tracker.phase = MutationPhase.ERROR
            tracker.error_kind = e.kind
            logger.info("%s failed (%s)", kind.value, e.kind)
            self._notify(Notification("Error", _ERROR_TEXT[kind], "destructive"))
            return False, None
        except Exception:
            tracker.phase = MutationPhase.ERROR
            tracker.error_kind = "internal"
            logger.exception("%s failed unexpectedly", kind.value)
            self._notify(Notification("Error", _ERROR_TEXT[kind], "destructive"))
            return False, None
        finally:
            tracker.in_flight -= 1

        tracker.phase = MutationPhase.SUCCESS
        return True, result

    def _on_mutation_success(self, kind: MutationKind) -> None:
        if kind == MutationKind.DELETE:
            self.cancel_delete()
        else:
            self.close_edit_dialog()
        self.cache.invalidate(PLANS_QUERY)
        title, description = _SUCCESS_TEXT[kind]
        self._notify(Notification(title, description))

    # ---- mutations ----

    async def create(self, data: dict[str, Any]) -> Plan | None:
        ok, plan = await self._run(MutationKind.CREATE, lambda: self._backend.create_plan(data))
        if ok:
            self._on_mutation_success(MutationKind.CREATE)
        return plan

    async def update(self, plan_id: str, data: dict[str, Any]) -> Plan | None:
        ok, plan = await self._run(MutationKind.UPDATE, lambda: self._backend.update_plan(plan_id, data))
        if ok:
            self._on_mutation_success(MutationKind.UPDATE)
        return plan

    async def delete(self, plan_id: str) -> bool:
        ok, _ = await self._run(MutationKind.DELETE, lambda: self._backend.delete_plan(plan_id))
        if ok:
            self._on_mutation_success(MutationKind.DELETE)
        return ok

    async def submit(self, data: dict[str, Any]) -> Plan | None:
        """Edit dialog submit: update when editing an existing plan, create otherwise."""
        editing = self.dialogs.editing
        if editing is not None:
            return await self.update(editing.id, data)
        return await self.create(data)

    async def toggle_status(self, plan_id: str, status: Status | str) -> Plan | None:
        async def call() -> Plan:
            try:
                value = Status(status).value
            except ValueError:
                raise ValidationError("Invalid status") from None
            return await self._backend.update_plan(plan_id, {"status": value})

        ok, plan = await self._run(MutationKind.UPDATE, call)
        if ok:
            self._on_mutation_success(MutationKind.UPDATE)
        return plan

    async def confirm_delete(self) -> bool:
        if not self.dialogs.deleting_id:
            return False
        return await self.delete(self.dialogs.deleting_id)

    # ---- ai ----

    async def suggest(self) -> str | None:
        ok, text = await self._run(MutationKind.SUGGEST, self._backend.suggest)
        if ok:
            self.suggestions = text
        return text

    async def auto_prioritize(self) -> list[PrioritizedEntry]:
        ok, entries = await self._run(MutationKind.SORT, self._backend.prioritize)
        self.prioritized = list(entries or []) if ok else []
        return self.prioritized

    async def plan_day(self, prompt: str) -> str | None:
        ok, text = await self._run(MutationKind.PLAN, lambda: self._backend.plan_day(prompt))
        if ok:
            self.plan_text = text
        return text
