# tests/fakes.py

from __future__ import annotations

import time
import uuid
from dataclasses import replace
from typing import Any

from plan_companion.ai.normalizer import PrioritizedEntry
from plan_companion.core.ports import ChatMessage
from plan_companion.plans.plan_models import Category, Plan, Priority, Status


def _coerce(data: dict[str, Any]) -> dict[str, Any]:
    out = dict(data)
    for key, enum in (("priority", Priority), ("category", Category), ("status", Status)):
        if key in out:
            out[key] = enum.from_db(str(out[key]))
    return out


def make_plan(**overrides: Any) -> Plan:
    """Plan with sensible defaults; override any field by keyword."""
    base = Plan(
        id=str(uuid.uuid4()),
        owner_id="owner-1",
        title="Task",
        description=None,
        priority=Priority.MEDIUM,
        category=Category.PERSONAL,
        status=Status.PENDING,
        deadline=None,
        created_at="2024-01-01T00:00:00+00:00",
    )
    return replace(base, **_coerce(overrides))


class FakeTextProvider:
    """
    Deterministic text provider for unit tests.

    - Captures calls for assertions
    - Returns `next_text`, or raises `error` when set
    - `delay` blocks the calling thread (used for timeout tests)
    """

    def __init__(self, next_text: str = "ok", *, error: Exception | None = None, delay: float = 0.0) -> None:
        self.next_text = next_text
        self.error = error
        self.delay = delay
        self.calls: list[tuple[list[ChatMessage], str, bool]] = []

    def complete(self, messages: list[ChatMessage], system_prompt: str, *, json_mode: bool = False) -> str:
        self.calls.append((messages, system_prompt, json_mode))
        if self.delay:
            time.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return self.next_text


class FakeBackend:
    """
    In-memory PlanBackend used by coordinator unit tests.

    `failures` maps an operation name ("create", "update", "delete", "list",
    "suggest", "prioritize", "plan_day") to the exception it should raise.
    """

    def __init__(self, plans: list[Plan] | None = None) -> None:
        self.plans: dict[str, Plan] = {p.id: p for p in plans or []}
        self.failures: dict[str, Exception] = {}
        self.calls: list[tuple[str, Any]] = []
        self.suggestion_text = "Do the urgent thing first."
        self.prioritized: list[PrioritizedEntry] = []
        self.plan_text = "- 09:00 deep work"

    def _maybe_fail(self, op: str) -> None:
        err = self.failures.get(op)
        if err is not None:
            raise err

    async def list_plans(self) -> list[Plan]:
        self.calls.append(("list", None))
        self._maybe_fail("list")
        return list(self.plans.values())

    async def create_plan(self, data: dict[str, Any]) -> Plan:
        self.calls.append(("create", data))
        self._maybe_fail("create")
        plan = make_plan(**data)
        self.plans[plan.id] = plan
        return plan

    async def update_plan(self, plan_id: str, data: dict[str, Any]) -> Plan:
        self.calls.append(("update", (plan_id, data)))
        self._maybe_fail("update")
        plan = replace(self.plans[plan_id], **_coerce(data))
        self.plans[plan_id] = plan
        return plan

    async def delete_plan(self, plan_id: str) -> None:
        self.calls.append(("delete", plan_id))
        self._maybe_fail("delete")
        del self.plans[plan_id]

    async def suggest(self) -> str:
        self.calls.append(("suggest", None))
        self._maybe_fail("suggest")
        return self.suggestion_text

    async def prioritize(self) -> list[PrioritizedEntry]:
        self.calls.append(("prioritize", None))
        self._maybe_fail("prioritize")
        return list(self.prioritized)

    async def plan_day(self, prompt: str) -> str:
        self.calls.append(("plan_day", prompt))
        self._maybe_fail("plan_day")
        return self.plan_text
