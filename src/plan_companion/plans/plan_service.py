# src/plan_companion/plans/plan_service.py

"""
Owner-scoped plan operations.

This is the operation boundary between the HTTP layer and the store:
- input is already validated (web/schemas.py),
- the store runs in a worker thread so request handlers never block the loop,
- store failures are logged here and surfaced as InternalError with a
  generic message; a missing / foreign id becomes NotFound.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import date
from typing import Any

from ..core.errors import InternalError, NotFound
from ..core.ports import PlanRepo
from .plan_models import Plan
from .plan_stats import aggregate, category_breakdown, weekly_breakdown

logger = logging.getLogger(__name__)


class PlanService:
    def __init__(self, store: PlanRepo, *, week_start: int = 0) -> None:
        self._store = store
        self._week_start = week_start

    async def list_plans(self, owner_id: str) -> list[Plan]:
        try:
            return await asyncio.to_thread(self._store.list_plans, owner_id)
        except Exception as e:
            logger.exception("list_plans failed owner=%s", owner_id)
            raise InternalError("Failed to fetch plans") from e

    async def get_plan(self, owner_id: str, plan_id: str) -> Plan:
        try:
            plan = await asyncio.to_thread(self._store.get_plan, plan_id, owner_id)
        except Exception as e:
            logger.exception("get_plan failed id=%s owner=%s", plan_id, owner_id)
            raise InternalError("Failed to fetch plan") from e
        if plan is None:
            raise NotFound("Plan not found")
        return plan

    async def create_plan(self, owner_id: str, data: dict[str, Any]) -> Plan:
        try:
            plan = await asyncio.to_thread(self._store.create_plan, owner_id, **data)
        except Exception as e:
            logger.exception("create_plan failed owner=%s", owner_id)
            raise InternalError("Failed to create plan") from e
        logger.info("Plan created id=%s owner=%s", plan.id, owner_id)
        return plan

    async def update_plan(self, owner_id: str, plan_id: str, changes: dict[str, Any]) -> Plan:
        try:
            plan = await asyncio.to_thread(self._store.update_plan, plan_id, owner_id, changes)
        except Exception as e:
            logger.exception("update_plan failed id=%s owner=%s", plan_id, owner_id)
            raise InternalError("Failed to update plan") from e
        if plan is None:
            raise NotFound("Plan not found")
        logger.info("Plan updated id=%s fields=%s", plan_id, sorted(changes))
        return plan

    async def delete_plan(self, owner_id: str, plan_id: str) -> None:
        try:
            deleted = await asyncio.to_thread(self._store.delete_plan, plan_id, owner_id)
        except Exception as e:
            logger.exception("delete_plan failed id=%s owner=%s", plan_id, owner_id)
            raise InternalError("Failed to delete plan") from e
        if not deleted:
            raise NotFound("Plan not found")
        logger.info("Plan deleted id=%s owner=%s", plan_id, owner_id)

    async def stats(self, owner_id: str, *, today: date | None = None) -> dict[str, Any]:
        plans = await self.list_plans(owner_id)
        return {
            **aggregate(plans, today=today).to_dict(),
            "categories": category_breakdown(plans),
            "week": weekly_breakdown(plans, today=today, week_start=self._week_start),
        }
