# src/plan_companion/ai/advisor.py

"""
AI operations: suggest, auto-prioritize, daily plan.

All three read the caller's plans and return advisory output; none of them
writes to the store.

Timeout policy: each provider call runs on the advisor's own bounded thread
pool and is bounded by `timeout_seconds` (asyncio.wait_for). A timeout is a
ProviderError like any other provider failure. There is no retry. A call that
timed out may keep its pool thread until the provider gives up; the default
executor (store and password hashing) is never used for provider calls.
"""

from __future__ import annotations

import asyncio
import functools
import logging
from collections.abc import Sequence
from concurrent.futures import ThreadPoolExecutor

from ..core.errors import ProviderError
from ..core.ports import TextProvider
from ..llm import prompts
from ..plans.plan_models import Plan
from .normalizer import NO_PLAN, NO_SUGGESTIONS, PrioritizedEntry, normalize_prioritization, normalize_text

logger = logging.getLogger(__name__)


class Advisor:
    def __init__(self, provider: TextProvider, *, timeout_seconds: float = 30.0, max_workers: int = 4) -> None:
        self._provider = provider
        self._timeout = float(timeout_seconds)
        self._executor = ThreadPoolExecutor(max_workers=max(1, int(max_workers)), thread_name_prefix="ai-provider")

    def close(self) -> None:
        """Stop accepting provider calls; queued ones are cancelled, running ones are not waited for."""
        self._executor.shutdown(wait=False, cancel_futures=True)

    async def _complete(self, op: str, system_prompt: str, user_prompt: str, *, json_mode: bool = False) -> str:
        call = functools.partial(
            self._provider.complete,
            [{"role": "user", "content": user_prompt}],
            system_prompt,
            json_mode=json_mode,
        )
        try:
            loop = asyncio.get_running_loop()
            return await asyncio.wait_for(loop.run_in_executor(self._executor, call), timeout=self._timeout)
        except TimeoutError as e:
            logger.warning("AI %s timed out after %.1fs", op, self._timeout)
            raise ProviderError("AI request timed out") from e
        except Exception as e:
            logger.exception("AI %s failed", op)
            raise ProviderError() from e

    async def suggest(self, plans: Sequence[Plan]) -> str:
        raw = await self._complete("suggest", prompts.SUGGEST_SYSTEM_PROMPT, prompts.suggest_prompt(plans))
        return normalize_text(raw, NO_SUGGESTIONS)

    async def prioritize(self, plans: Sequence[Plan]) -> list[PrioritizedEntry]:
        raw = await self._complete(
            "prioritize",
            prompts.PRIORITIZE_SYSTEM_PROMPT,
            prompts.prioritize_prompt(plans),
            json_mode=True,
        )
        entries = normalize_prioritization(raw)
        logger.info("AI prioritize: %d entries for %d plans", len(entries), len(plans))
        return entries

    async def plan_day(self, plans: Sequence[Plan], user_prompt: str) -> str:
        raw = await self._complete(
            "plan",
            prompts.PLANNER_SYSTEM_PROMPT,
            prompts.planner_prompt(plans, user_prompt),
        )
        return normalize_text(raw, NO_PLAN)
