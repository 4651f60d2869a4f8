# src/plan_companion/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- wires concrete implementations into AppState (stores, sessions, text provider).
"""

from __future__ import annotations

import logging

from ..ai.advisor import Advisor
from ..auth.gate import AuthGate
from ..auth.sessions import InMemorySessionStore
from ..auth.user_store import UserStore
from ..config import get_settings
from ..core.ports import TextProvider
from ..core.state import AppState
from ..llm.client import OpenAITextProvider, friendly_llm_error_message
from ..llm.offline import OfflineTextProvider
from ..plans.plan_service import PlanService
from ..plans.plan_store import PlanStore

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.db_path.parent.mkdir(parents=True, exist_ok=True)


def create_initial_state(*, settings=None, provider: TextProvider | None = None) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings (and the provider) injectable makes the app easier to test
    and avoids hidden global config reads. If settings is None, falls back to
    get_settings().
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    if provider is None:
        try:
            provider = OpenAITextProvider(settings)
        except RuntimeError as e:
            # Demos / local runs without external services.
            logger.warning("%s Falling back to offline AI.", friendly_llm_error_message(e))
            provider = OfflineTextProvider()

    return AppState(
        settings=settings,
        plans=PlanService(PlanStore(settings.db_path), week_start=settings.week_start),
        auth=AuthGate(
            UserStore(settings.db_path),
            InMemorySessionStore(ttl_seconds=settings.session_ttl_seconds),
            hash_iterations=settings.password_hash_iterations,
        ),
        advisor=Advisor(
            provider,
            timeout_seconds=settings.llm_timeout_seconds,
            max_workers=settings.llm_max_workers,
        ),
    )
