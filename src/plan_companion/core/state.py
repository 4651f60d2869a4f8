# src/plan_companion/core/state.py

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ..ai.advisor import Advisor
from ..auth.gate import AuthGate
from ..plans.plan_service import PlanService


@dataclass
class AppState:
    """Everything a request handler needs, wired once at startup."""

    settings: Any
    plans: PlanService
    auth: AuthGate
    advisor: Advisor
