# src/plan_companion/ai/normalizer.py

"""
Normalization of provider output into typed, advisory annotations.

Nothing here writes to the store. Prioritization entries are correlated with
plans by id or title only for display; applying a suggested priority is a
separate, explicit update.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

from ..core.errors import ProviderError
from ..plans.plan_models import Plan, Priority

logger = logging.getLogger(__name__)

NO_SUGGESTIONS = "No suggestions available."
NO_PLAN = "No plan generated."
UNTITLED = "Untitled task"

_PRIORITY_ALIASES = {
    "high": Priority.HIGH,
    "urgent": Priority.HIGH,
    "medium": Priority.MEDIUM,
    "normal": Priority.MEDIUM,
    "med": Priority.MEDIUM,
    "low": Priority.LOW,
}


@dataclass(frozen=True, slots=True)
class PrioritizedEntry:
    """One advisory entry. Every field may be absent."""

    id: str | None = None
    title: str | None = None
    priority: Priority | None = None
    priority_label: str | None = None
    reason: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "priority": self.priority.value if self.priority else None,
            "priorityLabel": self.priority_label,
            "reason": self.reason,
        }


def normalize_text(raw: str | None, fallback: str) -> str:
    """Pass provider text through unchanged; blank output becomes `fallback`."""
    if raw is None or not str(raw).strip():
        return fallback
    return str(raw)


def _extract_json(raw: str) -> str:
    raw = raw.strip()
    if raw.startswith("```"):
        # ```json ... ``` fences
        raw = raw.strip("`")
        if raw[:4].lower() == "json":
            raw = raw[4:]
        raw = raw.strip()
    if (raw.startswith("{") and raw.endswith("}")) or (raw.startswith("[") and raw.endswith("]")):
        return raw
    first = raw.find("{")
    last = raw.rfind("}")
    if first != -1 and last != -1 and last > first:
        return raw[first : last + 1]
    return raw


def _opt_str(v: Any) -> str | None:
    if v is None or isinstance(v, (dict, list, bool)):
        return None
    s = str(v).strip()
    return s or None


def parse_priority(label: Any) -> Priority | None:
    s = _opt_str(label)
    if s is None:
        return None
    return _PRIORITY_ALIASES.get(s.lower())


def parse_entry(item: Any) -> PrioritizedEntry:
    if not isinstance(item, dict):
        return PrioritizedEntry()
    label = _opt_str(item.get("priority"))
    return PrioritizedEntry(
        id=_opt_str(item.get("id")),
        title=_opt_str(item.get("title", item.get("name"))),
        priority=parse_priority(label),
        priority_label=label,
        reason=_opt_str(item.get("reason", item.get("rationale"))),
    )


def normalize_prioritization(raw: str | None) -> list[PrioritizedEntry]:
    """
    Parse the provider's prioritization payload.

    Accepted shapes: {"prioritized": [...]} or a bare list. A JSON object
    without "prioritized" yields an empty list. Anything that does not parse
    as one of those shapes raises ProviderError; nothing is guessed.
    """
    text = (raw or "").strip()
    if not text:
        return []

    try:
        data = json.loads(_extract_json(text))
    except json.JSONDecodeError as e:
        logger.warning("Prioritization JSON parse failed. Raw=%r", text[:2000])
        raise ProviderError("AI returned an unreadable prioritization") from e

    if isinstance(data, dict):
        items = data.get("prioritized", [])
    else:
        items = data

    if items is None:
        return []
    if not isinstance(items, list):
        logger.warning("Prioritization payload has unexpected shape: %s", type(items).__name__)
        raise ProviderError("AI returned an unreadable prioritization")

    return [parse_entry(item) for item in items]


def match_plan(entry: PrioritizedEntry, plans: Sequence[Plan]) -> Plan | None:
    """Correlate an entry with a plan by id, falling back to a case-insensitive title match."""
    if entry.id:
        for plan in plans:
            if plan.id == entry.id:
                return plan
    if entry.title:
        wanted = entry.title.casefold()
        for plan in plans:
            if plan.title.casefold() == wanted:
                return plan
    return None


def display_title(entry: PrioritizedEntry, plans: Sequence[Plan] = ()) -> str:
    plan = match_plan(entry, plans) if plans else None
    if plan is not None:
        return plan.title
    return entry.title or UNTITLED
