# tests/test_normalizer.py

from __future__ import annotations

import json

import pytest

from plan_companion.ai.normalizer import (
    NO_PLAN,
    NO_SUGGESTIONS,
    UNTITLED,
    PrioritizedEntry,
    display_title,
    match_plan,
    normalize_prioritization,
    normalize_text,
)
from plan_companion.core.errors import ProviderError
from plan_companion.plans.plan_models import Priority

from .fakes import make_plan


def test_text_passes_through_unmodified() -> None:
    raw = "  - Do X first\n- Then Y  "
    assert normalize_text(raw, NO_SUGGESTIONS) == raw


@pytest.mark.parametrize("raw", [None, "", "   \n"])
def test_blank_text_uses_fallback(raw) -> None:
    assert normalize_text(raw, NO_SUGGESTIONS) == "No suggestions available."
    assert normalize_text(raw, NO_PLAN) == "No plan generated."


def test_full_entries_are_typed() -> None:
    raw = json.dumps(
        {
            "prioritized": [
                {"id": "p1", "title": "Taxes", "priority": "High", "reason": "Due tomorrow"},
                {"id": 7, "title": "Gym", "priority": "low", "reason": "Flexible"},
            ]
        }
    )

    entries = normalize_prioritization(raw)

    assert entries == [
        PrioritizedEntry(id="p1", title="Taxes", priority=Priority.HIGH, priority_label="High", reason="Due tomorrow"),
        PrioritizedEntry(id="7", title="Gym", priority=Priority.LOW, priority_label="low", reason="Flexible"),
    ]


def test_any_subset_of_fields_is_accepted() -> None:
    raw = json.dumps(
        {
            "prioritized": [
                {"title": "only title"},
                {"priority": "MEDIUM"},
                {"rationale": "alias for reason"},
                {},
                "not an object",
            ]
        }
    )

    entries = normalize_prioritization(raw)

    assert len(entries) == 5
    assert entries[0].title == "only title" and entries[0].priority is None
    assert entries[1].priority == Priority.MEDIUM
    assert entries[2].reason == "alias for reason"
    assert entries[3] == PrioritizedEntry()
    assert entries[4] == PrioritizedEntry()


def test_unknown_priority_label_is_kept_raw() -> None:
    entries = normalize_prioritization('{"prioritized": [{"title": "x", "priority": "Critical"}]}')
    assert entries[0].priority is None
    assert entries[0].priority_label == "Critical"


def test_bare_list_and_wrapped_json_are_accepted() -> None:
    assert len(normalize_prioritization('[{"title": "a"}]')) == 1
    fenced = '```json\n{"prioritized": [{"title": "a"}]}\n```'
    assert normalize_prioritization(fenced)[0].title == "a"
    chatty = 'Sure! Here it is: {"prioritized": [{"title": "b"}]} Hope it helps.'
    assert normalize_prioritization(chatty)[0].title == "b"


def test_missing_key_and_empty_output_yield_empty_list() -> None:
    assert normalize_prioritization("{}") == []
    assert normalize_prioritization('{"other": 1}') == []
    assert normalize_prioritization("") == []
    assert normalize_prioritization(None) == []


@pytest.mark.parametrize(
    "raw",
    [
        "not json at all",
        '{"prioritized": [{"title": "a"}',
        '{"prioritized": "High"}',
        '{"prioritized": {"title": "a"}}',
        "42",
    ],
)
def test_unparseable_structure_raises_provider_error(raw: str) -> None:
    with pytest.raises(ProviderError):
        normalize_prioritization(raw)


def test_match_plan_by_id_then_title() -> None:
    taxes = make_plan(id="p1", title="Taxes")
    gym = make_plan(id="p2", title="Gym")
    plans = [taxes, gym]

    assert match_plan(PrioritizedEntry(id="p2"), plans) is gym
    assert match_plan(PrioritizedEntry(id="zzz", title="taxes"), plans) is taxes
    assert match_plan(PrioritizedEntry(), plans) is None


def test_display_title_falls_back_to_generic_label() -> None:
    plans = [make_plan(id="p1", title="Taxes")]

    assert display_title(PrioritizedEntry(id="p1"), plans) == "Taxes"
    assert display_title(PrioritizedEntry(title="Something else"), plans) == "Something else"
    assert display_title(PrioritizedEntry()) == UNTITLED
