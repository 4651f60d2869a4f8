# src/plan_companion/llm/prompts.py

from __future__ import annotations

from collections.abc import Sequence

from ..plans.plan_models import Plan

SUGGEST_SYSTEM_PROMPT = "You help users prioritize tasks with brief, actionable advice."
PRIORITIZE_SYSTEM_PROMPT = "You prioritize tasks and respond with JSON only."
PLANNER_SYSTEM_PROMPT = "You are a focused daily planner assistant. Be concise and actionable."


def summarize_plans(plans: Sequence[Plan]) -> str:
    if not plans:
        return "No tasks available."
    return "\n".join(
        f"- [id:{p.id}] {p.title} [priority:{p.priority.value}] [status:{p.status.value}] "
        f"[category:{p.category.value}] [deadline:{p.deadline or 'none'}]"
        for p in plans
    )


def suggest_prompt(plans: Sequence[Plan]) -> str:
    return (
        "You are an assistant helping users manage tasks. "
        "Analyze the tasks and provide concise suggestions:\n"
        "- Which tasks are urgent and why\n"
        "- What to prioritize next (top 3)\n"
        "- How to schedule them today/tomorrow/this week\n"
        "Keep it short and bulleted.\n\n"
        f"Tasks:\n{summarize_plans(plans)}\n"
    )


def prioritize_prompt(plans: Sequence[Plan]) -> str:
    return (
        "You will prioritize tasks into High, Medium, Low. "
        'Return JSON with an array "prioritized" where each entry has: '
        "id, title, priority (High|Medium|Low), reason.\n"
        "Return ONLY JSON.\n\n"
        f"Tasks:\n{summarize_plans(plans)}\n"
    )


def planner_prompt(plans: Sequence[Plan], user_prompt: str) -> str:
    return (
        "Create a concise daily plan based on the user's description and their tasks.\n"
        "Include time blocks, priorities, and 3 quick tips.\n"
        "Respond in markdown bullet format.\n\n"
        f"User description:\n{user_prompt}\n\n"
        f"Tasks:\n{summarize_plans(plans)}\n"
    )
