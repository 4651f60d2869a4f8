# src/plan_companion/llm/offline.py

from __future__ import annotations

import json
import re

from ..core.ports import ChatMessage

_TASK_LINE = re.compile(r"^- \[id:(?P<id>[^\]]*)\] (?P<title>.*?) \[priority:(?P<priority>\w+)\]")


class OfflineTextProvider:
    """
    Offline deterministic provider used for demos when no external API is configured.

    Behavior:
    - JSON mode (auto-prioritize) -> echoes every task with its stored priority
    - Otherwise -> a short notice plus the prompt's task list
    """

    def complete(self, messages: list[ChatMessage], system_prompt: str, *, json_mode: bool = False) -> str:
        user_text = ""
        for m in reversed(messages):
            if m["role"] == "user":
                user_text = m["content"]
                break

        if json_mode:
            prioritized = []
            for line in user_text.splitlines():
                match = _TASK_LINE.match(line.strip())
                if match is None:
                    continue
                prioritized.append(
                    {
                        "id": match["id"],
                        "title": match["title"],
                        "priority": match["priority"].capitalize(),
                        "reason": "Offline mode keeps the stored priority.",
                    }
                )
            return json.dumps({"prioritized": prioritized})

        tasks = [line for line in user_text.splitlines() if line.startswith("- ")]
        return (
            "Offline demo mode: no external LLM is configured.\n"
            "Set PLAN_OPENAI_API_KEY (and PLAN_LLM_MODELS) to enable real suggestions.\n\n"
            + ("\n".join(tasks) if tasks else "No tasks available.")
        )
