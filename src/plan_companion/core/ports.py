# src/plan_companion/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The core depends on Protocols instead of concrete implementations.
This keeps storage, sessions, the text provider and the client transport
swappable and makes testing easier.
"""

from typing import Any, Protocol

ChatMessage = dict[str, str]
# OpenAI-style chat messages: {"role": "...", "content": "..."}.


class TextProvider(Protocol):
    """Generative text provider (OpenAI-compatible). Blocking call."""

    def complete(
            self,
            messages: list[ChatMessage],
            system_prompt: str,
            *,
            json_mode: bool = False,
    ) -> str: ...


class PlanRepo(Protocol):
    """Owner-scoped atomic CRUD over plan records."""

    def list_plans(self, owner_id: str) -> list[Any]: ...
    def get_plan(self, plan_id: str, owner_id: str) -> Any | None: ...
    def create_plan(
            self,
            owner_id: str,
            *,
            title: str,
            description: str | None = None,
            priority: Any = None,
            category: Any = None,
            status: Any = None,
            deadline: str | None = None,
    ) -> Any: ...
    def update_plan(self, plan_id: str, owner_id: str, changes: dict[str, Any]) -> Any | None: ...
    def delete_plan(self, plan_id: str, owner_id: str) -> bool: ...


class UserRepo(Protocol):
    def get_user(self, user_id: str) -> Any | None: ...
    def get_user_by_username(self, username: str) -> Any | None: ...
    def create_user(self, *, username: str, password_hash: str) -> Any: ...


class SessionStore(Protocol):
    """Server-held sessions: opaque token -> owner id."""

    def create(self, owner_id: str) -> str: ...
    def resolve(self, token: str) -> str | None: ...
    def revoke(self, token: str) -> None: ...


class PlanBackend(Protocol):
    """
    Client-side port used by the mutation coordinator.

    Implementations raise core.errors.AppError subclasses on failure.
    """

    async def list_plans(self) -> list[Any]: ...
    async def create_plan(self, data: dict[str, Any]) -> Any: ...
    async def update_plan(self, plan_id: str, data: dict[str, Any]) -> Any: ...
    async def delete_plan(self, plan_id: str) -> None: ...
    async def suggest(self) -> str: ...
    async def prioritize(self) -> list[Any]: ...
    async def plan_day(self, prompt: str) -> str: ...
