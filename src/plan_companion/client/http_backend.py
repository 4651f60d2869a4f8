# src/plan_companion/client/http_backend.py

from __future__ import annotations

import logging
from typing import Any

import httpx

from ..ai.normalizer import PrioritizedEntry, parse_entry
from ..core.errors import AppError, InternalError, ProviderError, error_for_status
from ..plans.plan_models import Plan, User

logger = logging.getLogger(__name__)


class HttpPlanBackend:
    """
    PlanBackend over the JSON/HTTP API.

    The session cookie lives in the httpx client's cookie jar, so login()
    followed by plan calls on the same backend just works. Failures are raised
    as AppError subclasses mapped from the HTTP status.
    """

    def __init__(self, client: httpx.AsyncClient) -> None:
        self._client = client

    async def _request(self, method: str, path: str, *, json: Any = None, ai: bool = False) -> httpx.Response:
        try:
            resp = await self._client.request(method, path, json=json)
        except httpx.HTTPError as e:
            logger.warning("%s %s failed: %s", method, path, e.__class__.__name__)
            raise (ProviderError if ai else InternalError)("Network error") from e

        if resp.status_code >= 400:
            message = None
            try:
                body = resp.json()
                if isinstance(body, dict):
                    message = body.get("error")
            except ValueError:
                pass
            if ai and resp.status_code >= 500:
                raise ProviderError(message)
            err: AppError = error_for_status(resp.status_code, message)
            raise err
        return resp

    # ---- auth ----

    async def register(self, username: str, password: str) -> User:
        resp = await self._request("POST", "/api/auth/register", json={"username": username, "password": password})
        data = resp.json()
        return User(id=data["id"], username=data["username"], password_hash="")

    async def login(self, username: str, password: str) -> User:
        resp = await self._request("POST", "/api/auth/login", json={"username": username, "password": password})
        data = resp.json()
        return User(id=data["id"], username=data["username"], password_hash="")

    async def logout(self) -> None:
        await self._request("POST", "/api/auth/logout")

    async def me(self) -> User:
        data = (await self._request("GET", "/api/auth/me")).json()
        return User(id=data["id"], username=data["username"], password_hash="")

    # ---- plans ----

    async def list_plans(self) -> list[Plan]:
        resp = await self._request("GET", "/api/plans")
        return [Plan.from_dict(item) for item in resp.json()]

    async def get_plan(self, plan_id: str) -> Plan:
        resp = await self._request("GET", f"/api/plans/{plan_id}")
        return Plan.from_dict(resp.json())

    async def create_plan(self, data: dict[str, Any]) -> Plan:
        resp = await self._request("POST", "/api/plans", json=data)
        return Plan.from_dict(resp.json())

    async def update_plan(self, plan_id: str, data: dict[str, Any]) -> Plan:
        resp = await self._request("PATCH", f"/api/plans/{plan_id}", json=data)
        return Plan.from_dict(resp.json())

    async def delete_plan(self, plan_id: str) -> None:
        await self._request("DELETE", f"/api/plans/{plan_id}")

    # ---- ai ----

    async def suggest(self) -> str:
        resp = await self._request("POST", "/api/ai/suggest", ai=True)
        return str(resp.json().get("suggestions") or "")

    async def prioritize(self) -> list[PrioritizedEntry]:
        resp = await self._request("POST", "/api/ai/sort", ai=True)
        items = resp.json().get("prioritized")
        if not isinstance(items, list):
            raise ProviderError("AI returned an unreadable prioritization")
        entries: list[PrioritizedEntry] = []
        for item in items:
            # priorityLabel carries the provider's raw label; re-parse from it.
            if isinstance(item, dict) and item.get("priorityLabel"):
                item = {**item, "priority": item["priorityLabel"]}
            entries.append(parse_entry(item))
        return entries

    async def plan_day(self, prompt: str) -> str:
        resp = await self._request("POST", "/api/ai/plan", json={"prompt": prompt}, ai=True)
        return str(resp.json().get("plan") or "")
