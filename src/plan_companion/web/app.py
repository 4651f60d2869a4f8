# src/plan_companion/web/app.py

"""
HTTP surface (FastAPI).

Routes are thin: validate the body (pydantic), resolve the caller through the
auth gate, call one service operation, serialise. All error rendering goes
through the exception handlers below so every failure has the same shape:
{"error": "<generic message>"} (+ "details" for validation errors).
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from fastapi import APIRouter, Depends, FastAPI, Request, Response, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from ..core.errors import AppError
from ..core.state import AppState
from .schemas import Credentials, InsertPlan, PlanPrompt, UpdatePlan

logger = logging.getLogger(__name__)


def get_state(request: Request) -> AppState:
    return request.app.state.app_state


def session_token(request: Request) -> str | None:
    state = get_state(request)
    return request.cookies.get(state.settings.session_cookie_name)


def current_owner(request: Request) -> str:
    """Resolve the caller or reject with 401 (raised as Unauthorized)."""
    return get_state(request).auth.resolve_caller(session_token(request))


def _set_session_cookie(response: Response, state: AppState, token: str) -> None:
    response.set_cookie(
        state.settings.session_cookie_name,
        token,
        max_age=int(state.settings.session_ttl_seconds),
        httponly=True,
        samesite="lax",
        secure=bool(state.settings.session_cookie_secure),
    )


# ---- auth ----

auth_router = APIRouter(prefix="/api/auth")


@auth_router.post("/register", status_code=status.HTTP_201_CREATED)
async def register(body: Credentials, request: Request, response: Response) -> dict[str, Any]:
    state = get_state(request)
    user, token = await state.auth.register(body.username, body.password)
    _set_session_cookie(response, state, token)
    return user.to_public()


@auth_router.post("/login")
async def login(body: Credentials, request: Request, response: Response) -> dict[str, Any]:
    state = get_state(request)
    user, token = await state.auth.login(body.username, body.password)
    _set_session_cookie(response, state, token)
    return user.to_public()


@auth_router.post("/logout")
async def logout(request: Request, response: Response) -> dict[str, str]:
    state = get_state(request)
    state.auth.logout(session_token(request))
    response.delete_cookie(state.settings.session_cookie_name)
    return {"message": "Logged out successfully"}


@auth_router.get("/me")
async def me(request: Request) -> dict[str, Any]:
    user = await get_state(request).auth.current_user(session_token(request))
    return user.to_public()


# ---- plans ----

plans_router = APIRouter(prefix="/api/plans")


@plans_router.get("")
async def list_plans(request: Request, owner_id: str = Depends(current_owner)) -> list[dict[str, Any]]:
    plans = await get_state(request).plans.list_plans(owner_id)
    return [p.to_dict() for p in plans]


@plans_router.get("/stats")
async def plan_stats(request: Request, owner_id: str = Depends(current_owner)) -> dict[str, Any]:
    return await get_state(request).plans.stats(owner_id)


@plans_router.get("/{plan_id}")
async def get_plan(plan_id: str, request: Request, owner_id: str = Depends(current_owner)) -> dict[str, Any]:
    plan = await get_state(request).plans.get_plan(owner_id, plan_id)
    return plan.to_dict()


@plans_router.post("", status_code=status.HTTP_201_CREATED)
async def create_plan(
    body: InsertPlan, request: Request, owner_id: str = Depends(current_owner)
) -> dict[str, Any]:
    plan = await get_state(request).plans.create_plan(owner_id, body.model_dump())
    return plan.to_dict()


@plans_router.patch("/{plan_id}")
async def update_plan(
    plan_id: str, body: UpdatePlan, request: Request, owner_id: str = Depends(current_owner)
) -> dict[str, Any]:
    plan = await get_state(request).plans.update_plan(owner_id, plan_id, body.changes())
    return plan.to_dict()


@plans_router.delete("/{plan_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_plan(plan_id: str, request: Request, owner_id: str = Depends(current_owner)) -> Response:
    await get_state(request).plans.delete_plan(owner_id, plan_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# ---- ai ----

ai_router = APIRouter(prefix="/api/ai")


@ai_router.post("/suggest")
async def ai_suggest(request: Request, owner_id: str = Depends(current_owner)) -> dict[str, str]:
    state = get_state(request)
    plans = await state.plans.list_plans(owner_id)
    return {"suggestions": await state.advisor.suggest(plans)}


@ai_router.post("/sort")
async def ai_sort(request: Request, owner_id: str = Depends(current_owner)) -> dict[str, Any]:
    state = get_state(request)
    plans = await state.plans.list_plans(owner_id)
    entries = await state.advisor.prioritize(plans)
    return {"prioritized": [e.to_dict() for e in entries]}


@ai_router.post("/plan")
async def ai_plan(body: PlanPrompt, request: Request, owner_id: str = Depends(current_owner)) -> dict[str, str]:
    state = get_state(request)
    plans = await state.plans.list_plans(owner_id)
    return {"plan": await state.advisor.plan_day(plans, body.prompt)}


# ---- error rendering ----


async def _app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.warning("%s %s -> %s (%s)", request.method, request.url.path, exc.status_code, exc.kind)
    return JSONResponse(status_code=exc.status_code, content=exc.to_body())


async def _validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    path = request.url.path
    if path.startswith("/api/plans"):
        message = "Invalid plan data"
    elif path.startswith("/api/auth"):
        message = "Invalid user data"
    else:
        message = "Invalid request data"
    details = [
        {"loc": [str(p) for p in err.get("loc", ())], "msg": str(err.get("msg", ""))}
        for err in exc.errors()
    ]
    return JSONResponse(status_code=400, content={"error": message, "details": details})


def create_app(state: AppState) -> FastAPI:
    @asynccontextmanager
    async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
        yield
        state.advisor.close()

    app = FastAPI(title=getattr(state.settings, "app_name", "plan-companion"), lifespan=lifespan)
    app.state.app_state = state

    app.add_exception_handler(AppError, _app_error_handler)
    app.add_exception_handler(RequestValidationError, _validation_error_handler)

    @app.get("/api/health")
    async def health() -> dict[str, bool]:
        return {"ok": True}

    app.include_router(auth_router)
    app.include_router(plans_router)
    app.include_router(ai_router)
    return app
