# src/plan_companion/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app.
- No secrets required at import time (the LLM key is only needed for AI routes).
- Generic OPENAI_* names are accepted as fallbacks for the prefixed ones.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

ENV_PREFIX = "PLAN"


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _load_dotenv_if_available() -> None:
    """Load .env from the working directory without overriding real env vars."""
    from dotenv import load_dotenv

    load_dotenv(override=False)


_load_dotenv_if_available()


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _first_env(*names: str, default: str | None = None) -> str | None:
    for n in names:
        v = os.getenv(n)
        if v is not None and v.strip() != "":
            return v
    return default


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_list(name: str, default: List[str]) -> List[str]:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return list(default)
    return [p.strip() for p in raw.replace(",", " ").split() if p.strip()]


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str

    # ---- HTTP server ----
    host: str
    port: int

    # ---- LLM / OpenAI-compatible provider ----
    openai_api_key: Optional[str]
    openai_base_url: Optional[str]
    llm_models: List[str]
    llm_timeout_seconds: float
    llm_connect_timeout_seconds: float
    llm_max_workers: int

    # ---- Sessions / auth ----
    session_cookie_name: str
    session_cookie_secure: bool
    session_ttl_seconds: int
    password_hash_iterations: int

    # ---- Date logic ----
    week_start: int

    # ---- Local data paths (ignored by git) ----
    data_dir: Path
    db_path: Path

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), "plan-companion")
        log_level = _env(_k("LOG_LEVEL"), "INFO")

        host = _env(_k("HOST"), "127.0.0.1")
        port = _env_int(_k("PORT"), 5000)

        openai_api_key = _first_env(_k("OPENAI_API_KEY"), "OPENAI_API_KEY", default=None)
        openai_base_url = _first_env(_k("OPENAI_BASE_URL"), "OPENAI_BASE_URL", default=None)

        # OPENAI_MODEL (single) is accepted for parity with plain OpenAI setups.
        default_model = _first_env("OPENAI_MODEL", default="gpt-4o-mini") or "gpt-4o-mini"
        llm_models = _env_list(_k("LLM_MODELS"), [default_model])

        llm_timeout_seconds = _env_float(_k("LLM_TIMEOUT_SECONDS"), 30.0)
        llm_connect_timeout_seconds = _env_float(_k("LLM_CONNECT_TIMEOUT_SECONDS"), 5.0)
        llm_max_workers = max(1, _env_int(_k("LLM_MAX_WORKERS"), 4))

        session_cookie_name = _env(_k("SESSION_COOKIE_NAME"), "plan_session")
        session_cookie_secure = _env_bool(_k("SESSION_COOKIE_SECURE"), False)
        session_ttl_seconds = _env_int(_k("SESSION_TTL_SECONDS"), 7 * 24 * 3600)
        password_hash_iterations = _env_int(_k("PASSWORD_HASH_ITERATIONS"), 240_000)

        # 0 = Monday ... 6 = Sunday
        week_start = _env_int(_k("WEEK_START"), 0) % 7

        data_dir = _env_path(_k("DATA_DIR"), Path(".local/plan-companion"))
        db_path = _env_path(_k("DB_PATH"), data_dir / "plans.sqlite3")

        return Settings(
            app_name=app_name,
            log_level=log_level,
            host=host,
            port=port,
            openai_api_key=openai_api_key,
            openai_base_url=openai_base_url,
            llm_models=llm_models,
            llm_timeout_seconds=llm_timeout_seconds,
            llm_connect_timeout_seconds=llm_connect_timeout_seconds,
            llm_max_workers=llm_max_workers,
            session_cookie_name=session_cookie_name,
            session_cookie_secure=session_cookie_secure,
            session_ttl_seconds=session_ttl_seconds,
            password_hash_iterations=password_hash_iterations,
            week_start=week_start,
            data_dir=data_dir,
            db_path=db_path,
        )


SETTINGS = Settings.from_env()


def get_settings() -> Settings:
    return SETTINGS
