# tests/test_config.py

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from plan_companion.config import Settings
from plan_companion.logging_setup import _ConsoleNoiseFilter


def test_defaults_without_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("PLAN_PORT", "PLAN_WEEK_START", "PLAN_LLM_MODELS", "OPENAI_MODEL", "PLAN_DATA_DIR", "PLAN_DB_PATH"):
        monkeypatch.delenv(name, raising=False)

    s = Settings.from_env()

    assert s.port == 5000
    assert s.week_start == 0
    assert s.llm_models == ["gpt-4o-mini"]
    assert s.db_path == Path(".local/plan-companion") / "plans.sqlite3"


def test_prefixed_values_and_fallbacks(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.delenv("PLAN_OPENAI_API_KEY", raising=False)
    monkeypatch.delenv("PLAN_DB_PATH", raising=False)
    monkeypatch.setenv("OPENAI_API_KEY", "sk-generic")
    monkeypatch.setenv("PLAN_LLM_MODELS", "a, b  c")
    monkeypatch.setenv("PLAN_PORT", "not-a-number")
    monkeypatch.setenv("PLAN_WEEK_START", "6")
    monkeypatch.setenv("PLAN_SESSION_COOKIE_SECURE", "yes")
    monkeypatch.setenv("PLAN_DATA_DIR", str(tmp_path))

    s = Settings.from_env()

    assert s.openai_api_key == "sk-generic"
    assert s.llm_models == ["a", "b", "c"]
    assert s.port == 5000
    assert s.week_start == 6
    assert s.session_cookie_secure is True
    assert s.db_path == tmp_path / "plans.sqlite3"


def _record(name: str, level: int) -> logging.LogRecord:
    return logging.LogRecord(name, level, __file__, 1, "msg", None, None)


def test_console_filter_keeps_own_logs_and_drops_noise() -> None:
    f = _ConsoleNoiseFilter()

    assert f.filter(_record("plan_companion.plans.plan_service", logging.DEBUG))
    assert f.filter(_record("uvicorn.error", logging.INFO))
    assert not f.filter(_record("uvicorn.access", logging.INFO))
    assert not f.filter(_record("httpx", logging.WARNING))
    assert f.filter(_record("httpx", logging.ERROR))
