# tests/conftest.py

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path
from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient

from plan_companion.cli.bootstrap import create_initial_state
from plan_companion.core.state import AppState
from plan_companion.web.app import create_app

from .fakes import FakeTextProvider


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with bootstrap and the web app.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated and deterministic.
    """
    return SimpleNamespace(
        app_name="plan-companion-test",
        data_dir=tmp_path,
        db_path=tmp_path / "plans.sqlite3",
        session_cookie_name="plan_session",
        session_cookie_secure=False,
        session_ttl_seconds=3600,
        # Low iteration count keeps hashing fast in tests.
        password_hash_iterations=1000,
        llm_timeout_seconds=2.0,
        llm_max_workers=2,
        week_start=0,
    )


@pytest.fixture()
def provider() -> FakeTextProvider:
    return FakeTextProvider()


@pytest.fixture()
def state(settings: SimpleNamespace, provider: FakeTextProvider) -> AppState:
    """
    AppState wired with a fake text provider.

    NOTE: real SQLite stores are used here because their owner scoping is
    part of what we want to test.
    """
    return create_initial_state(settings=settings, provider=provider)


@pytest.fixture()
def client(state: AppState) -> Iterator[TestClient]:
    with TestClient(create_app(state)) as c:
        yield c


@pytest.fixture()
def auth_client(client: TestClient) -> TestClient:
    """Client with a registered + logged-in user 'alice'."""
    resp = client.post("/api/auth/register", json={"username": "alice", "password": "wonderland"})
    assert resp.status_code == 201
    return client
