# src/plan_companion/auth/user_store.py

from __future__ import annotations

import contextlib
import logging
import sqlite3
import uuid
from pathlib import Path

from ..plans.plan_models import User

logger = logging.getLogger(__name__)


class DuplicateUsername(Exception):
    pass


class UserStore:
    """
    SQLite user store.

    Only password hashes are stored. Usernames are unique (enforced by the
    schema, so two concurrent registrations cannot both succeed).
    """

    def __init__(self, db_path: str | Path = "plans.sqlite3") -> None:
        self._db_path = Path(db_path)
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._ensure_schema()

    def _get_conn(self) -> sqlite3.Connection:
        conn = sqlite3.connect(str(self._db_path), timeout=30.0)
        conn.row_factory = sqlite3.Row
        with contextlib.suppress(sqlite3.Error):
            conn.execute("PRAGMA journal_mode=WAL")
        return conn

    def _ensure_schema(self) -> None:
        conn = self._get_conn()
        try:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS users (
                    id TEXT PRIMARY KEY,
                    username TEXT NOT NULL UNIQUE,
                    password_hash TEXT NOT NULL
                )
                """
            )
            conn.commit()
        finally:
            conn.close()

    @staticmethod
    def _row_to_user(row: sqlite3.Row) -> User:
        return User(id=str(row["id"]), username=str(row["username"]), password_hash=str(row["password_hash"]))

    def get_user(self, user_id: str) -> User | None:
        conn = self._get_conn()
        try:
            row = conn.execute("SELECT * FROM users WHERE id = ?", (user_id,)).fetchone()
            return self._row_to_user(row) if row else None
        finally:
            conn.close()

    def get_user_by_username(self, username: str) -> User | None:
        conn = self._get_conn()
        try:
            row = conn.execute("SELECT * FROM users WHERE username = ?", (username,)).fetchone()
            return self._row_to_user(row) if row else None
        finally:
            conn.close()

    def create_user(self, *, username: str, password_hash: str) -> User:
        user = User(id=str(uuid.uuid4()), username=username, password_hash=password_hash)
        conn = self._get_conn()
        try:
            conn.execute(
                "INSERT INTO users(id, username, password_hash) VALUES (?, ?, ?)",
                (user.id, user.username, user.password_hash),
            )
            conn.commit()
        except sqlite3.IntegrityError as e:
            raise DuplicateUsername(username) from e
        finally:
            conn.close()
        logger.info("User created id=%s username=%s", user.id, username)
        return user
