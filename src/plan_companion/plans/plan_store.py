# src/plan_companion/plans/plan_store.py

from __future__ import annotations

import contextlib
import logging
import sqlite3
import uuid
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from .plan_models import Category, Plan, Priority, Status

logger = logging.getLogger(__name__)

# Columns a partial update may touch. id / owner_id / created_at are immutable.
UPDATABLE_FIELDS = ("title", "description", "priority", "category", "status", "deadline")


class PlanStore:
    """
    SQLite plan store, scoped by owner.

    The schema is intentionally simple and migration-safe:
    - create table if missing
    - use PRAGMA table_info to detect missing columns
    - add columns with ALTER TABLE only when needed

    Every read and write filters on owner_id, so a caller can never see or
    touch another owner's rows. Each write is a single statement in its own
    transaction: it either fully applies or not at all.

    Thread-safety:
    - each method opens its own SQLite connection
    """

    def __init__(self, db_path: str | Path = "plans.sqlite3") -> None:
        self._db_path = Path(db_path)
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._ensure_schema()
        try:
            total = self.count_plans()
        except sqlite3.Error:
            total = -1
        logger.info("PlanStore ready db=%s total=%s", self._db_path, total)

    # ---- low-level helpers ----

    def _get_conn(self) -> sqlite3.Connection:
        conn = sqlite3.connect(str(self._db_path), timeout=30.0)
        conn.row_factory = sqlite3.Row
        self._configure_conn(conn)
        return conn

    @staticmethod
    def _configure_conn(conn: sqlite3.Connection) -> None:
        with contextlib.suppress(sqlite3.Error):
            conn.execute("PRAGMA journal_mode=WAL")

    def _ensure_schema(self) -> None:
        conn = self._get_conn()
        try:
            cur = conn.cursor()

            cur.execute(
                """
                CREATE TABLE IF NOT EXISTS plans (
                    id TEXT PRIMARY KEY,
                    owner_id TEXT NOT NULL,
                    title TEXT NOT NULL,
                    description TEXT,
                    priority TEXT NOT NULL DEFAULT 'medium',
                    category TEXT NOT NULL DEFAULT 'personal',
                    status TEXT NOT NULL DEFAULT 'pending',
                    deadline TEXT,
                    created_at TEXT NOT NULL
                )
                """
            )

            cur.execute("PRAGMA table_info(plans)")
            cols = {row["name"] for row in cur.fetchall()}

            def add_col(name: str, decl: str) -> None:
                if name in cols:
                    return
                cur.execute(f"ALTER TABLE plans ADD COLUMN {name} {decl}")
                logger.info("PlanStore migration: added column %s", name)

            add_col("description", "TEXT")
            add_col("priority", "TEXT NOT NULL DEFAULT 'medium'")
            add_col("category", "TEXT NOT NULL DEFAULT 'personal'")
            add_col("status", "TEXT NOT NULL DEFAULT 'pending'")
            add_col("deadline", "TEXT")
            add_col("created_at", "TEXT NOT NULL DEFAULT ''")

            cur.execute("CREATE INDEX IF NOT EXISTS idx_plans_owner ON plans(owner_id, created_at)")

            conn.commit()
        finally:
            conn.close()

    @staticmethod
    def _row_to_plan(row: sqlite3.Row) -> Plan:
        return Plan(
            id=str(row["id"]),
            owner_id=str(row["owner_id"]),
            title=str(row["title"] or ""),
            description=row["description"],
            priority=Priority.from_db(row["priority"]),
            category=Category.from_db(row["category"]),
            status=Status.from_db(row["status"]),
            deadline=row["deadline"],
            created_at=str(row["created_at"] or ""),
        )

    @staticmethod
    def _db_value(name: str, value: Any) -> Any:
        if name in ("priority", "category", "status"):
            return str(value.value if hasattr(value, "value") else value)
        if name in ("description", "deadline"):
            # "" and None both mean "not set", same as create_plan.
            return value or None
        return value

    # ---- public API ----

    def count_plans(self) -> int:
        conn = self._get_conn()
        try:
            cur = conn.cursor()
            cur.execute("SELECT COUNT(*) FROM plans")
            (n,) = cur.fetchone()
            return int(n)
        finally:
            conn.close()

    def list_plans(self, owner_id: str) -> list[Plan]:
        """All plans of one owner, newest first."""
        conn = self._get_conn()
        try:
            cur = conn.cursor()
            cur.execute(
                """
                SELECT *
                FROM plans
                WHERE owner_id = ?
                ORDER BY created_at DESC, rowid DESC
                """,
                (owner_id,),
            )
            return [self._row_to_plan(r) for r in cur.fetchall()]
        finally:
            conn.close()

    def get_plan(self, plan_id: str, owner_id: str) -> Plan | None:
        conn = self._get_conn()
        try:
            cur = conn.cursor()
            cur.execute(
                "SELECT * FROM plans WHERE id = ? AND owner_id = ?",
                (plan_id, owner_id),
            )
            row = cur.fetchone()
            return self._row_to_plan(row) if row else None
        finally:
            conn.close()

    def create_plan(
        self,
        owner_id: str,
        *,
        title: str,
        description: str | None = None,
        priority: Priority = Priority.MEDIUM,
        category: Category = Category.PERSONAL,
        status: Status = Status.PENDING,
        deadline: str | None = None,
    ) -> Plan:
        if not owner_id:
            raise ValueError("owner_id is required")
        if not title or not title.strip():
            raise ValueError("title is required")

        plan = Plan(
            id=str(uuid.uuid4()),
            owner_id=owner_id,
            title=title,
            description=description or None,
            priority=Priority(priority),
            category=Category(category),
            status=Status(status),
            deadline=deadline or None,
            created_at=datetime.now(UTC).isoformat(),
        )

        conn = self._get_conn()
        try:
            conn.execute(
                """
                INSERT INTO plans(
                    id, owner_id, title, description,
                    priority, category, status, deadline, created_at
                )
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    plan.id,
                    plan.owner_id,
                    plan.title,
                    plan.description,
                    plan.priority.value,
                    plan.category.value,
                    plan.status.value,
                    plan.deadline,
                    plan.created_at,
                ),
            )
            conn.commit()
        finally:
            conn.close()

        logger.debug(
            "Plan added id=%s owner=%s priority=%s status=%s deadline=%s",
            plan.id,
            owner_id,
            plan.priority.value,
            plan.status.value,
            plan.deadline,
        )
        return plan

    def update_plan(self, plan_id: str, owner_id: str, changes: dict[str, Any]) -> Plan | None:
        """
        Partial update: only keys present in `changes` are written.

        Returns the updated plan, or None when the id does not exist for this owner.
        Unknown keys are ignored.
        """
        fields: list[str] = []
        params: list[Any] = []

        for name in UPDATABLE_FIELDS:
            if name not in changes:
                continue
            fields.append(f"{name} = ?")
            params.append(self._db_value(name, changes[name]))

        if not fields:
            return self.get_plan(plan_id, owner_id)

        params.extend([plan_id, owner_id])
        sql = f"UPDATE plans SET {', '.join(fields)} WHERE id = ? AND owner_id = ?"

        conn = self._get_conn()
        try:
            cur = conn.execute(sql, params)
            conn.commit()
            if cur.rowcount != 1:
                return None
            row = conn.execute(
                "SELECT * FROM plans WHERE id = ? AND owner_id = ?",
                (plan_id, owner_id),
            ).fetchone()
            return self._row_to_plan(row) if row else None
        finally:
            conn.close()

    def delete_plan(self, plan_id: str, owner_id: str) -> bool:
        conn = self._get_conn()
        try:
            cur = conn.execute(
                "DELETE FROM plans WHERE id = ? AND owner_id = ?",
                (plan_id, owner_id),
            )
            conn.commit()
            return cur.rowcount == 1
        finally:
            conn.close()
