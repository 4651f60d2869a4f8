# src/plan_companion/plans/plan_models.py

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from enum import StrEnum
from typing import Any


class Priority(StrEnum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @classmethod
    def from_db(cls, raw: str | None) -> Priority:
        if not raw:
            return cls.MEDIUM
        try:
            return cls(raw)
        except ValueError:
            return cls.MEDIUM

    @property
    def rank(self) -> int:
        """Sort rank: high first."""
        return _PRIORITY_RANK[self]


_PRIORITY_RANK = {Priority.HIGH: 0, Priority.MEDIUM: 1, Priority.LOW: 2}


class Category(StrEnum):
    WORK = "work"
    STUDY = "study"
    HEALTH = "health"
    FINANCE = "finance"
    PERSONAL = "personal"

    @classmethod
    def from_db(cls, raw: str | None) -> Category:
        if not raw:
            return cls.PERSONAL
        try:
            return cls(raw)
        except ValueError:
            return cls.PERSONAL


class Status(StrEnum):
    PENDING = "pending"
    COMPLETED = "completed"

    @classmethod
    def from_db(cls, raw: str | None) -> Status:
        if not raw:
            return cls.PENDING
        try:
            return cls(raw)
        except ValueError:
            return cls.PENDING


class FilterMode(StrEnum):
    ALL = "all"
    PENDING = "pending"
    COMPLETED = "completed"
    TODAY = "today"
    WEEK = "week"

    @classmethod
    def from_raw(cls, raw: str | None) -> FilterMode:
        try:
            return cls((raw or "").strip().lower())
        except ValueError:
            return cls.ALL


ALL_CATEGORIES = "all"


def parse_deadline(raw: Any) -> date | None:
    """
    Parse a stored deadline into a calendar date.

    Accepts ISO dates ("2024-05-01") and ISO datetimes (date part is used).
    Anything else (None, blanks, garbage, non-strings) yields None.
    """
    if not isinstance(raw, str):
        return None
    s = raw.strip()
    if not s:
        return None
    try:
        return date.fromisoformat(s)
    except ValueError:
        pass
    try:
        return datetime.fromisoformat(s).date()
    except ValueError:
        return None


@dataclass(slots=True)
class Plan:
    id: str
    owner_id: str
    title: str
    description: str | None
    priority: Priority
    category: Category
    status: Status
    deadline: str | None
    created_at: str

    @property
    def deadline_date(self) -> date | None:
        return parse_deadline(self.deadline)

    def to_dict(self) -> dict[str, Any]:
        """Wire shape (camelCase keys, as served by the HTTP API)."""
        return {
            "id": self.id,
            "userId": self.owner_id,
            "title": self.title,
            "description": self.description,
            "priority": self.priority.value,
            "category": self.category.value,
            "status": self.status.value,
            "deadline": self.deadline,
            "createdAt": self.created_at,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Plan:
        return cls(
            id=str(data.get("id") or ""),
            owner_id=str(data.get("userId") or ""),
            title=str(data.get("title") or ""),
            description=data.get("description"),
            priority=Priority.from_db(data.get("priority")),
            category=Category.from_db(data.get("category")),
            status=Status.from_db(data.get("status")),
            deadline=data.get("deadline"),
            created_at=str(data.get("createdAt") or ""),
        )


@dataclass(frozen=True, slots=True)
class FilterCriteria:
    """Ephemeral dashboard filter state (never persisted)."""

    mode: FilterMode = FilterMode.ALL
    search: str = ""
    category: str = ALL_CATEGORIES

    @property
    def is_default(self) -> bool:
        return self.mode == FilterMode.ALL and not self.search and self.category == ALL_CATEGORIES


@dataclass(slots=True)
class User:
    id: str
    username: str
    password_hash: str

    def to_public(self) -> dict[str, Any]:
        return {"id": self.id, "username": self.username}
