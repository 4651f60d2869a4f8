# src/plan_companion/web/schemas.py

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field, field_validator

from ..plans.plan_models import Category, Priority, Status


class InsertPlan(BaseModel):
    """Schema for creating a plan. Unknown fields are ignored."""

    title: str = Field(min_length=1)
    description: Optional[str] = None
    priority: Priority = Priority.MEDIUM
    category: Category = Category.PERSONAL
    status: Status = Status.PENDING
    # Stored verbatim; an unparseable value is kept and treated as "no deadline" by date logic.
    deadline: Optional[str] = None

    @field_validator("title")
    @classmethod
    def _title_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("title must not be blank")
        return v


class UpdatePlan(BaseModel):
    """Partial update: only the fields present in the request body are applied."""

    title: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None
    priority: Optional[Priority] = None
    category: Optional[Category] = None
    status: Optional[Status] = None
    deadline: Optional[str] = None

    @field_validator("title", "priority", "category", "status", mode="before")
    @classmethod
    def _not_null(cls, v):
        # description / deadline may be cleared with null; these may not.
        if v is None:
            raise ValueError("field may not be null")
        return v

    @field_validator("title")
    @classmethod
    def _title_not_blank(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not v.strip():
            raise ValueError("title must not be blank")
        return v

    def changes(self) -> dict:
        return self.model_dump(exclude_unset=True)


class Credentials(BaseModel):
    username: str = Field(min_length=1)
    password: str = Field(min_length=1)


class PlanPrompt(BaseModel):
    prompt: str = ""
