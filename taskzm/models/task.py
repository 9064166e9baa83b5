"""Task model for SQLModel."""
from sqlmodel import SQLModel, Field
from sqlalchemy import Column, DateTime, JSON
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional


def utc_now() -> datetime:
    """Current time as a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


# Fields a recurring series replicates onto each occurrence.
TEMPLATE_FIELDS = ("title", "description", "priority", "tags", "assignee")


class Task(SQLModel, table=True):
    """Task entity; recurring tasks are stored one row per occurrence."""

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: str = Field(max_length=100, index=True)
    title: str = Field(max_length=200, min_length=1)
    description: Optional[str] = Field(default=None, max_length=1000)
    completed: bool = Field(default=False)
    priority: str = Field(default="medium", max_length=20)  # high, medium, low
    tags: List[str] = Field(default_factory=list, sa_column=Column(JSON))
    assignee: Optional[str] = Field(default=None, max_length=100)
    scheduled_date: Optional[str] = Field(default=None, max_length=10, index=True)  # YYYY-MM-DD
    recurring_group_id: Optional[str] = Field(default=None, max_length=64, index=True)
    created_at: datetime = Field(default_factory=utc_now, sa_type=DateTime(timezone=True))
    updated_at: datetime = Field(default_factory=utc_now, sa_type=DateTime(timezone=True))

    def to_dict(self) -> Dict[str, Any]:
        """Plain mapping of the task's fields, as the group functions expect."""
        data = self.model_dump()
        data["tags"] = list(self.tags or [])
        return data

    def template(self) -> Dict[str, Any]:
        """Fields to replicate when this task seeds another occurrence."""
        data = self.to_dict()
        return {key: data[key] for key in TEMPLATE_FIELDS}
