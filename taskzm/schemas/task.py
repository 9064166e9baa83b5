"""Task schemas for the TaskZM API."""
from pydantic import BaseModel, Field
from datetime import datetime
from typing import Optional, List

DATE_PATTERN = r"^\d{4}-\d{2}-\d{2}$"


class TaskCreate(BaseModel):
    """Schema for creating a single task."""
    title: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = Field(None, max_length=1000)
    priority: Optional[str] = Field(default="medium", pattern=r"^(high|medium|low)$")
    tags: Optional[List[str]] = Field(None, max_length=10)
    assignee: Optional[str] = Field(None, max_length=100)
    scheduled_date: Optional[str] = Field(None, pattern=DATE_PATTERN)  # YYYY-MM-DD


class TaskUpdate(BaseModel):
    """Schema for updating a task; only the fields sent are changed."""
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = Field(None, max_length=1000)
    priority: Optional[str] = Field(None, pattern=r"^(high|medium|low)$")
    tags: Optional[List[str]] = Field(None, max_length=10)
    assignee: Optional[str] = Field(None, max_length=100)
    scheduled_date: Optional[str] = Field(None, pattern=DATE_PATTERN)
    completed: Optional[bool] = None


class TaskResponse(BaseModel):
    """Schema for task API responses."""
    id: int
    user_id: str
    title: str
    description: Optional[str]
    completed: bool
    priority: str = "medium"
    tags: List[str] = []
    assignee: Optional[str] = None
    scheduled_date: Optional[str] = None
    recurring_group_id: Optional[str] = None  # set when the task belongs to a series
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
