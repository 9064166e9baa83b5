"""Recurring series schemas for the TaskZM API."""
from pydantic import BaseModel, Field, conint
from typing import Any, Dict, List, Optional

from taskzm.models.recurrence_rule import Frequency, RecurrenceRule
from taskzm.schemas.task import DATE_PATTERN, TaskResponse


class RecurrenceRuleIn(BaseModel):
    """
    Recurrence rule as sent by the client.

    Range checks on interval, count and end date are left to
    RecurrenceValidator so that every problem is reported in one response.
    """
    frequency: Frequency
    interval: int = 1
    end_date: Optional[str] = Field(None, pattern=DATE_PATTERN)
    count: Optional[int] = None
    days_of_week: List[conint(ge=0, le=6)] = Field(default_factory=list, max_length=7)

    def to_rule(self) -> RecurrenceRule:
        return RecurrenceRule.from_dict(self.model_dump())


class StepRuleIn(BaseModel):
    """Frequency and interval only; used to extend an existing series."""
    frequency: Frequency
    interval: int = Field(1, ge=1, le=365)

    def to_rule(self) -> RecurrenceRule:
        return RecurrenceRule.from_dict(self.model_dump())


class TaskTemplateIn(BaseModel):
    """Task fields replicated across every occurrence of a series."""
    title: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = Field(None, max_length=1000)
    priority: str = Field(default="medium", pattern=r"^(high|medium|low)$")
    tags: List[str] = Field(default_factory=list, max_length=10)
    assignee: Optional[str] = Field(None, max_length=100)


class SeriesCreate(BaseModel):
    """Schema for creating a recurring series."""
    template: TaskTemplateIn
    rule: RecurrenceRuleIn
    start_date: str = Field(..., pattern=DATE_PATTERN)


class SeriesUpdate(BaseModel):
    """Patch applied to every occurrence of a series."""
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = Field(None, max_length=1000)
    priority: Optional[str] = Field(None, pattern=r"^(high|medium|low)$")
    tags: Optional[List[str]] = Field(None, max_length=10)
    assignee: Optional[str] = Field(None, max_length=100)
    completed: Optional[bool] = None

    def to_patch(self) -> Dict[str, Any]:
        return self.model_dump(exclude_none=True)


class ValidationResult(BaseModel):
    valid: bool
    errors: List[str] = []


class OccurrencePreview(BaseModel):
    """An occurrence produced by expansion, before it is persisted."""
    title: str
    description: Optional[str] = None
    priority: str = "medium"
    tags: List[str] = []
    assignee: Optional[str] = None
    scheduled_date: str
    recurring_group_id: str


class SeriesResponse(BaseModel):
    recurring_group_id: str
    count: int
    tasks: List[TaskResponse]


class SeriesSummary(BaseModel):
    recurring_group_id: str
    count: int
    first_date: Optional[str] = None
    last_date: Optional[str] = None
