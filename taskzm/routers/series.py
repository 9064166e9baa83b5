"""Recurring series router: rule validation, preview and series-wide edits."""
from datetime import date
from fastapi import APIRouter, Depends, HTTPException, status
from typing import List

from taskzm.models.recurrence_rule import RecurrenceRule
from taskzm.routers.tasks import get_task_service
from taskzm.schemas.recurrence import (
    OccurrencePreview,
    RecurrenceRuleIn,
    SeriesCreate,
    SeriesResponse,
    SeriesSummary,
    SeriesUpdate,
    StepRuleIn,
    ValidationResult,
)
from taskzm.schemas.task import TaskResponse
from taskzm.services.recurrence_validator import RecurrenceValidator
from taskzm.services.task_service import RecurrenceValidationError, TaskService

router = APIRouter(tags=["Recurring Series"])


def _to_rule(rule_in: RecurrenceRuleIn) -> RecurrenceRule:
    try:
        return rule_in.to_rule()
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"errors": [f"Invalid end date: {rule_in.end_date}"]},
        )


def _check_start_date(start_date: str) -> None:
    try:
        date.fromisoformat(start_date)
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"errors": [f"Invalid start date: {start_date}"]},
        )


def _not_found() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail="Series not found"
    )


@router.post("/recurrence/validate", response_model=ValidationResult)
async def validate_rule(rule_in: RecurrenceRuleIn):
    """Check a recurrence rule and report every problem at once."""
    errors = RecurrenceValidator.validate_rule(_to_rule(rule_in))
    return ValidationResult(valid=not errors, errors=errors)


@router.post("/recurrence/preview", response_model=List[OccurrencePreview])
async def preview_series(
    series_data: SeriesCreate,
    service: TaskService = Depends(get_task_service),
):
    """Expand a series without saving it."""
    _check_start_date(series_data.start_date)
    try:
        return service.preview_series(
            series_data.template.model_dump(),
            _to_rule(series_data.rule),
            series_data.start_date,
        )
    except RecurrenceValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail={"errors": e.errors})


@router.get("/{user_id}/series", response_model=List[SeriesSummary])
async def list_series(
    user_id: str,
    service: TaskService = Depends(get_task_service),
):
    """List the user's recurring series."""
    return service.list_series(user_id)


@router.post("/{user_id}/series", response_model=SeriesResponse, status_code=status.HTTP_201_CREATED)
async def create_series(
    user_id: str,
    series_data: SeriesCreate,
    service: TaskService = Depends(get_task_service),
):
    """Create a recurring series; each occurrence is stored as its own task."""
    _check_start_date(series_data.start_date)
    try:
        tasks = service.create_series(
            user_id,
            series_data.template.model_dump(),
            _to_rule(series_data.rule),
            series_data.start_date,
        )
    except RecurrenceValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail={"errors": e.errors})

    return SeriesResponse(
        recurring_group_id=tasks[0].recurring_group_id,
        count=len(tasks),
        tasks=[TaskResponse.model_validate(task) for task in tasks],
    )


@router.get("/{user_id}/series/{group_id}", response_model=SeriesResponse)
async def get_series(
    user_id: str,
    group_id: str,
    service: TaskService = Depends(get_task_service),
):
    """Get every occurrence of a series."""
    tasks = service.get_series(user_id, group_id)
    if not tasks:
        raise _not_found()
    return SeriesResponse(
        recurring_group_id=group_id,
        count=len(tasks),
        tasks=[TaskResponse.model_validate(task) for task in tasks],
    )


@router.put("/{user_id}/series/{group_id}", response_model=SeriesResponse)
async def update_series(
    user_id: str,
    group_id: str,
    series_data: SeriesUpdate,
    service: TaskService = Depends(get_task_service),
):
    """Apply the same change to every occurrence of a series."""
    tasks = service.update_series(user_id, group_id, series_data.to_patch())
    if not tasks:
        raise _not_found()
    return SeriesResponse(
        recurring_group_id=group_id,
        count=len(tasks),
        tasks=[TaskResponse.model_validate(task) for task in tasks],
    )


@router.delete("/{user_id}/series/{group_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_series(
    user_id: str,
    group_id: str,
    service: TaskService = Depends(get_task_service),
):
    """Delete every occurrence of a series."""
    if not service.delete_series(user_id, group_id):
        raise _not_found()


@router.post(
    "/{user_id}/series/{group_id}/extend",
    response_model=TaskResponse,
    status_code=status.HTTP_201_CREATED,
)
async def extend_series(
    user_id: str,
    group_id: str,
    step: StepRuleIn,
    service: TaskService = Depends(get_task_service),
):
    """Append one occurrence after the last one of a series."""
    task = service.extend_series(user_id, group_id, step.to_rule())
    if not task:
        raise _not_found()
    return task
