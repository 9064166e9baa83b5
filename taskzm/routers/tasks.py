"""Task router for single-task CRUD."""
from fastapi import APIRouter, Depends, HTTPException, status, Query
from typing import Dict, Any, Optional

from taskzm.schemas.task import DATE_PATTERN, TaskCreate, TaskUpdate, TaskResponse
from taskzm.services.task_service import TaskService
from taskzm.db.config import get_session
from sqlmodel import Session

router = APIRouter(tags=["Tasks"])  # No prefix since main.py adds /api prefix


def get_task_service(session: Session = Depends(get_session)) -> TaskService:
    """Dependency for getting TaskService instance."""
    return TaskService(session)


@router.get("/{user_id}/tasks", response_model=Dict[str, Any])
async def list_tasks(
    user_id: str,
    service: TaskService = Depends(get_task_service),
    date_from: Optional[str] = Query(None, pattern=DATE_PATTERN, description="Tasks scheduled on or after (YYYY-MM-DD)"),
    date_to: Optional[str] = Query(None, pattern=DATE_PATTERN, description="Tasks scheduled on or before (YYYY-MM-DD)"),
):
    """List a user's tasks ordered by scheduled date, optionally limited to a date range."""
    tasks = service.list_by_user(user_id, date_from=date_from, date_to=date_to)
    return {
        "tasks": [TaskResponse.model_validate(task) for task in tasks],
        "count": len(tasks)
    }


@router.post("/{user_id}/tasks", response_model=TaskResponse, status_code=status.HTTP_201_CREATED)
async def create_task(
    user_id: str,
    task_data: TaskCreate,
    service: TaskService = Depends(get_task_service),
):
    """Create a single, non-recurring task."""
    fields = task_data.model_dump(exclude_none=True)
    return service.create(user_id, **fields)


@router.get("/{user_id}/tasks/{task_id}", response_model=TaskResponse)
async def get_task(
    user_id: str,
    task_id: int,
    service: TaskService = Depends(get_task_service),
):
    """Get a specific task by ID."""
    task = service.get_by_id(task_id, user_id)
    if not task:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Task not found"
        )
    return task


@router.put("/{user_id}/tasks/{task_id}", response_model=TaskResponse)
async def update_task(
    user_id: str,
    task_id: int,
    task_data: TaskUpdate,
    service: TaskService = Depends(get_task_service),
):
    """Update one task. Other occurrences of its series are left untouched."""
    task = service.update(task_id, user_id, **task_data.model_dump(exclude_none=True))
    if not task:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Task not found"
        )
    return task


@router.delete("/{user_id}/tasks/{task_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_task(
    user_id: str,
    task_id: int,
    service: TaskService = Depends(get_task_service),
):
    """Delete a task."""
    success = service.delete(task_id, user_id)
    if not success:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Task not found"
        )


@router.patch("/{user_id}/tasks/{task_id}/complete", response_model=TaskResponse)
async def toggle_complete(
    user_id: str,
    task_id: int,
    service: TaskService = Depends(get_task_service),
):
    """Toggle task completion status."""
    task = service.toggle_complete(task_id, user_id)
    if not task:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Task not found"
        )
    return task
