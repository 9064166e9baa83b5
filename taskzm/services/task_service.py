"""Task service: task CRUD and recurring series persistence."""
from sqlmodel import Session, select
from typing import Any, Dict, List, Mapping, Optional
from datetime import date

from taskzm.models.recurrence_rule import RecurrenceRule
from taskzm.models.task import Task, utc_now
from taskzm.services.recurrence_expander import expand
from taskzm.services.recurrence_validator import RecurrenceValidator
from taskzm.services.recurring_groups import (
    apply_to_group,
    group_ids,
    members_of,
    next_after,
    remove_group,
)
from taskzm.utils.logger import get_logger
from taskzm.utils.metrics import metrics_collector

logger = get_logger(__name__)

# Fields a series patch may change on each occurrence.
SERIES_PATCH_FIELDS = ("title", "description", "priority", "tags", "assignee", "completed")


class RecurrenceValidationError(ValueError):
    """Raised when a recurrence rule or series template fails validation."""

    def __init__(self, errors: List[str]):
        super().__init__("; ".join(errors))
        self.errors = errors


class TaskService:
    """Service class for task CRUD and recurring series operations."""

    def __init__(self, session: Session):
        self.session = session

    # ------------------------------------------------------------------
    # Single tasks
    # ------------------------------------------------------------------

    def create(self, user_id: str, **fields: Any) -> Task:
        """Create a new task."""
        task = Task(user_id=user_id, **fields)
        self.session.add(task)
        self.session.commit()
        self.session.refresh(task)
        return task

    def get_by_id(self, task_id: int, user_id: str) -> Optional[Task]:
        """Get a specific task by ID, ensuring user ownership."""
        statement = (
            select(Task)
            .where(Task.id == task_id)
            .where(Task.user_id == user_id)
        )
        return self.session.exec(statement).first()

    def list_by_user(
        self,
        user_id: str,
        date_from: Optional[str] = None,
        date_to: Optional[str] = None,
    ) -> List[Task]:
        """
        Get a user's tasks ordered by scheduled date.

        Args:
            user_id: Owner of the tasks
            date_from: Only tasks scheduled on or after this YYYY-MM-DD date
            date_to: Only tasks scheduled on or before this YYYY-MM-DD date

        Returns:
            List of tasks
        """
        statement = select(Task).where(Task.user_id == user_id)

        # ISO dates compare correctly as strings
        if date_from:
            statement = statement.where(Task.scheduled_date >= date_from)
        if date_to:
            statement = statement.where(Task.scheduled_date <= date_to)

        statement = statement.order_by(Task.scheduled_date.asc().nullslast(), Task.id.asc())
        return list(self.session.exec(statement).all())

    def update(self, task_id: int, user_id: str, **fields: Any) -> Optional[Task]:
        """Update the given fields of a task, ensuring user ownership."""
        task = self.get_by_id(task_id, user_id)
        if not task:
            return None

        for name, value in fields.items():
            setattr(task, name, value)
        task.updated_at = utc_now()

        self.session.add(task)
        self.session.commit()
        self.session.refresh(task)
        return task

    def delete(self, task_id: int, user_id: str) -> bool:
        """Delete a task, ensuring user ownership."""
        task = self.get_by_id(task_id, user_id)
        if not task:
            return False

        self.session.delete(task)
        self.session.commit()
        return True

    def toggle_complete(self, task_id: int, user_id: str) -> Optional[Task]:
        """Toggle task completion status."""
        task = self.get_by_id(task_id, user_id)
        if not task:
            return None

        return self.update(task_id, user_id, completed=not task.completed)

    # ------------------------------------------------------------------
    # Recurring series
    # ------------------------------------------------------------------

    def _check_series(
        self,
        template: Mapping[str, Any],
        rule: RecurrenceRule,
        today: Optional[date],
    ) -> None:
        errors = RecurrenceValidator.validate_rule(rule, today=today)
        errors.extend(RecurrenceValidator.validate_priority(template.get("priority")))
        errors.extend(RecurrenceValidator.validate_tag_limits(template.get("tags")))
        if errors:
            metrics_collector.validation_failed()
            logger.warning("Rejected recurrence rule", errors=errors, frequency=rule.frequency.value)
            raise RecurrenceValidationError(errors)

    def preview_series(
        self,
        template: Mapping[str, Any],
        rule: RecurrenceRule,
        start_date: str,
        today: Optional[date] = None,
    ) -> List[Dict[str, Any]]:
        """Validate and expand a series without persisting anything."""
        self._check_series(template, rule, today)
        occurrences = expand(template, rule, start_date)
        if not occurrences:
            metrics_collector.validation_failed()
            logger.warning("Rejected empty series", start_date=start_date, end_date=rule.end_date)
            raise RecurrenceValidationError(["End date is before start date"])
        return occurrences

    def create_series(
        self,
        user_id: str,
        template: Mapping[str, Any],
        rule: RecurrenceRule,
        start_date: str,
        today: Optional[date] = None,
    ) -> List[Task]:
        """
        Validate a rule, expand it and store every occurrence as its own task.

        Args:
            user_id: Owner of the series
            template: Task fields replicated on every occurrence
            rule: Recurrence rule (not stored)
            start_date: Date of the first occurrence, YYYY-MM-DD
            today: Reference date for the end-date check

        Returns:
            Created tasks in scheduled order

        Raises:
            RecurrenceValidationError: If the rule or template is invalid
        """
        occurrences = self.preview_series(template, rule, start_date, today=today)

        tasks = [Task(user_id=user_id, **occurrence) for occurrence in occurrences]
        self.session.add_all(tasks)
        self.session.commit()
        for task in tasks:
            self.session.refresh(task)

        group_id = occurrences[0]["recurring_group_id"]
        metrics_collector.series_created(len(tasks))
        logger.bind(user_id=user_id, group_id=group_id).info(
            "Created recurring series",
            count=len(tasks),
            frequency=rule.frequency.value,
            interval=rule.interval,
        )
        return tasks

    def _user_tasks(self, user_id: str) -> List[Task]:
        return self.list_by_user(user_id)

    def get_series(self, user_id: str, group_id: str) -> List[Task]:
        """All occurrences of a series owned by the user, in scheduled order."""
        statement = (
            select(Task)
            .where(Task.user_id == user_id)
            .where(Task.recurring_group_id == group_id)
            .order_by(Task.scheduled_date.asc(), Task.id.asc())
        )
        return list(self.session.exec(statement).all())

    def list_series(self, user_id: str) -> List[Dict[str, Any]]:
        """Summaries of every series the user has, ordered by first occurrence."""
        tasks = [task.to_dict() for task in self._user_tasks(user_id)]
        summaries = []
        for group_id in group_ids(tasks):
            members = members_of(tasks, group_id)
            dates = sorted(t["scheduled_date"] for t in members if t["scheduled_date"])
            summaries.append({
                "recurring_group_id": group_id,
                "count": len(members),
                "first_date": dates[0] if dates else None,
                "last_date": dates[-1] if dates else None,
            })
        return summaries

    def update_series(self, user_id: str, group_id: str, patch: Mapping[str, Any]) -> List[Task]:
        """
        Apply a patch to every occurrence of a series.

        Returns:
            Updated occurrences; empty if the series does not exist for the user
        """
        patch = {key: value for key, value in patch.items() if key in SERIES_PATCH_FIELDS}
        rows = {task.id: task for task in self._user_tasks(user_id)}
        current = [task.to_dict() for task in rows.values()]

        updated = members_of(apply_to_group(current, group_id, patch), group_id)
        if not updated:
            return []

        now = utc_now()
        for data in updated:
            task = rows[data["id"]]
            for name in patch:
                setattr(task, name, data[name])
            task.updated_at = now
            self.session.add(task)
        self.session.commit()

        metrics_collector.series_updated()
        logger.bind(user_id=user_id, group_id=group_id).info(
            "Updated recurring series", count=len(updated), fields=sorted(patch)
        )
        return self.get_series(user_id, group_id)

    def delete_series(self, user_id: str, group_id: str) -> int:
        """
        Delete every occurrence of a series.

        Returns:
            Number of tasks deleted
        """
        rows = {task.id: task for task in self._user_tasks(user_id)}
        current = [task.to_dict() for task in rows.values()]
        kept_ids = {data["id"] for data in remove_group(current, group_id)}

        doomed = [task for task_id, task in rows.items() if task_id not in kept_ids]
        if not doomed:
            return 0

        for task in doomed:
            self.session.delete(task)
        self.session.commit()

        metrics_collector.series_deleted()
        logger.bind(user_id=user_id, group_id=group_id).info("Deleted recurring series", count=len(doomed))
        return len(doomed)

    def extend_series(self, user_id: str, group_id: str, rule: RecurrenceRule) -> Optional[Task]:
        """
        Append one occurrence after the last one of a series.

        The new occurrence copies the last occurrence's task fields and is
        scheduled one step of ``rule`` after it.

        Returns:
            The new task, or None if the series does not exist for the user
        """
        members = [task for task in self.get_series(user_id, group_id) if task.scheduled_date]
        if not members:
            return None

        last = members[-1]
        task = Task(
            user_id=user_id,
            scheduled_date=next_after(last.scheduled_date, rule),
            recurring_group_id=group_id,
            **last.template(),
        )
        self.session.add(task)
        self.session.commit()
        self.session.refresh(task)

        metrics_collector.series_extended()
        logger.bind(user_id=user_id, group_id=group_id).info(
            "Extended recurring series", scheduled_date=task.scheduled_date
        )
        return task
