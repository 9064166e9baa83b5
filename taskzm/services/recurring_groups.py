"""Group operations over recurring task series.

A series is not stored anywhere: it is whatever tasks in the caller's
collection share a ``recurring_group_id``. None of these functions mutate
their inputs.
"""
from datetime import date
from typing import Any, Dict, List, Mapping, Sequence, Union

from taskzm.models.recurrence_rule import RecurrenceRule
from taskzm.services.recurrence_expander import next_date


def is_group_member(task: Mapping[str, Any]) -> bool:
    """True if the task belongs to a recurring series."""
    return bool(task.get("recurring_group_id"))


def members_of(tasks: Sequence[Mapping[str, Any]], group_id: str) -> List[Mapping[str, Any]]:
    """All tasks of a series, in input order."""
    return [task for task in tasks if task.get("recurring_group_id") == group_id]


def apply_to_group(
    tasks: Sequence[Mapping[str, Any]],
    group_id: str,
    patch: Mapping[str, Any],
) -> List[Mapping[str, Any]]:
    """
    Shallow-merge a patch into every member of a series.

    Members are returned as new dicts; tasks outside the series are passed
    through as the same objects.
    """
    return [
        {**task, **patch} if task.get("recurring_group_id") == group_id else task
        for task in tasks
    ]


def remove_group(tasks: Sequence[Mapping[str, Any]], group_id: str) -> List[Mapping[str, Any]]:
    """Tasks with every member of the series left out."""
    return [task for task in tasks if task.get("recurring_group_id") != group_id]


def next_after(last_date: Union[str, date], rule: RecurrenceRule) -> str:
    """Date (YYYY-MM-DD) of the occurrence following last_date."""
    return next_date(last_date, rule).isoformat()


def group_ids(tasks: Sequence[Mapping[str, Any]]) -> List[str]:
    """Distinct series ids in first-seen order."""
    seen: Dict[str, None] = {}
    for task in tasks:
        if is_group_member(task):
            seen.setdefault(task["recurring_group_id"], None)
    return list(seen)
