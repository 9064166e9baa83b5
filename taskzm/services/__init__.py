"""Recurrence engine and task persistence services."""

from .recurrence_expander import expand, next_date
from .recurrence_validator import RecurrenceValidator, validate_rule
from .recurring_groups import apply_to_group, is_group_member, members_of, next_after, remove_group

__all__ = [
    "RecurrenceValidator",
    "apply_to_group",
    "expand",
    "is_group_member",
    "members_of",
    "next_after",
    "next_date",
    "remove_group",
    "validate_rule",
]
