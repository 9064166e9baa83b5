"""Recurrence Validator."""
from datetime import date, datetime
from typing import List, Optional
import os
import re

import pytz

from taskzm.models.recurrence_rule import MAX_OCCURRENCES, RecurrenceRule

APP_TIMEZONE = os.environ.get("APP_TIMEZONE", "UTC")

MAX_INTERVAL = 365
MAX_TAGS = 10
MAX_TAG_LENGTH = 20
PRIORITIES = ("high", "medium", "low")


def local_today() -> date:
    """Current calendar date in the configured application timezone."""
    return datetime.now(pytz.timezone(APP_TIMEZONE)).date()


class RecurrenceValidator:
    """Validate recurrence rules and the task fields replicated across a series."""

    @staticmethod
    def validate_rule(rule: RecurrenceRule, today: Optional[date] = None) -> List[str]:
        """
        Check a recurrence rule for internal consistency.

        Every check runs; all applicable errors are reported together.

        Args:
            rule: Rule to check
            today: Reference date for the end-date check (defaults to local_today())

        Returns:
            List of error messages, empty if the rule is valid
        """
        if today is None:
            today = local_today()

        errors: List[str] = []

        if rule.interval < 1:
            errors.append("Interval must be at least 1")

        if rule.interval > MAX_INTERVAL:
            errors.append(f"Interval cannot exceed {MAX_INTERVAL}")

        if rule.end_date is not None and rule.count is not None:
            errors.append("Cannot specify both end date and count")

        if rule.end_date is not None and rule.end_date <= today:
            errors.append("End date must be in the future")

        if rule.count is not None and not 1 <= rule.count <= MAX_OCCURRENCES:
            errors.append(f"Count must be between 1 and {MAX_OCCURRENCES}")

        return errors

    @staticmethod
    def validate_tag_limits(tags: Optional[list]) -> List[str]:
        """
        Validate tag limits.

        Args:
            tags: List of tags

        Returns:
            List of error messages
        """
        if not tags:
            return []

        if not isinstance(tags, list):
            return ["Tags must be a list"]

        errors: List[str] = []
        if len(tags) > MAX_TAGS:
            errors.append(f"Maximum {MAX_TAGS} tags allowed, got {len(tags)}")

        for i, tag in enumerate(tags):
            if not isinstance(tag, str):
                errors.append(f"Tag at index {i} must be a string")
                continue
            if len(tag) > MAX_TAG_LENGTH:
                errors.append(f"Tag '{tag}' exceeds maximum length of {MAX_TAG_LENGTH} characters")
            elif not re.match(r'^[\w\s\-_.]+$', tag):
                errors.append(f"Tag '{tag}' contains invalid characters")

        return errors

    @staticmethod
    def validate_priority(priority: Optional[str]) -> List[str]:
        """Validate priority value."""
        if not priority:
            return []

        if priority not in PRIORITIES:
            return [f"Priority must be one of: high, medium, low, got: {priority}"]

        return []


def validate_rule(rule: RecurrenceRule, today: Optional[date] = None) -> List[str]:
    """Module-level shortcut for RecurrenceValidator.validate_rule."""
    return RecurrenceValidator.validate_rule(rule, today=today)
