"""
Recurrence Expander.

Turns a task template and a recurrence rule into a capped, ordered list of
concrete task occurrences that share one recurring group id.
"""

import calendar
import uuid
from datetime import date, timedelta
from typing import Any, Dict, List, Mapping, Union

from taskzm.models.recurrence_rule import Frequency, RecurrenceRule, parse_date

# Fields never copied from a template onto an occurrence.
STRIPPED_FIELDS = ("id", "recurring", "recurrence", "recurrence_rule")


def _add_months(anchor: date, months: int) -> date:
    """Shift a date by whole months, clamping the day to the target month's length."""
    month_index = anchor.month - 1 + months
    year = anchor.year + month_index // 12
    month = month_index % 12 + 1
    max_day = calendar.monthrange(year, month)[1]
    return anchor.replace(year=year, month=month, day=min(anchor.day, max_day))


def _occurrence_date(start: date, rule: RecurrenceRule, index: int) -> date:
    """Date of the index-th occurrence (0-based) of a series anchored at start."""
    if rule.frequency == Frequency.DAILY:
        return start + timedelta(days=rule.interval * index)
    if rule.frequency == Frequency.WEEKLY:
        return start + timedelta(weeks=rule.interval * index)
    # Monthly steps are computed from the anchor so a clamped day
    # (Jan 31 -> Feb 28) does not drift the rest of the series.
    return _add_months(start, rule.interval * index)


def next_date(current: Union[str, date], rule: RecurrenceRule) -> date:
    """
    Step one occurrence forward from a date.

    Daily adds ``interval`` days, weekly ``7 * interval`` days, monthly
    ``interval`` months with the day clamped to the end of a shorter month.

    Monthly steps start from ``current`` itself, not from a series anchor:
    stepping from a clamped Feb 28 gives Mar 28, whereas expand() anchors
    every date on the start date and gives Mar 31.
    """
    return _occurrence_date(parse_date(current), rule, 1)


def generate_group_id() -> str:
    """Mint a new recurring group id."""
    return f"recurring_{uuid.uuid4().hex}"


def expand(
    template: Mapping[str, Any],
    rule: RecurrenceRule,
    start_date: Union[str, date],
) -> List[Dict[str, Any]]:
    """
    Expand a recurrence rule into concrete task occurrences.

    The rule is assumed to have passed RecurrenceValidator.validate_rule;
    nothing is re-checked here.

    Args:
        template: Task fields to replicate on every occurrence
        rule: Recurrence rule
        start_date: Date of the first occurrence

    Returns:
        Occurrences ordered by scheduled_date, all with the same recurring_group_id
    """
    start = parse_date(start_date)
    cap = rule.max_occurrences

    if rule.end_date is not None:
        boundary = rule.end_date
    else:
        boundary = _occurrence_date(start, rule, cap - 1)

    group_id = generate_group_id()
    base = {key: value for key, value in template.items() if key not in STRIPPED_FIELDS}

    occurrences: List[Dict[str, Any]] = []
    current = start
    while current <= boundary and len(occurrences) < cap:
        occurrence = dict(base)
        occurrence["scheduled_date"] = current.isoformat()
        occurrence["recurring_group_id"] = group_id
        occurrences.append(occurrence)
        current = _occurrence_date(start, rule, len(occurrences))

    return occurrences
