"""Recurrence Rule model.

A rule is transient input: it is consumed once by the expander and never
stored. Only the generated occurrences are persisted.
"""
from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Any, Dict, List, Optional, Union

# Hard cap on the number of occurrences a single expansion may produce.
MAX_OCCURRENCES = 52


class Frequency(str, Enum):
    """Repetition unit for a recurrence rule."""

    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"


def parse_date(value: Union[str, date]) -> date:
    """Accept a ``YYYY-MM-DD`` string or a date and return a date."""
    if isinstance(value, date):
        return value
    return date.fromisoformat(value)


@dataclass
class RecurrenceRule:
    """Repetition rule for a recurring task series."""

    frequency: Frequency
    interval: int = 1
    end_date: Optional[date] = None
    count: Optional[int] = None
    days_of_week: List[int] = field(default_factory=list)  # 0-6, kept but not used for stepping

    def __post_init__(self):
        self.frequency = Frequency(self.frequency)
        if self.end_date is not None:
            self.end_date = parse_date(self.end_date)

    @property
    def max_occurrences(self) -> int:
        """Occurrence cap: the requested count, never more than MAX_OCCURRENCES."""
        if self.count:
            return min(self.count, MAX_OCCURRENCES)
        return MAX_OCCURRENCES

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RecurrenceRule":
        """
        Build a rule from a plain mapping.

        Accepts both snake_case keys and the camelCase keys used by the
        web client (``endDate``, ``daysOfWeek``).

        Args:
            data: Mapping with frequency, interval and optional termination fields

        Returns:
            RecurrenceRule instance
        """
        end_date = data.get("end_date", data.get("endDate"))
        days_of_week = data.get("days_of_week", data.get("daysOfWeek")) or []
        return cls(
            frequency=data["frequency"],
            interval=data.get("interval", 1),
            end_date=end_date or None,
            count=data.get("count"),
            days_of_week=list(days_of_week),
        )
