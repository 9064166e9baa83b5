"""
Metrics Collection for recurring series.

Counts series created, edited, extended and deleted through the task API.
"""

from typing import Dict, Any
from collections import defaultdict
from datetime import datetime, timezone
import threading

COUNTERS = (
    "series_created_total",
    "occurrences_created_total",
    "series_updated_total",
    "series_deleted_total",
    "series_extended_total",
    "validation_failures_total",
)


class MetricsCollector:
    """Collects counters for recurring series operations."""

    def __init__(self):
        self.metrics = defaultdict(int)
        self.lock = threading.Lock()

        for name in COUNTERS:
            self.metrics[name] = 0

    def increment_counter(self, metric_name: str, value: int = 1):
        """Increment a counter metric."""
        with self.lock:
            self.metrics[metric_name] += value

    def get_metrics(self) -> Dict[str, Any]:
        """Get current metrics values."""
        with self.lock:
            return {
                "counters": dict(self.metrics),
                "timestamp": datetime.now(timezone.utc).isoformat()
            }

    def reset(self):
        """Zero every counter."""
        with self.lock:
            for name in list(self.metrics):
                self.metrics[name] = 0

    def series_created(self, occurrences: int):
        """Record a new series and the occurrences persisted for it."""
        self.increment_counter("series_created_total")
        self.increment_counter("occurrences_created_total", occurrences)

    def series_updated(self):
        self.increment_counter("series_updated_total")

    def series_deleted(self):
        self.increment_counter("series_deleted_total")

    def series_extended(self):
        self.increment_counter("series_extended_total")
        self.increment_counter("occurrences_created_total")

    def validation_failed(self):
        self.increment_counter("validation_failures_total")


# Global metrics instance
metrics_collector = MetricsCollector()
