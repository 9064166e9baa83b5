"""
Logging utility for TaskZM.

Every record is a single JSON object so series events can be grepped by
user or group id.
"""

import logging
import sys
from datetime import datetime, timezone
import json


class StructuredLogger:
    """Structured logger emitting one JSON document per record."""

    def __init__(self, name: str, level: int = logging.INFO, **context):
        """
        Initialize structured logger.

        Args:
            name: Logger name
            level: Logging level
            **context: Fields added to every record
        """
        self.logger = logging.getLogger(name)
        self.logger.setLevel(level)
        self.context = context

        # Bound copies share the underlying logger
        if not self.logger.handlers:
            handler = logging.StreamHandler(sys.stdout)
            handler.setFormatter(
                logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')
            )
            self.logger.addHandler(handler)

    def bind(self, **context) -> "StructuredLogger":
        """Return a logger that also adds ``context`` to every record."""
        return StructuredLogger(self.logger.name, self.logger.level, **{**self.context, **context})

    def _log(self, level: int, message: str, exc_info: bool = False, **fields):
        if not self.logger.isEnabledFor(level):
            return
        record = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": logging.getLevelName(level),
            "message": message,
            "logger": self.logger.name,
            **self.context,
            **fields,
        }
        if exc_info:
            record["exception"] = True
        self.logger.log(level, json.dumps(record, default=str), exc_info=exc_info)

    def info(self, message: str, **fields):
        self._log(logging.INFO, message, **fields)

    def warning(self, message: str, **fields):
        self._log(logging.WARNING, message, **fields)

    def exception(self, message: str, **fields):
        """Log at ERROR level with the active exception's traceback."""
        self._log(logging.ERROR, message, exc_info=True, **fields)


def get_logger(name: str) -> StructuredLogger:
    """Get a structured logger, usually for the module's ``__name__``."""
    return StructuredLogger(name)
