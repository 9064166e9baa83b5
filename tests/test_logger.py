# tests/test_logger.py

from __future__ import annotations

import json
import logging

import pytest

from taskzm.utils.logger import get_logger


def _records(caplog: pytest.LogCaptureFixture) -> list[dict]:
    return [json.loads(record.getMessage()) for record in caplog.records]


def test_records_are_json_with_bound_context(caplog: pytest.LogCaptureFixture) -> None:
    logger = get_logger("taskzm.tests.series")
    series_log = logger.bind(user_id="u1", group_id="recurring_abc")

    with caplog.at_level(logging.INFO, logger="taskzm.tests.series"):
        series_log.info("Deleted recurring series", count=3)
        logger.warning("Rejected recurrence rule", errors=["Interval must be at least 1"])

    deleted, rejected = _records(caplog)
    assert deleted["message"] == "Deleted recurring series"
    assert (deleted["user_id"], deleted["group_id"], deleted["count"]) == ("u1", "recurring_abc", 3)
    assert deleted["level"] == "INFO"
    assert rejected["level"] == "WARNING"
    assert "user_id" not in rejected


def test_exception_keeps_traceback(caplog: pytest.LogCaptureFixture) -> None:
    logger = get_logger("taskzm.tests.startup")

    with caplog.at_level(logging.ERROR, logger="taskzm.tests.startup"):
        try:
            raise RuntimeError("database unavailable")
        except RuntimeError as e:
            logger.exception("Database initialization failed", error=str(e))

    (record,) = caplog.records
    assert record.exc_info is not None
    assert json.loads(record.getMessage())["exception"] is True
