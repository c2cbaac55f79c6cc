from __future__ import annotations

import io
import json
import logging

import pytest

from linearctl.logging import StructuredLogger, configure_logging, get_logger


def test_json_logging_emits_structured_records() -> None:
    stream = io.StringIO()
    logger = StructuredLogger(name="linearctl.test.json", json_logging=True, level="DEBUG", stream=stream)
    logger.log_operation("bulk_start", action="issue_delete", item_count=3)

    entry = json.loads(stream.getvalue().strip())
    assert entry["level"] == "INFO"
    assert entry["message"] == "Operation: bulk_start"
    assert entry["operation"] == "bulk_start"
    assert entry["item_count"] == 3
    assert "timestamp" in entry


def test_item_action_levels() -> None:
    stream = io.StringIO()
    logger = StructuredLogger(name="linearctl.test.items", json_logging=True, level="INFO", stream=stream)
    logger.log_item_action("issue_delete", "ENG-1", True)
    logger.log_item_action("issue_delete", "ENG-2", False, error="Issue not found")

    lines = [json.loads(line) for line in stream.getvalue().splitlines()]
    assert len(lines) == 1  # success is DEBUG, filtered at INFO
    assert lines[0]["item_id"] == "ENG-2"
    assert lines[0]["success"] is False
    assert lines[0]["error"] == "Issue not found"


def test_default_level_is_warning() -> None:
    stream = io.StringIO()
    logger = StructuredLogger(name="linearctl.test.default", stream=stream)
    assert logging.getLogger("linearctl.test.default").level == logging.WARNING
    logger.info("hidden")
    logger.warning("shown")
    output = stream.getvalue()
    assert "hidden" not in output
    assert "WARNING shown" in output


def test_timed_operation_logs_performance() -> None:
    stream = io.StringIO()
    logger = StructuredLogger(name="linearctl.test.timed", json_logging=True, level="INFO", stream=stream)
    with logger.timed_operation("fetch", team="ENG"):
        pass
    entries = [json.loads(line) for line in stream.getvalue().splitlines()]
    assert entries[0]["operation"] == "fetch_start"
    assert entries[-1]["operation"] == "fetch"
    assert "duration_ms" in entries[-1]
    assert entries[-1]["success"] is True


def test_timed_operation_records_failure() -> None:
    stream = io.StringIO()
    logger = StructuredLogger(name="linearctl.test.failed", json_logging=True, level="INFO", stream=stream)
    with pytest.raises(RuntimeError), logger.timed_operation("fetch"):
        raise RuntimeError("boom")
    last = json.loads(stream.getvalue().splitlines()[-1])
    assert last["operation"] == "fetch"
    assert last["success"] is False


def test_configure_logging_replaces_global() -> None:
    first = get_logger()
    configured = configure_logging(json_logging=True, level="DEBUG")
    assert configured is not first
    assert get_logger() is configured
    assert logging.getLogger("linearctl").level == logging.DEBUG
