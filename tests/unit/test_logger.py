"""
tests/unit/test_logger.py — Structured Logging Tests

Covers:
  - setup_logging() creates the log directory and chronoplan.log
  - Log file lines are JSON with event, level and logger name
  - bind_run() adds run_id until clear_run()
  - Without setup_logging(), scheduling writes nothing to stdout or stderr
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timedelta, timezone

import pytest
import structlog

from chronoplan.exceptions import SchedulingError
from chronoplan.observability.logger import (
    LOG_FILE_NAME,
    bind_run,
    clear_run,
    get_logger,
    setup_logging,
)
from chronoplan.scheduling.scheduler import schedule
from chronoplan.scheduling.types import Task


@pytest.fixture(autouse=True)
def _reset_logging():
    yield
    clear_run()
    structlog.reset_defaults()
    logging.basicConfig(handlers=[logging.NullHandler()], force=True)


def _lines(path) -> list[dict]:
    return [json.loads(line) for line in path.read_text(encoding="utf-8").splitlines() if line]


def test_creates_log_file(tmp_path):
    log_dir = tmp_path / "nested" / "logs"
    setup_logging(level="INFO", log_dir=log_dir, console_output=False)
    assert (log_dir / LOG_FILE_NAME).exists()


def test_json_lines(tmp_path):
    setup_logging(level="DEBUG", log_dir=tmp_path, console_output=False)
    get_logger("chronoplan.test").info("schedule.done", tasks=3)
    record = _lines(tmp_path / LOG_FILE_NAME)[-1]
    assert record["event"] == "schedule.done"
    assert record["tasks"] == 3
    assert record["level"] == "info"
    assert record["logger"] == "chronoplan.test"


def test_level_filters(tmp_path):
    setup_logging(level="WARNING", log_dir=tmp_path, console_output=False)
    get_logger("chronoplan.test").info("too.quiet")
    assert _lines(tmp_path / LOG_FILE_NAME) == []


def test_run_id_bound_and_cleared(tmp_path):
    setup_logging(level="INFO", log_dir=tmp_path, console_output=False)
    log = get_logger("chronoplan.test")
    bind_run("abc123")
    log.info("schedule.start")
    clear_run()
    log.info("schedule.after")
    first, second = _lines(tmp_path / LOG_FILE_NAME)[-2:]
    assert first["run_id"] == "abc123"
    assert "run_id" not in second


def test_library_use_prints_nothing(capsys):
    structlog.reset_defaults()
    now = datetime(2026, 10, 18, 9, 0, tzinfo=timezone.utc)
    schedule(now, [Task(1, "water plants", now + timedelta(hours=2), timedelta(minutes=30), 5)])
    with pytest.raises(SchedulingError):
        schedule(now, [Task(2, "too late", now - timedelta(hours=1), timedelta(minutes=5), 5)])
    captured = capsys.readouterr()
    assert captured.out == ""
    assert captured.err == ""
