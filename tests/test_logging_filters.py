"""Tests for logging configuration and redaction of decision extras."""

from __future__ import annotations

import json
import logging
from io import StringIO
from logging.handlers import RotatingFileHandler
from pathlib import Path
from unittest.mock import Mock

import pytest

from zlimit.adapters.registry.in_memory import InMemoryLimiterRegistry
from zlimit.core.config import LogSettings
from zlimit.core.logging import JsonFormatter, configure_logging


def _capture(logger_name: str, level: int = logging.INFO) -> tuple[logging.Logger, StringIO]:
    logger = logging.getLogger(logger_name)
    logger.setLevel(level)
    logger.handlers.clear()
    logger.propagate = False

    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(JsonFormatter())
    logger.addHandler(handler)
    return logger, stream


@pytest.fixture
def _restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


def test_json_formatter_redacts_secrets():
    logger, stream = _capture("test_redaction")

    logger.info(
        "test_event",
        extra={
            "api_key": "sk-secret-123",
            "Token": "another-secret",
            "limiter_name": "visible",
        },
    )

    payload = json.loads(stream.getvalue())
    assert payload["api_key"] == "[REDACTED]"
    assert payload["Token"] == "[REDACTED]"
    assert payload["limiter_name"] == "visible"
    assert payload["message"] == "test_event"


def test_json_formatter_redacts_nested_values():
    logger, stream = _capture("test_nested")

    logger.info(
        "nested_event",
        extra={
            "headers": {"token": "secret-token", "user-agent": "pytest"},
            "counts": [{"password": "hunter2"}, {"remaining": 3}],
        },
    )

    payload = json.loads(stream.getvalue())
    assert payload["headers"] == {"token": "[REDACTED]", "user-agent": "pytest"}
    assert payload["counts"] == [{"password": "[REDACTED]"}, {"remaining": 3}]


def test_registry_decisions_are_logged_at_debug():
    logger, stream = _capture("zlimit.adapters.registry.in_memory", logging.DEBUG)
    registry = InMemoryLimiterRegistry(clock=Mock(return_value=0.0))

    registry.limit("jobs", Mock(), 1)
    registry.limit("jobs", Mock(), 1)

    events = [json.loads(line) for line in stream.getvalue().splitlines()]
    assert [e["message"] for e in events] == ["limiter.limit.allowed", "limiter.limit.exhausted"]
    assert all(e["limiter_name"] == "jobs" for e in events)
    assert events[0]["level"] == "debug"
    assert events[0]["remaining"] == 0


def test_decision_logging_can_be_disabled():
    logger, stream = _capture("zlimit.adapters.registry.in_memory", logging.DEBUG)
    registry = InMemoryLimiterRegistry(clock=Mock(return_value=0.0), log_decisions=False)

    registry.once("quiet", Mock())
    registry.clear("quiet")

    messages = [json.loads(line)["message"] for line in stream.getvalue().splitlines()]
    assert messages == ["limiter.cleared"]


def test_configure_logging_plain_stdout(_restore_root_logger):
    handler = configure_logging(LogSettings(level="warning", format="plain"))

    root = logging.getLogger()
    assert root.handlers == [handler]
    assert root.level == logging.WARNING
    assert not isinstance(handler.formatter, JsonFormatter)


def test_configure_logging_rotating_file(tmp_path: Path, _restore_root_logger):
    log_file = tmp_path / "logs" / "zlimit.log"
    handler = configure_logging(
        LogSettings(output="file", file_path=str(log_file), max_bytes=1024, backup_count=1)
    )

    try:
        assert isinstance(handler, RotatingFileHandler)
        assert isinstance(handler.formatter, JsonFormatter)
        assert log_file.parent.is_dir()
    finally:
        handler.close()
