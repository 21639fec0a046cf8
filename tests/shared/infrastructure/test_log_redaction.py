"""Tests for log redaction."""

import io
import json
import logging

import pytest
import structlog
from structlog.contextvars import bound_contextvars

from climatesync.shared.infrastructure import logging as logging_module
from climatesync.shared.infrastructure.logging import configure_logging, privacy_redactor


def test_bearer_tokens_are_redacted():
    event = privacy_redactor(None, "error", {"event": "x", "header": "Bearer abc.def.ghi"})

    assert event["header"] == "Bearer [TOKEN_REDACTED]"


def test_nested_response_bodies_are_redacted():
    event = privacy_redactor(
        None,
        "error",
        {"event": "operation_failed", "response_body": {"message": "user jane@example.com denied", "items": ["token=s3cr3t"]}},
    )

    assert event["response_body"]["message"] == "user [EMAIL_REDACTED] denied"
    assert event["response_body"]["items"] == ["token=[REDACTED]"]


def test_non_string_values_untouched():
    event = privacy_redactor(None, "info", {"event": "x", "status_code": 404, "ids": (1, 2)})

    assert event["status_code"] == 404
    assert event["ids"] == (1, 2)


@pytest.fixture
def restore_logging():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    structlog.reset_defaults()
    root.handlers[:] = handlers
    root.setLevel(level)


def test_production_output_is_redacted_json(monkeypatch, restore_logging):
    monkeypatch.setattr(logging_module.settings, "app_env", "production")
    monkeypatch.setattr(logging_module.settings, "log_level", "INFO")
    stream = io.StringIO()

    configure_logging(stream)
    with bound_contextvars(correlation_id="abc12345"):
        structlog.get_logger("climatesync.tests").info("request_sent", header="Bearer abc.def")

    event = json.loads(stream.getvalue().strip().splitlines()[-1])
    assert event["event"] == "request_sent"
    assert event["header"] == "Bearer [TOKEN_REDACTED]"
    assert event["correlation_id"] == "abc12345"
    assert event["level"] == "info"
    assert event["logger"] == "climatesync.tests"
    assert "timestamp" in event
