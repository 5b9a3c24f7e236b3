"""Tests for request/correlation ID sanitizing and the logging filter."""

import logging
import uuid

from app.middleware.request_context import sanitize_id
from app.shared.context import (
    get_request_id,
    reset_correlation_id,
    reset_request_id,
    set_correlation_id,
    set_request_id,
)
from app.shared.telemetry.logging import RequestContextFilter


def _record() -> logging.LogRecord:
    return logging.LogRecord("test", logging.INFO, __file__, 1, "msg", None, None)


def test_sanitize_keeps_safe_ids() -> None:
    assert sanitize_id("abc-123_X") == "abc-123_X"
    assert sanitize_id("  abc  ") == "abc"


def test_sanitize_replaces_unsafe_ids() -> None:
    for raw in (None, "", "bad id", "x" * 65, "line\nbreak"):
        uuid.UUID(sanitize_id(raw))


def test_filter_outside_request_uses_dash() -> None:
    record = _record()
    assert RequestContextFilter().filter(record) is True
    assert record.request_id == "-"
    assert record.correlation_id == "-"


def test_filter_reads_context() -> None:
    token = set_request_id("req-1")
    correlation_token = set_correlation_id("corr-1")
    try:
        record = _record()
        RequestContextFilter().filter(record)
        assert record.request_id == "req-1"
        assert record.correlation_id == "corr-1"
    finally:
        reset_correlation_id(correlation_token)
        reset_request_id(token)
    assert get_request_id() is None
