"""Unit tests for JSON log formatting and request ID correlation"""

import json
import logging

import sys
from pathlib import Path
backend_src = Path(__file__).parent.parent.parent / "src"
sys.path.insert(0, str(backend_src))

from observability.logging_config import JSONFormatter, RequestIDFilter
from observability.request_id import get_request_id, reset_request_id, set_request_id


def make_record(**extra) -> logging.LogRecord:
    record = logging.LogRecord(
        name="audit.service",
        level=logging.ERROR,
        pathname=__file__,
        lineno=1,
        msg="Failed to persist audit trail entry: %s",
        args=("IntegrityError",),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_request_id_outside_request():
    assert get_request_id() == "no-request-id"


def test_request_id_bound_and_reset():
    token = set_request_id("req-42")
    try:
        record = make_record()
        RequestIDFilter().filter(record)
        assert record.request_id == "req-42"
    finally:
        reset_request_id(token)
    assert get_request_id() == "no-request-id"


def test_json_formatter_includes_known_extras():
    record = make_record(entity_type="event_donor", action="create", unrelated="dropped")
    RequestIDFilter().filter(record)

    data = json.loads(JSONFormatter().format(record))

    assert data["level"] == "ERROR"
    assert data["logger"] == "audit.service"
    assert data["message"] == "Failed to persist audit trail entry: IntegrityError"
    assert data["request_id"] == "no-request-id"
    assert data["entity_type"] == "event_donor"
    assert data["action"] == "create"
    assert "unrelated" not in data
    assert data["timestamp"].endswith("Z")


def test_json_formatter_includes_exception():
    try:
        raise ValueError("boom")
    except ValueError:
        record = make_record(exc_info=sys.exc_info())

    data = json.loads(JSONFormatter().format(record))
    assert data["error"] == "boom"
    assert "ValueError" in data["traceback"]
