"""Observability tests — JSON log formatting and idempotent setup.

Tests cover:
    - JSONFormatter base keys and extra fields
    - Exceptions rendered into the payload
    - setup_logging does not stack handlers across calls
"""

import json
import logging

from mockapi.infrastructure.observability import JSONFormatter, setup_logging


def _record(msg="hello", **extra) -> logging.LogRecord:
    record = logging.LogRecord("mockapi.test", logging.INFO, __file__, 1, msg, None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_json_formatter_base_keys():
    payload = json.loads(JSONFormatter().format(_record()))
    assert payload["level"] == "INFO"
    assert payload["logger"] == "mockapi.test"
    assert payload["message"] == "hello"
    assert "timestamp" in payload


def test_json_formatter_extras():
    payload = json.loads(JSONFormatter().format(
        _record(endpoint_id="ep-1", status_code=201, unrelated="x"),
    ))
    assert payload["endpoint_id"] == "ep-1"
    assert payload["status_code"] == 201
    assert "unrelated" not in payload


def test_json_formatter_exception():
    try:
        raise ValueError("boom")
    except ValueError:
        import sys
        record = _record()
        record.exc_info = sys.exc_info()
    payload = json.loads(JSONFormatter().format(record))
    assert "ValueError: boom" in payload["exception"]


def test_setup_logging_is_idempotent():
    before = list(logging.root.handlers)
    level = logging.root.level
    try:
        setup_logging("DEBUG", "json")
        setup_logging("DEBUG", "text")
        ours = [h for h in logging.root.handlers if getattr(h, "_mockapi_handler", False)]
        assert len(ours) == 1
        assert not isinstance(ours[0].formatter, JSONFormatter)
        assert logging.root.level == logging.DEBUG
    finally:
        logging.root.handlers[:] = before
        logging.root.setLevel(level)
