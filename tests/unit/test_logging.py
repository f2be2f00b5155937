"""
Unit tests for the JSON log formatter
"""
import json
import logging

from poimap.core.logging import JsonFormatter


def make_record(**extra) -> logging.LogRecord:
    record = logging.LogRecord("poimap.test", logging.WARNING, __file__, 1, "fetch failed: %s", ("restroom",), None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_formats_message_and_level():
    payload = json.loads(JsonFormatter().format(make_record()))

    assert payload["level"] == "WARNING"
    assert payload["message"] == "fetch failed: restroom"
    assert payload["logger"] == "poimap.test"
    assert "lineno" not in payload


def test_includes_extra_fields():
    payload = json.loads(JsonFormatter().format(make_record(error_code="FETCH_FAILED", category="restroom")))

    assert payload["error_code"] == "FETCH_FAILED"
    assert payload["category"] == "restroom"
