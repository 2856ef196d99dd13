"""Tests for the JSON log formatter."""

import json
import logging

from newsbot.core.logging import JSONFormatter


def make_record(message: str, **extra) -> logging.LogRecord:
    record = logging.LogRecord(
        name="newsbot.test",
        level=logging.INFO,
        pathname=__file__,
        lineno=10,
        msg=message,
        args=(),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_formats_json_line():
    payload = json.loads(JSONFormatter().format(make_record("Cache: hit")))

    assert payload["message"] == "Cache: hit"
    assert payload["level"] == "INFO"
    assert payload["logger"] == "newsbot.test"
    assert payload["service"] == "newsbot"


def test_context_fields_are_merged():
    record = make_record("Chat request", context={"session_id": "abc", "from_cache": True})

    payload = json.loads(JSONFormatter().format(record))

    assert payload["session_id"] == "abc"
    assert payload["from_cache"] is True
