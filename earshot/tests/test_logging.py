import io
import json
import logging

import pytest

from earshot.core.logging import (
    StructuredFormatter,
    enter_session,
    get_session_id,
    leave_session,
    set_session_id,
    setup_logging,
)

@pytest.fixture
def session_scope():
    set_session_id("session-123")
    yield
    set_session_id(None)

def test_structured_formatter_includes_extra_fields(session_scope):
    record = logging.LogRecord("earshot.test", logging.INFO, __file__, 1, "hello %s", ("world",), None)
    record.event = "result"

    payload = json.loads(StructuredFormatter().format(record))
    assert payload["message"] == "hello world"
    assert payload["level"] == "INFO"
    assert payload["module"] == "earshot.test"
    assert payload["session_id"] == "session-123"
    assert payload["event"] == "result"
    assert "args" not in payload

def test_setup_logging_writes_json():
    root = logging.getLogger()
    previous_level = root.level
    stream = io.StringIO()
    handler = setup_logging(level="DEBUG", stream=stream)
    try:
        logging.getLogger("earshot.test").info("ready", extra={"window": "audio"})
    finally:
        root.removeHandler(handler)
        root.setLevel(previous_level)

    line = json.loads(stream.getvalue().strip().splitlines()[-1])
    assert line["message"] == "ready"
    assert line["window"] == "audio"

def test_session_id_context():
    set_session_id("abc")
    assert get_session_id() == "abc"
    set_session_id(None)
    assert get_session_id() is None

def test_leave_session_restores_previous_id():
    before = get_session_id()
    outer = enter_session("outer")
    inner = enter_session("inner")
    assert get_session_id() == "inner"
    leave_session(inner)
    assert get_session_id() == "outer"
    leave_session(outer)
    assert get_session_id() == before
