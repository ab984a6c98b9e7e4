import json
import logging

from evalhub.core.logging_config import (
    ConsoleFormatter,
    JSONFormatter,
    RequestIDFilter,
    request_id_var,
)


def make_record(message="hello", **extra):
    record = logging.LogRecord("evalhub.test", logging.INFO, __file__, 10, message, None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_json_formatter_includes_context():
    record = make_record(request_id="req-1", eval_path="/evalite/rag/a")
    data = json.loads(JSONFormatter().format(record))
    assert data["message"] == "hello"
    assert data["level"] == "INFO"
    assert data["request_id"] == "req-1"
    assert data["eval_path"] == "/evalite/rag/a"


def test_request_id_filter_reads_context_var():
    token = request_id_var.set("abc123")
    try:
        record = make_record()
        assert RequestIDFilter().filter(record)
    finally:
        request_id_var.reset(token)
    assert record.request_id == "abc123"
    assert "(abc123)" in ConsoleFormatter().format(record)
