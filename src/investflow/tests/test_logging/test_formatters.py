import json
import logging
import sys

from investflow.core.logging.formatters import ColorFormatter, JsonFormatter


def make_record(exc_info=None):
    return logging.LogRecord("investflow", logging.INFO, __file__, 10, "hello %s", ("tester",), exc_info)


def test_json_formatter_basic_fields():
    rec = make_record()
    rec.portfolio_id = 7
    rec.request_id = "req-1"

    data = json.loads(JsonFormatter(env="testing", service="svc").format(rec))

    assert data["message"] == "hello tester"
    assert data["level"] == "INFO"
    assert data["logger"] == "investflow"
    assert data["service"] == "svc"
    assert data["env"] == "testing"
    assert data["request_id"] == "req-1"
    assert data["portfolio_id"] == 7
    assert "timestamp" in data
    assert "version" in data
    # LogRecord internals are not repeated as extras
    assert "msg" not in data
    assert "args" not in data


def test_json_formatter_default_service():
    data = json.loads(JsonFormatter().format(make_record()))

    assert data["service"] == "investflow"
    assert data["request_id"] == "-"


def test_json_formatter_non_serializable_extra():
    rec = make_record()

    class X:
        def __repr__(self):
            return "<X>"

    rec.obj = X()

    data = json.loads(JsonFormatter(env="dev", service="svc").format(rec))

    assert data["obj"] == "<X>"


def test_json_formatter_includes_traceback():
    try:
        raise ValueError("bad value")
    except ValueError:
        rec = make_record(exc_info=sys.exc_info())

    data = json.loads(JsonFormatter().format(rec))

    assert "ValueError: bad value" in data["exc_info"]


def test_color_formatter_line_shape():
    rec = make_record()
    rec.request_id = "req-9"

    line = ColorFormatter().format(rec)

    assert "\033[32mINFO" in line
    assert "req-9" in line
    assert line.endswith("hello tester")
