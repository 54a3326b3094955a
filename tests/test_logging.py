import json
import logging
import sys

from stylematch_server.core.logging import (
    ROOT_LOGGER_NAME,
    HumanFormatter,
    JsonFormatter,
    configure_logging,
)


def _record(msg="hello %s", args=("world",), level=logging.INFO, exc_info=None):
    return logging.LogRecord(
        name="stylematch.test",
        level=level,
        pathname=__file__,
        lineno=1,
        msg=msg,
        args=args,
        exc_info=exc_info,
    )


def test_json_formatter_emits_single_line_json():
    line = JsonFormatter().format(_record())
    data = json.loads(line)

    assert data["message"] == "hello world"
    assert data["level"] == "INFO"
    assert data["logger"] == "stylematch.test"
    assert data["timestamp"].endswith("Z")
    assert "\n" not in line


def test_json_formatter_includes_exception():
    try:
        raise ValueError("bad value")
    except ValueError:
        record = _record(exc_info=sys.exc_info())

    data = json.loads(JsonFormatter().format(record))
    assert "ValueError: bad value" in data["exception"]


def test_human_formatter_contains_level_and_name():
    line = HumanFormatter().format(_record(level=logging.WARNING))

    assert "WARNING" in line
    assert "stylematch.test: hello world" in line


def test_configure_logging_replaces_handlers():
    configure_logging("DEBUG")
    logger = configure_logging("warning", json_output=True)

    assert logger.name == ROOT_LOGGER_NAME
    assert logger.level == logging.WARNING
    assert len(logger.handlers) == 1
    assert isinstance(logger.handlers[0].formatter, JsonFormatter)

    configure_logging("INFO")
