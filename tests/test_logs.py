import logging

import pytest

from linkshort.logs import get_logger, set_logger, setup_logger


@pytest.fixture(autouse=True)
def restore_logger():
    previous = get_logger()
    yield
    set_logger(previous)


def test_set_logger_replaces_logger(caplog):
    custom = logging.getLogger("test-custom-logger")
    set_logger(custom)
    assert get_logger() is custom
    with caplog.at_level(logging.INFO, logger="test-custom-logger"):
        get_logger().info("custom message")
    assert "custom message" in caplog.text


def test_setup_logger_is_idempotent():
    setup_logger()
    logger = get_logger()
    count = len(logger.handlers)
    setup_logger()
    assert get_logger() is logger
    assert len(get_logger().handlers) == count


def test_setup_logger_writes_to_stdout(capsys):
    setup_logger()
    get_logger().info("hello world")
    out = capsys.readouterr().out
    assert "hello world" in out
    assert "level=INFO" in out