"""Unit tests for satclock.logging_config."""

import json
import logging

import pytest

from satclock.logging_config import setup_logging


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield root
    for handler in root.handlers[:]:
        root.removeHandler(handler)
    for handler in handlers:
        root.addHandler(handler)
    root.setLevel(level)


def test_text_format(restore_root_logger, capsys):
    setup_logging("debug", "text")

    logging.getLogger("satclock.test").debug("hello %s", "world")

    err = capsys.readouterr().err
    assert "DEBUG satclock.test hello world" in err
    assert restore_root_logger.level == logging.DEBUG


def test_json_format(restore_root_logger, capsys):
    setup_logging("INFO", "json")

    logging.getLogger("satclock.test").info("rate changed")

    record = json.loads(capsys.readouterr().err.strip().splitlines()[-1])
    assert record["message"] == "rate changed"
    assert record["level"] == "INFO"
    assert record["name"] == "satclock.test"


def test_unknown_level_falls_back_to_info(restore_root_logger):
    setup_logging("chatty")
    assert restore_root_logger.level == logging.INFO


def test_replaces_existing_handlers(restore_root_logger):
    setup_logging()
    setup_logging()
    assert len(restore_root_logger.handlers) == 1
