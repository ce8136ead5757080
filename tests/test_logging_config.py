"""Tests for the root logger setup."""

import logging
from dataclasses import replace

import pytest

from castme_api.app.core.config import settings
from castme_api.app.core.logging_config import CONSOLE_HANDLER, FILE_HANDLER, setup_logging


@pytest.fixture
def root_logger():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    root.handlers = [h for h in handlers if h.get_name() not in (CONSOLE_HANDLER, FILE_HANDLER)]
    yield root
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers = handlers
    root.setLevel(level)


def names(logger):
    return [h.get_name() for h in logger.handlers if h.get_name() in (CONSOLE_HANDLER, FILE_HANDLER)]


def test_console_only_and_idempotent(root_logger):
    config = replace(settings, log_level="debug", log_file="")

    setup_logging(config)
    setup_logging(config)

    assert names(root_logger) == [CONSOLE_HANDLER]
    assert root_logger.level == logging.DEBUG


def test_file_handler_writes_to_new_directory(root_logger, tmp_path):
    log_file = tmp_path / "logs" / "castme.log"

    setup_logging(replace(settings, log_level="INFO", log_file=str(log_file)))
    logging.getLogger("castme.test").info("hello from the test")
    for handler in root_logger.handlers:
        handler.flush()

    assert names(root_logger) == [CONSOLE_HANDLER, FILE_HANDLER]
    assert "[INFO] castme.test: hello from the test" in log_file.read_text(encoding="utf-8")


def test_unknown_level_falls_back_to_info(root_logger):
    setup_logging(replace(settings, log_level="chatty", log_file=""))
    assert root_logger.level == logging.INFO
