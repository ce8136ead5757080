"""
Logging setup for the CastMe API.

``setup_logging`` reads the level and the optional log file from
``Settings`` and attaches a console handler, plus a file handler when
``log_file`` is set, to the root logger.  The handlers carry fixed
names, so building the app more than once (tests do) never attaches
them twice.
"""

import logging
from pathlib import Path

from .config import Settings, settings

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

CONSOLE_HANDLER = "castme.console"
FILE_HANDLER = "castme.file"


def _level(name: str) -> int:
    level = logging.getLevelName(name.upper())
    return level if isinstance(level, int) else logging.INFO


def _has_handler(logger: logging.Logger, name: str) -> bool:
    return any(handler.get_name() == name for handler in logger.handlers)


def setup_logging(config: Settings = settings) -> None:
    """Configure the root logger from ``config``.

    Unknown level names fall back to ``INFO``.  The directory of
    ``config.log_file`` is created when missing.
    """
    root = logging.getLogger()
    root.setLevel(_level(config.log_level))
    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)

    if not _has_handler(root, CONSOLE_HANDLER):
        console_handler = logging.StreamHandler()
        console_handler.set_name(CONSOLE_HANDLER)
        console_handler.setFormatter(formatter)
        root.addHandler(console_handler)

    if config.log_file and not _has_handler(root, FILE_HANDLER):
        log_path = Path(config.log_file).resolve()
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path, encoding="utf-8")
        file_handler.set_name(FILE_HANDLER)
        file_handler.setFormatter(formatter)
        root.addHandler(file_handler)
