"""Logging setup for the server and CLI: a single stderr handler on the package logger."""
from __future__ import annotations

import logging
import sys
from typing import Optional

from tictactoe.config import Settings

LOGGER_NAME = "tictactoe"
LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(level: Optional[str] = None, settings: Optional[Settings] = None) -> logging.Logger:
    level_name = (level or (settings or Settings.from_env()).log_level).upper()
    log_level = getattr(logging, level_name, logging.INFO)

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(log_level)
    logger.handlers.clear()

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(log_level)
    handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT))
    logger.addHandler(handler)
    logger.propagate = False
    return logger
