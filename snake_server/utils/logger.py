# snake_server/utils/logger.py
"""Logging setup shared by the server modules."""

import logging
import sys
from typing import Union

DEFAULT_FORMAT = "%(asctime)s %(levelname)s [%(name)s:%(lineno)d] %(message)s"


def configure_logging(level: Union[str, int] = "INFO") -> None:
    """
    Configure the root logger with a single stdout handler.

    Args:
        level: Logging level name or int (e.g., "DEBUG", logging.INFO).
    """
    console = logging.StreamHandler(sys.stdout)
    console.setFormatter(logging.Formatter(DEFAULT_FORMAT))

    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(level)
    root.addHandler(console)

    logging.captureWarnings(True)


def get_logger(name: str) -> logging.Logger:
    """Return a namespaced logger; configure_logging() should be called once on startup."""
    return logging.getLogger(name)
