"""
utils/logger.py
---------------
Process-wide logging for the POS backend.

Repositories and services call `get_logger(__name__)`; the first call
installs one stdout handler on the root logger at the level named by
LOG_LEVEL. Transactions run on pooled connections from worker threads,
so every line carries the thread name.
"""

import logging
import sys

from config import LOG_LEVEL

_LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(threadName)s | %(name)s | %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
_handler = None


def resolve_level(name: str) -> int:
    """Map a level name such as "debug" to its logging constant; unknown names fall back to INFO."""
    level = logging.getLevelName(str(name).upper())
    return level if isinstance(level, int) else logging.INFO


def configure_logging(level: str = LOG_LEVEL) -> logging.Handler:
    """
    Install the stdout handler on the root logger.

    Calling it again only changes the level; the handler is never added twice.
    """
    global _handler
    root = logging.getLogger()
    root.setLevel(resolve_level(level))
    if _handler is None:
        _handler = logging.StreamHandler(sys.stdout)
        _handler.setFormatter(logging.Formatter(_LOG_FORMAT, _DATE_FORMAT))
        root.addHandler(_handler)
    return _handler


def get_logger(name: str) -> logging.Logger:
    if _handler is None:
        configure_logging()
    return logging.getLogger(name)
