"""Logging helpers shared by every module."""

import logging
from typing import Optional

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def get_logger(name: str) -> logging.Logger:
    """Return a module logger (call as ``get_logger(__name__)``)."""
    return logging.getLogger(name)


def configure_logging(level: Optional[str] = None) -> None:
    """
    Attach a stream handler to the package root logger.

    Safe to call more than once; only the level is updated after the first call.
    """
    root = logging.getLogger("emiten_store")
    root.setLevel((level or "INFO").upper())
    if not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(handler)
