"""Logging setup shared by the slag modules."""

from __future__ import annotations

import logging

_ROOT = "slag"
_FORMAT = "%(levelname)s %(name)s: %(message)s"


def get_logger(name: str) -> logging.Logger:
    """Return a logger under the ``slag`` namespace."""
    if name == _ROOT or name.startswith(_ROOT + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{_ROOT}.{name}")


def configure_logging(verbosity: int = 0) -> None:
    """Send slag's log records to stderr; ``-v`` is INFO, ``-vv`` DEBUG."""
    logger = logging.getLogger(_ROOT)
    if verbosity <= 0:
        level = logging.WARNING
    elif verbosity == 1:
        level = logging.INFO
    else:
        level = logging.DEBUG
    logger.setLevel(level)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(_FORMAT))
        logger.addHandler(handler)
