"""Logging for ssmkit.

All module loggers are children of the ``ssmkit`` package logger, which owns
the single stderr handler. Models report fits at DEBUG and optimizer
non-convergence at WARNING.
"""

from __future__ import annotations

import logging
import sys
from typing import Optional, TextIO

PACKAGE = "ssmkit"
_FORMAT = "[%(levelname)s] %(name)s: %(message)s"


def _package_logger() -> logging.Logger:
    logger = logging.getLogger(PACKAGE)
    if not logger.handlers:
        _install_handler(logger, logging.WARNING, _FORMAT, sys.stderr)
    return logger


def _install_handler(logger: logging.Logger, level: int, fmt: str, stream: TextIO) -> None:
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
    handler = logging.StreamHandler(stream)
    handler.setFormatter(logging.Formatter(fmt))
    logger.addHandler(handler)
    logger.setLevel(level)
    logger.propagate = False


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Logger for a module, placed under the ``ssmkit`` namespace.

    Args:
        name: Module name, typically `__name__`. None gives the package logger.

    Example:
        >>> get_logger("models.gaussian").name
        'ssmkit.models.gaussian'
    """
    package = _package_logger()
    if name is None or name == PACKAGE:
        return package
    if not name.startswith(PACKAGE + "."):
        name = f"{PACKAGE}.{name}"
    return logging.getLogger(name)


def set_log_level(level: int | str) -> None:
    """Set the level of every ssmkit logger ('DEBUG', logging.INFO, ...)."""
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
    _package_logger().setLevel(level)


def configure_logging(
    level: int | str = logging.WARNING,
    format_string: Optional[str] = None,
    stream: Optional[TextIO] = None,
) -> None:
    """Replace the package handler with one writing to `stream` (default stderr)."""
    _install_handler(
        _package_logger(),
        logging.WARNING,
        format_string or _FORMAT,
        stream if stream is not None else sys.stderr,
    )
    set_log_level(level)


__all__ = ["get_logger", "set_log_level", "configure_logging"]
