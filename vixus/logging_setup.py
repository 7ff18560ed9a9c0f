"""Logging for the ``vixus`` package.

Aggregation modules log through ``get_logger("vixus.<module>")`` and never
attach handlers. The CLI calls :func:`configure_logging` once at startup,
which installs one named ``StreamHandler`` on the ``"vixus"`` logger. Level
and format come from the arguments, then ``VIXUS_LOG_LEVEL`` and
``VIXUS_LOG_FORMAT``. Messages are short ``key=value`` lines such as
``parse_entries:skipped pos=3 reason=not_a_mapping``.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import IO

PACKAGE_LOGGER = "vixus"
DEFAULT_FORMAT = "%(asctime)s %(name)s %(levelname)s %(message)s"

_HANDLER_NAME = "vixus-stream"


def _package_logger() -> logging.Logger:
    return logging.getLogger(PACKAGE_LOGGER)


def _installed_handler(logger: logging.Logger) -> logging.Handler | None:
    for h in logger.handlers:
        if h.get_name() == _HANDLER_NAME:
            return h
    return None


def resolve_level(level: int | str | None = None) -> int:
    """Turn ``level`` (or ``VIXUS_LOG_LEVEL`` when ``None``) into a level number.

    Accepts ints, numeric strings and level names in any case. Anything
    unrecognised resolves to ``INFO``.
    """

    if level is None:
        level = os.getenv("VIXUS_LOG_LEVEL")
    if isinstance(level, int):
        return level
    if isinstance(level, str):
        name = level.strip().upper()
        if name.isdigit():
            return int(name)
        numeric = logging.getLevelNamesMapping().get(name)
        if numeric is not None:
            return numeric
    return logging.INFO


def configure_logging(
    level: int | str | None = None,
    *,
    fmt: str | None = None,
    stream: IO[str] = sys.stderr,
) -> logging.Handler:
    """Install the package handler; later calls return the existing one unchanged.

    Parameters
    ----------
    level:
        ``int`` or level name. ``None`` reads ``VIXUS_LOG_LEVEL``, else ``INFO``.
    fmt:
        Format string. ``None`` reads ``VIXUS_LOG_FORMAT``, else
        :data:`DEFAULT_FORMAT`.
    stream:
        Destination of the handler.
    """

    logger = _package_logger()
    existing = _installed_handler(logger)
    if existing is not None:
        return existing

    for h in list(logger.handlers):
        if isinstance(h, logging.NullHandler):
            logger.removeHandler(h)

    resolved = resolve_level(level)
    handler = logging.StreamHandler(stream)
    handler.set_name(_HANDLER_NAME)
    handler.setLevel(resolved)
    handler.setFormatter(logging.Formatter(fmt or os.getenv("VIXUS_LOG_FORMAT") or DEFAULT_FORMAT))

    logger.setLevel(resolved)
    logger.addHandler(handler)
    logger.propagate = False
    return handler


def reset_logging() -> None:
    """Remove the package handler and restore propagation (tests, embedding hosts)."""

    logger = _package_logger()
    handler = _installed_handler(logger)
    if handler is not None:
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)
    logger.propagate = True
    if not logger.handlers:
        logger.addHandler(logging.NullHandler())


def get_logger(name: str) -> logging.Logger:
    """Return ``name``'s logger, keeping the package silent until configured."""

    pkg_logger = _package_logger()
    if not pkg_logger.handlers:
        pkg_logger.addHandler(logging.NullHandler())
    return logging.getLogger(name)


__all__ = [
    "DEFAULT_FORMAT",
    "PACKAGE_LOGGER",
    "configure_logging",
    "get_logger",
    "reset_logging",
    "resolve_level",
]
