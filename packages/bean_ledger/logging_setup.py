"""Logging for ``bean_ledger``.

Library modules only call ``get_logger("bean_ledger.<module>")``; they never
attach handlers. Until an entrypoint calls :func:`configure_logging` the
package logger carries a ``NullHandler``, so importing the engine prints
nothing.

The CLI configures logging from its root callback. The level comes from, in
order: an explicit ``level``, the ``-v`` count (``-v`` INFO, ``-vv`` DEBUG),
the ``BEAN_LEDGER_LOG_LEVEL`` environment variable, and finally WARNING.
Parse skips and pad decisions are logged at DEBUG; file appends and ledger
loads at INFO.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import IO

PACKAGE_LOGGER = "bean_ledger"
LOG_LEVEL_ENV = "BEAN_LEDGER_LOG_LEVEL"

_CLI_FORMAT = "%(levelname)s %(name)s: %(message)s"
_DEBUG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
_VERBOSITY = (logging.WARNING, logging.INFO, logging.DEBUG)

_handler: logging.Handler | None = None


def _level_from_name(value: str) -> int:
    value = value.strip().upper()
    if value.isdigit():
        return int(value)
    numeric = logging.getLevelName(value)
    return numeric if isinstance(numeric, int) else logging.WARNING


def resolve_level(level: int | str | None = None, verbosity: int = 0) -> int:
    if isinstance(level, int):
        return level
    if isinstance(level, str):
        return _level_from_name(level)
    if verbosity > 0:
        return _VERBOSITY[min(verbosity, len(_VERBOSITY) - 1)]
    env_val = os.getenv(LOG_LEVEL_ENV)
    if env_val:
        return _level_from_name(env_val)
    return logging.WARNING


def configure_logging(
    level: int | str | None = None,
    *,
    verbosity: int = 0,
    fmt: str | None = None,
    stream: IO[str] = sys.stderr,
) -> int:
    """Attach the package's stderr handler and return the effective level.

    Calling this again only adjusts the level and format of the handler
    installed the first time.
    """

    global _handler
    resolved = resolve_level(level, verbosity)
    logger = logging.getLogger(PACKAGE_LOGGER)

    if _handler is None:
        for h in list(logger.handlers):
            if isinstance(h, logging.NullHandler):
                logger.removeHandler(h)
        _handler = logging.StreamHandler(stream)
        logger.addHandler(_handler)
        logger.propagate = False

    _handler.setLevel(resolved)
    _handler.setFormatter(
        logging.Formatter(fmt or (_DEBUG_FORMAT if resolved <= logging.DEBUG else _CLI_FORMAT))
    )
    logger.setLevel(resolved)
    return resolved


def get_logger(name: str) -> logging.Logger:
    pkg_logger = logging.getLogger(PACKAGE_LOGGER)
    if _handler is None and not pkg_logger.handlers:
        pkg_logger.addHandler(logging.NullHandler())
    return logging.getLogger(name)


__all__ = ["LOG_LEVEL_ENV", "configure_logging", "get_logger", "resolve_level"]
