"""Logging helpers for the latinsquare package.

The package logs under the ``latinsquare`` namespace and ships with a
``NullHandler`` only; output appears once the host application (or
:func:`configure_logging`) installs a handler.
"""

from __future__ import annotations

import logging
from typing import Optional

PACKAGE_LOGGER = "latinsquare"

logging.getLogger(PACKAGE_LOGGER).addHandler(logging.NullHandler())


def configure_logging(level: int = logging.INFO) -> logging.Handler:
    """Attach a stream handler to the package logger and return it.

    Calling it again replaces the handler it installed before; handlers owned
    by the application, including those on the root logger, are left alone.
    """

    logger = logging.getLogger(PACKAGE_LOGGER)
    for existing in list(logger.handlers):
        if getattr(existing, "_latinsquare_stream", False):
            logger.removeHandler(existing)

    handler = logging.StreamHandler()
    handler.setFormatter(
        logging.Formatter(
            fmt="%(asctime)s | %(levelname)-7s | %(name)s | %(message)s",
            datefmt="%H:%M:%S",
        )
    )
    handler._latinsquare_stream = True  # type: ignore[attr-defined]
    logger.addHandler(handler)
    logger.setLevel(level)
    return handler


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return a logger in the package namespace."""

    return logging.getLogger(name or PACKAGE_LOGGER)
