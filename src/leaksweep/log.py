"""Logging setup — one Rich handler on stderr for the whole package."""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

LOGGER_NAME = "leaksweep"


def configure_logging(*, verbose: bool = False, debug: bool = False) -> logging.Logger:
    """Attach a RichHandler to the ``leaksweep`` logger (idempotent)."""
    level = logging.DEBUG if debug else logging.INFO if verbose else logging.WARNING
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)
    logger.handlers.clear()
    handler = RichHandler(
        console=Console(stderr=True),
        show_path=debug,
        show_time=debug,
        markup=False,
        rich_tracebacks=debug,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)
    logger.propagate = False
    return logger
