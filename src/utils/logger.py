"""Centralised Loguru logger shared across the project."""
from __future__ import annotations

import sys

from loguru import logger

DEFAULT_LEVEL = "INFO"


def configure_logging(level: str | None = None) -> None:
    """Replace the default sink with a stderr sink at ``level``.

    Scripts call this once after reading the configuration; library code only
    imports ``logger`` and never reconfigures sinks.
    """

    resolved = (level or DEFAULT_LEVEL).strip().upper() or DEFAULT_LEVEL
    logger.remove()
    logger.add(sys.stderr, level=resolved)
    logger.debug("Logging configured at level {}", resolved)


__all__ = ["configure_logging", "logger"]
