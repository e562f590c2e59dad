"""Logging utilities for the fx_rates package."""

from __future__ import annotations

import logging

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

_CONFIGURED = False


def get_logger(name: str = "fx_rates") -> logging.Logger:
    """Return a logger, configuring the root handler on first use."""
    global _CONFIGURED
    if not _CONFIGURED:
        logging.basicConfig(level=logging.INFO, format=LOG_FORMAT)
        _CONFIGURED = True
    return logging.getLogger(name)


def configure_logging(level: str | int) -> None:
    """Apply ``level`` to every ``fx_rates`` logger."""

    if isinstance(level, str):
        resolved = logging.getLevelName(level.strip().upper())
        if not isinstance(resolved, int):
            raise ValueError(f"Unknown log level: {level!r}")
        level = resolved
    get_logger("fx_rates").setLevel(level)
