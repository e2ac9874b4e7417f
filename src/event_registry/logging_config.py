from __future__ import annotations

import logging
from typing import Optional

PACKAGE_LOGGER = "event_registry"
REGISTRY_LOGGER = "event_registry.registry"

LEVEL_NAMES = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG", "NOTSET")


def configure_logging(level: Optional[str] = None) -> logging.Logger:
    """Apply ``level`` to the package logger and return the diagnostics logger.

    Only the level of the ``event_registry`` logger is touched; handlers and
    formatting stay with the host application. ``None`` leaves the level as is.
    """
    if level is not None:
        name = level.strip().upper()
        if name not in LEVEL_NAMES:
            raise ValueError(f"Unknown log level: {level!r}")
        logging.getLogger(PACKAGE_LOGGER).setLevel(getattr(logging, name))
    return logging.getLogger(REGISTRY_LOGGER)
