# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Logging setup for the reporter and its CLI.

Library modules only create module-level loggers; handlers are installed by
applications. ``configure_logging`` is the convenience entry point used by
the CLI, and ``enable_debug_logging`` backs the ``debug`` config flag.
"""

from __future__ import annotations

import logging
import os
import sys

PACKAGE_LOGGER_NAME = "botgate_reporter"
LOG_FORMAT = "%(asctime)s [%(levelname)s] [BotGate Reporter] %(name)s: %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_VALID_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


def configure_logging(level: str | None = None) -> None:
    """Configure root logging from ``level`` or ``BOTGATE_LOG_LEVEL``.

    Invalid levels fall back to INFO with a warning on stderr.
    """
    log_level = (level or os.getenv("BOTGATE_LOG_LEVEL", "INFO")).upper()
    if log_level not in _VALID_LEVELS:
        print(
            f"Warning: Invalid BOTGATE_LOG_LEVEL '{log_level}', using INFO. "
            f"Valid levels: {', '.join(sorted(_VALID_LEVELS))}",
            file=sys.stderr,
        )
        log_level = "INFO"

    logging.basicConfig(
        level=getattr(logging, log_level, logging.INFO),
        format=LOG_FORMAT,
        datefmt=LOG_DATE_FORMAT,
    )


def enable_debug_logging() -> None:
    """Lower the package logger to DEBUG, adding a stream handler if none exists."""
    package_logger = logging.getLogger(PACKAGE_LOGGER_NAME)
    package_logger.setLevel(logging.DEBUG)
    if not package_logger.handlers and not logging.getLogger().handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT, LOG_DATE_FORMAT))
        package_logger.addHandler(handler)


__all__: list[str] = [
    "LOG_FORMAT",
    "PACKAGE_LOGGER_NAME",
    "configure_logging",
    "enable_debug_logging",
]
