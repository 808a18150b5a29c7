#!/usr/bin/env python3

# mdbuild
# Copyright (c) 2026 Dale Chapman
# Licensed under the MIT License. See LICENSE in the project root.

"""
icons.py - Centralized icon/emoji definitions for mdbuild output

Usage:
    from mdbuild.icons import icons
    print(f"{icons.SUCCESS} Build finished!")

Or import individual icons:
    from mdbuild.icons import SUCCESS, WARNING, ERROR

All unicode characters are defined here once. Never edit unicode
characters in other files - import from this module instead.
"""

import logging
from dataclasses import dataclass


@dataclass(frozen=True)
class Icons:
    """
    Centralized icon definitions.

    Categories:
    - Status: SUCCESS, ERROR, WARNING, INFO, DEBUG, CRITICAL
    - Pipeline: BUILD, POST, WATCH, DELETE, FOLDER
    """

    # =========================================================================
    # Status Icons
    # =========================================================================
    SUCCESS: str = "✅"
    ERROR: str = "❌"
    WARNING: str = "⚠️"
    INFO: str = "ℹ️"
    DEBUG: str = "🔍"
    CRITICAL: str = "💥"

    # =========================================================================
    # Pipeline Icons
    # =========================================================================
    BUILD: str = "🔨"
    POST: str = "📝"
    WATCH: str = "👀"
    DELETE: str = "🗑️"
    FOLDER: str = "📁"


icons = Icons()

SUCCESS = icons.SUCCESS
ERROR = icons.ERROR
WARNING = icons.WARNING
INFO = icons.INFO
BUILD = icons.BUILD
POST = icons.POST
WATCH = icons.WATCH
DELETE = icons.DELETE
FOLDER = icons.FOLDER


# =============================================================================
# Logging with icons
# =============================================================================

# Message-only; no per-line timestamps
LOG_FORMAT = "%(message)s"

LEVEL_ICONS = {
    logging.DEBUG: icons.DEBUG,
    logging.INFO: icons.INFO,
    logging.WARNING: icons.WARNING,
    logging.ERROR: icons.ERROR,
    logging.CRITICAL: icons.CRITICAL,
}


class IconLogFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        icon = LEVEL_ICONS.get(record.levelno, icons.INFO)
        base = super().format(record)
        return f"{icon} {base}"


def setup_logging(verbosity: int) -> None:
    level = logging.INFO
    if verbosity >= 1:
        level = logging.DEBUG

    handler = logging.StreamHandler()
    handler.setFormatter(IconLogFormatter(LOG_FORMAT))

    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(level)
    root.addHandler(handler)

    # Pillow logs every plugin import at DEBUG
    logging.getLogger("PIL").setLevel(logging.INFO)
