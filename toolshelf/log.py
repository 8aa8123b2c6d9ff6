"""Loguru sink setup shared by the CLI and the API factory."""

from __future__ import annotations

import sys

from loguru import logger

from toolshelf.config import settings


def configure_logging(level: str | None = None) -> None:
    """Route loguru output to stderr at *level* (default ``settings.log_level``)."""
    logger.remove()
    logger.add(sys.stderr, level=(level or settings.log_level).upper())
