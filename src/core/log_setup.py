"""
Loguru sink configuration for the API server and CLI.
"""

from __future__ import annotations

import sys
from pathlib import Path

from loguru import logger

from config import Settings, get_settings

LOG_FORMAT = "<dim>{time:HH:mm:ss}</dim> | <level>{level: <8}</level> | {name}:{line} | {message}"


def configure_logging(settings: Settings | None = None, console_level: str | None = None) -> None:
    """
    Replace loguru's default handler with the configured sinks.

    Args:
        settings: Settings to read level and log file from (cached settings if None)
        console_level: Override for the stderr sink (the CLI keeps it quiet)
    """
    settings = settings or get_settings()

    logger.remove()
    logger.add(
        sys.stderr,
        level=console_level or settings.log_level,
        format=LOG_FORMAT,
    )

    if settings.log_file:
        log_path = Path(settings.log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        logger.add(
            log_path,
            level=settings.log_level,
            rotation="10 MB",
            retention=5,
            encoding="utf-8",
        )
