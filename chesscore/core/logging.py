"""Logging configuration (loguru)."""

import sys
from pathlib import Path
from typing import Optional

from loguru import logger

from chesscore.core.config import Settings


def setup_logging(level: str = "INFO", log_file: Optional[str | Path] = None) -> None:
    """Replace loguru's default handler by a stderr handler (and optionally a file) at the given level."""
    logger.remove()
    logger.add(
        sys.stderr,
        level=level,
        format=(
            "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
            "<level>{level: <8}</level> | "
            "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
            "<level>{message}</level>"
        ),
    )

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        logger.add(
            log_path,
            level=level,
            format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} | {message}",
        )

    logger.debug("Logging configured at level: {}", level)


def setup_logging_from_settings(settings: Settings) -> None:
    setup_logging(settings.log_level, settings.log_file)
