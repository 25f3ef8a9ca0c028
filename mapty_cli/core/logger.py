"""Logger configuration for the CLI."""

from __future__ import annotations

import sys

from loguru import logger


def setup_logger(verbose: bool = False, quiet: bool = False) -> str:
    """Route loguru output to stderr at a level matching the CLI flags.

    Returns the level that was configured.
    """
    level = "DEBUG" if verbose else "ERROR" if quiet else "WARNING"

    # Remove default handler
    logger.remove()
    logger.add(
        sys.stderr,
        format="<level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>",
        level=level,
        colorize=None,
    )
    logger.debug("Logger initialized with level={}", level)
    return level
