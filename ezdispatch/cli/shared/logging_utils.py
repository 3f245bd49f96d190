"""Loguru helpers for consistent logging in CLI commands."""

from __future__ import annotations

import sys

from loguru import logger


def configure_cli_logging(verbose: bool = False) -> None:
    """Replace loguru's default sink with one stderr sink sized to the verbosity."""
    logger.remove()
    logger.add(
        sys.stderr,
        level="DEBUG" if verbose else "WARNING",
        format="<dim>{time:HH:mm:ss}</dim> <level>{level: <7}</level> {message}",
        backtrace=False,
        diagnose=False,
    )
