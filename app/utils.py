"""Logging helpers shared by every module."""
import logging
import sys

from app.core import config


def setup_logging() -> None:
    """
    Configure application-wide logging.

    Level comes from LOG_LEVEL; output goes to stdout.
    """
    logging.basicConfig(
        level=getattr(logging, config.LOG_LEVEL.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )


def get_logger(name: str) -> logging.Logger:
    """Return a logger for the given module name."""
    return logging.getLogger(name)
