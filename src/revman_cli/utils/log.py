"""Logging configuration for revman-cli.

Diagnostics are written to stderr through Rich so that rendered output
on stdout (tree, JSON, abstract) stays machine-readable.
"""

from __future__ import annotations

import logging

from revman_cli.exceptions import EnvironmentError

LOGGER_NAME: str = "revman_cli"


def setup_logger(level: str = "WARNING") -> logging.Logger:
    """Configure the package logger with Rich formatting.

    Safe to call more than once: the handler is only attached the first
    time, later calls just adjust the level.
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level.upper())

    if logger.handlers:
        return logger

    try:
        from rich.console import Console
        from rich.logging import RichHandler
    except ModuleNotFoundError as exc:
        raise EnvironmentError(
            "rich is not installed. Install with: pip install rich",
        ) from exc

    handler = RichHandler(
        console=Console(stderr=True),
        show_time=False,
        show_path=False,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)
    return logger


def get_logger(name: str) -> logging.Logger:
    """Return a child logger of the package logger."""
    if name == LOGGER_NAME or name.startswith(LOGGER_NAME + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{LOGGER_NAME}.{name}")
