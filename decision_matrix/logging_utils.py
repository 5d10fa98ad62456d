"""
Logging setup for the decision matrix app.
"""
import logging
import sys
from typing import Union

LOGGER_NAME = "decision_matrix"


def setup_logging(level: Union[int, str] = logging.INFO, console: bool = True) -> logging.Logger:
    """
    Configure the package logger.

    Args:
        level: Logging level, as an int or a name such as "DEBUG"
        console: Whether to log to stdout

    Returns:
        Configured logger
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)
    logger.handlers = []  # Streamlit re-runs the script; avoid stacking handlers

    formatter = logging.Formatter(
        "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    if console:
        handler = logging.StreamHandler(sys.stdout)
        handler.setLevel(level)
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    return logger


def get_logger(name: str = LOGGER_NAME) -> logging.Logger:
    """Get a logger under the package namespace."""
    if name != LOGGER_NAME and not name.startswith(LOGGER_NAME + "."):
        name = f"{LOGGER_NAME}.{name}"
    return logging.getLogger(name)
