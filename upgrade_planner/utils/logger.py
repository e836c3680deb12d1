"""Logging configuration."""

import logging
from typing import Optional

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def get_logger(name: Optional[str] = None, level: Optional[str] = None) -> logging.Logger:
    """Get a configured logger instance."""
    logger = logging.getLogger(name or __name__)

    # Only configure if no handlers exist
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
        logger.setLevel(logging.INFO)

    if level:
        logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    return logger


def set_log_level(level: str) -> None:
    """Apply a level to every logger created under the package."""
    numeric_level = getattr(logging, level.upper(), logging.INFO)
    for logger_name in list(logging.root.manager.loggerDict):
        if logger_name.startswith("upgrade_planner"):
            logging.getLogger(logger_name).setLevel(numeric_level)
