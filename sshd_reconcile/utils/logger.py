"""Logging configuration."""

import logging
from pathlib import Path
from typing import Optional

from sshd_reconcile.models.config import AppConfig


def setup_logger(config: Optional[AppConfig] = None, level_override: Optional[str] = None) -> logging.Logger:
    """
    Configure application logger.

    Args:
        config: Application configuration
        level_override: Level name taking precedence over the configured one

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger("sshd_reconcile")

    # Replace handlers from an earlier call so the latest config applies
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    # Set level
    level_name = level_override or (config.logging.level if config else "INFO")
    level = getattr(logging, level_name.upper(), logging.INFO)

    logger.setLevel(level)

    # Console handler
    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_formatter = logging.Formatter("%(levelname)s: %(message)s")
    console_handler.setFormatter(console_formatter)
    logger.addHandler(console_handler)

    # File handler (if configured)
    if config and config.logging.file:
        log_file = Path(config.logging.file)
        log_file.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(level)
        file_formatter = logging.Formatter(config.logging.format)
        file_handler.setFormatter(file_formatter)
        logger.addHandler(file_handler)

    return logger
