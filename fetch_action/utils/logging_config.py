"""
Centralized logging configuration for fetch_action.

Provides console and rotating file handlers with consistent formatting
under the ``fetch_action`` logger namespace.
"""

import logging
import logging.handlers
import sys
from pathlib import Path
from typing import Optional


# Log format with timestamp, level, module, and message
LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)-28s | %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

ROOT_LOGGER_NAME = "fetch_action"

DEFAULT_LOG_DIR = Path.cwd() / "logs"


def setup_logging(
    level: int = logging.INFO,
    log_dir: Optional[Path] = None,
    console: bool = True,
    file: bool = False,
    max_bytes: int = 10 * 1024 * 1024,  # 10 MB
    backup_count: int = 7,
) -> logging.Logger:
    """
    Configure logging for the fetch_action namespace.

    Args:
        level: Logging level (default INFO)
        log_dir: Directory for log files (default: ./logs)
        console: Enable console output
        file: Enable file output with rotation
        max_bytes: Max size per log file before rotation
        backup_count: Number of backup files to keep

    Returns:
        Root logger for the fetch_action namespace
    """
    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    root_logger.setLevel(level)

    # Clear any existing handlers
    root_logger.handlers.clear()

    formatter = logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT)

    if console:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(level)
        console_handler.setFormatter(formatter)
        root_logger.addHandler(console_handler)

    if file:
        log_dir = Path(log_dir) if log_dir else DEFAULT_LOG_DIR
        log_dir.mkdir(parents=True, exist_ok=True)

        file_handler = logging.handlers.RotatingFileHandler(
            log_dir / "fetch_action.log",
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding="utf-8"
        )
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

        # Error-only file handler
        error_handler = logging.handlers.RotatingFileHandler(
            log_dir / "fetch_action_errors.log",
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding="utf-8"
        )
        error_handler.setLevel(logging.ERROR)
        error_handler.setFormatter(formatter)
        root_logger.addHandler(error_handler)

    return root_logger


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger for a specific module.

    Args:
        name: Module name (e.g., "transport", "fetch_action_creator")

    Returns:
        Logger instance under the fetch_action namespace

    Example:
        >>> logger = get_logger("transport")
        >>> logger.debug("Sending request", extra={"url": "/api/items"})
    """
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")
