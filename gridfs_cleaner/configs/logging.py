"""
GridFS Cleaner Logging Configuration

Configures logging based on environment variables:
- GRIDFS_CLEANER_DEBUG: Enable debug logging (default: false)
- GRIDFS_CLEANER_LOG_FILE: Log file path (default: mongo.txt)
"""

import logging
import os
import sys
from pathlib import Path
from typing import Optional

from gridfs_cleaner.configs.constants import DEFAULT_LOG_FILE, LOGGER_NAME


def setup_logging(
    debug: Optional[bool] = None,
    log_file: Optional[str] = None,
) -> logging.Logger:
    """
    Configure logging for the cleaner.

    Unlike a daemon, the cleaner is run by an operator watching the console,
    so the console handler always gets the full log level.

    Args:
        debug: Enable debug level. Defaults to GRIDFS_CLEANER_DEBUG env var.
        log_file: Log file path. Defaults to GRIDFS_CLEANER_LOG_FILE env var,
                  or mongo.txt in the working directory if not set.
                  An empty string disables file logging.

    Returns:
        Root logger for the cleaner
    """
    # Read from env if not provided
    if debug is None:
        debug = os.environ.get("GRIDFS_CLEANER_DEBUG", "").lower() in ("true", "1", "yes")
    if log_file is None:
        log_file = os.environ.get("GRIDFS_CLEANER_LOG_FILE", DEFAULT_LOG_FILE)

    level = logging.DEBUG if debug else logging.INFO

    formatter = logging.Formatter(
        "%(asctime)s %(levelname)-5s [%(name)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)

    # Close handlers from a previous setup so file descriptors are released
    for handler in list(logger.handlers):
        handler.close()
    logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(formatter)
    console_handler.setLevel(level)
    logger.addHandler(console_handler)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path)
        file_handler.setFormatter(formatter)
        file_handler.setLevel(level)
        logger.addHandler(file_handler)
        logger.debug(f"Logging to file: {log_file}")

    return logger


def get_logger(component: str) -> logging.Logger:
    """
    Get a logger for a specific component.

    Args:
        component: Component name (e.g., "storage.gc.scanner", "entrypoint")

    Returns:
        Logger instance for the component
    """
    return logging.getLogger(f"{LOGGER_NAME}.{component}")
