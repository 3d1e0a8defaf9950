"""
GridFS Cleaner Configuration Module

Re-exports commonly used functions for cleaner imports across the codebase.
"""

# Logging (most commonly used)
from gridfs_cleaner.configs.logging import get_logger, setup_logging

# Constants
from gridfs_cleaner.configs.constants import (
    EXIT_CONFIG_ERROR,
    EXIT_OK,
    EXIT_RUN_FAILED,
    FILES_ID_FIELD,
)

# YAML config
from gridfs_cleaner.configs.yaml_config import EXAMPLE_CONFIG_YAML, load_yaml_config

# Settings
from gridfs_cleaner.configs.settings import (
    CleanerSettings,
    load_settings,
    parse_bool,
    redact_connection_string,
)

__all__ = [
    # Logging
    "get_logger",
    "setup_logging",
    # Constants
    "EXIT_OK",
    "EXIT_CONFIG_ERROR",
    "EXIT_RUN_FAILED",
    "FILES_ID_FIELD",
    # YAML config
    "EXAMPLE_CONFIG_YAML",
    "load_yaml_config",
    # Settings
    "CleanerSettings",
    "load_settings",
    "parse_bool",
    "redact_connection_string",
]
