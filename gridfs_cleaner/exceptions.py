"""
GridFS Cleaner Exception Hierarchy

Centralized exception classes for structured error handling across the codebase.
All cleaner-specific exceptions inherit from CleanerError.

Usage:
    from gridfs_cleaner.exceptions import ConfigurationError, StorageError

    try:
        settings = load_settings()
    except ConfigurationError as e:
        logger.error(f"Invalid configuration: {e}")
"""

from typing import Any


class CleanerError(Exception):
    """Base exception for all cleaner errors."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} ({self.details})"
        return self.message


# =============================================================================
# Configuration Errors
# =============================================================================


class ConfigurationError(CleanerError):
    """Error in cleaner configuration."""

    pass


class MissingConfigError(ConfigurationError):
    """Required configuration value is missing."""

    def __init__(self, name: str):
        super().__init__(f"Please provide the environment variable '{name}'", {"name": name})
        self.name = name


# =============================================================================
# Storage Errors
# =============================================================================


class StorageError(CleanerError):
    """Base class for storage-related errors."""

    pass


class StoreConnectivityError(StorageError):
    """Connection, authentication, cursor or command failure against the store."""

    pass


# =============================================================================
# Reconciliation Errors
# =============================================================================


class ReconciliationError(CleanerError):
    """Counting or deleting the chunks of one orphaned file failed."""

    def __init__(self, file_id: Any, cause: Exception | None = None):
        details = {"file_id": str(file_id)}
        if cause is not None:
            details["cause"] = str(cause)
        super().__init__("Failed to reconcile orphaned file", details)
        self.file_id = file_id
        self.cause = cause
