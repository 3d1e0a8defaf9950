"""
Maintenance

Orchestration of the orphaned chunk cleanup and its progress reporting.
"""

from gridfs_cleaner.maintenance.orchestrator import (
    CleanupResult,
    log_summary,
    run_cleanup,
)
from gridfs_cleaner.maintenance.progress import ProgressReporter

__all__ = [
    # Orchestration
    "CleanupResult",
    "run_cleanup",
    "log_summary",
    # Progress
    "ProgressReporter",
]
