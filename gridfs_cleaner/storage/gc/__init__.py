"""
Garbage Collection

Orphaned chunk cleanup for GridFS buckets:
- Chunk scanning (covered projection over <bucket>.chunks)
- Orphan classification (one existence lookup per distinct file)
- Reconciliation (per-file bulk delete, or count in dry-run mode)
"""

from gridfs_cleaner.storage.gc.classifier import OrphanClassifier
from gridfs_cleaner.storage.gc.reconciler import (
    ReconcileResult,
    describe_file_id,
    reconcile,
)
from gridfs_cleaner.storage.gc.scanner import scan_file_ids
from gridfs_cleaner.storage.gc.stats import ScanStats

__all__ = [
    # Scan
    "scan_file_ids",
    "ScanStats",
    # Classification
    "OrphanClassifier",
    # Reconciliation
    "reconcile",
    "ReconcileResult",
    "describe_file_id",
]
