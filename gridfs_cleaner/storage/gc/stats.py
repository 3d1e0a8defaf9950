"""
Scan Statistics

Counters shared by the scanner, reconciler and progress reporter. Only the
coordinating thread mutates them; the reporter only reads.
"""

import time
from dataclasses import dataclass, field
from typing import Any, Optional


@dataclass
class ScanStats:
    """Counters for one cleaner run."""

    chunks_observed: int = 0
    """Chunk records seen by the scanner."""

    distinct_files_observed: int = 0
    """Distinct parent identifiers classified."""

    chunks_per_orphan: dict[Any, int] = field(default_factory=dict)
    """Deleted (or would-delete) chunk count per orphaned file."""

    files_processed: int = 0
    """Orphaned files reconciled successfully."""

    chunks_removed: int = 0
    """Total chunks deleted, or counted in dry-run mode."""

    failed_files: list[Any] = field(default_factory=list)
    """Orphaned files whose count/delete failed."""

    started_at: Optional[float] = None
    finished_at: Optional[float] = None

    def start(self) -> None:
        self.started_at = time.monotonic()
        self.finished_at = None

    def stop(self) -> None:
        self.finished_at = time.monotonic()

    @property
    def elapsed_seconds(self) -> float:
        if self.started_at is None:
            return 0.0
        end = self.finished_at if self.finished_at is not None else time.monotonic()
        return end - self.started_at

    def record_orphan(self, file_id: Any, chunk_count: int) -> None:
        self.chunks_per_orphan[file_id] = chunk_count
        self.chunks_removed += chunk_count
        self.files_processed += 1
