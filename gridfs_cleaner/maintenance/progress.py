"""
Progress Reporter

Background thread that periodically logs how far a long-running scan has
come. It only reads counters and never coordinates with the pipeline.
"""

import threading
from typing import Callable, Optional

from gridfs_cleaner.configs import get_logger
from gridfs_cleaner.configs.constants import DEFAULT_PROGRESS_INTERVAL

logger = get_logger("maintenance.progress")


class ProgressReporter:
    """
    Daemon thread logging a progress line every `interval` seconds.

    The first line is logged immediately on start.
    """

    def __init__(
        self,
        report: Callable[[], str],
        interval: float = DEFAULT_PROGRESS_INTERVAL,
    ):
        self._report = report
        self.interval = interval
        self._thread: Optional[threading.Thread] = None
        self._stop_event = threading.Event()

    def start(self) -> None:
        """Start the reporter thread."""
        if self._thread is not None:
            return

        self._stop_event.clear()
        self._thread = threading.Thread(
            target=self._run_loop,
            name="progress-reporter",
            daemon=True,
        )
        self._thread.start()

    def stop(self) -> None:
        """Stop the reporter thread."""
        self._stop_event.set()
        if self._thread:
            self._thread.join(timeout=5)
        self._thread = None

    def _run_loop(self) -> None:
        while not self._stop_event.is_set():
            try:
                logger.info(self._report())
            except Exception as e:
                logger.warning(f"Progress report failed: {e}")

            self._stop_event.wait(timeout=self.interval)

    def __enter__(self) -> "ProgressReporter":
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.stop()
