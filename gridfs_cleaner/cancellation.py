"""
Run Cancellation

A cancellation token passed down through the scan and reconcile loops,
plus a context manager that trips it on SIGINT/SIGTERM.
"""

import signal
import threading
from contextlib import contextmanager
from typing import Generator, Optional

from gridfs_cleaner.configs import get_logger

logger = get_logger("cancellation")


class CancellationToken:
    """
    Thread-safe, one-way cancellation flag.

    Loops check `cancelled` at batch/file boundaries; in-flight store
    operations are allowed to finish.
    """

    def __init__(self):
        self._event = threading.Event()
        self.reason: Optional[str] = None

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def cancel(self, reason: str = "cancelled") -> None:
        """Request cancellation. Subsequent calls keep the first reason."""
        if not self._event.is_set():
            self.reason = reason
            self._event.set()

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Block until cancelled or timeout elapses. Returns True if cancelled."""
        return self._event.wait(timeout)


@contextmanager
def cancel_on_signals(
    token: CancellationToken,
    signals: tuple[int, ...] = (signal.SIGINT, signal.SIGTERM),
) -> Generator[CancellationToken, None, None]:
    """
    Route operator interrupts to the token instead of raising KeyboardInterrupt.

    Previous handlers are restored on exit. Outside the main thread signal
    handlers cannot be installed; the token is then yielded unchanged.
    """

    def _handle_signal(signum, frame):  # noqa: ARG001
        name = signal.Signals(signum).name
        if token.cancelled:
            logger.warning(f"{name} received again, still finishing current operation")
            return
        logger.warning(f"{name} received, stopping after the current operation")
        token.cancel(name)

    previous = {}
    if threading.current_thread() is threading.main_thread():
        for signum in signals:
            previous[signum] = signal.signal(signum, _handle_signal)

    try:
        yield token
    finally:
        for signum, handler in previous.items():
            signal.signal(signum, handler)
