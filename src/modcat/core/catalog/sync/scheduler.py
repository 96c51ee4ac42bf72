"""
Periodic background sync.

Runs SyncOrchestrator.sync() every N minutes on a daemon thread so the
local catalog follows the remote database without an operator calling
the sync endpoint.
"""

import logging
import threading

from modcat.core.catalog.sync.orchestrator import SyncOrchestrator

logger = logging.getLogger(__name__)


class SyncScheduler:
    """
    Background thread that syncs on a fixed interval.

    The first sync happens one interval after start(), not immediately.

    Example:
        >>> scheduler = SyncScheduler(orchestrator, interval_seconds=180)
        >>> scheduler.start()
        >>> ...
        >>> scheduler.stop()
    """

    def __init__(self, orchestrator: SyncOrchestrator, interval_seconds: float) -> None:
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be positive")
        self.orchestrator = orchestrator
        self.interval_seconds = interval_seconds
        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None
        self.runs = 0

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        """Start the background thread (no-op if already running)."""
        if self.running:
            return
        self._stop_event.clear()
        self._thread = threading.Thread(
            target=self._loop, name="modcat-sync-scheduler", daemon=True
        )
        self._thread.start()
        logger.info(f"Periodic sync every {self.interval_seconds:.0f}s")

    def stop(self, timeout: float | None = 5.0) -> None:
        """Signal the thread to stop and wait for it."""
        self._stop_event.set()
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None
        logger.info("Periodic sync stopped")

    def _loop(self) -> None:
        while not self._stop_event.wait(self.interval_seconds):
            try:
                result = self.orchestrator.sync()
            except Exception:
                logger.exception("Scheduled sync crashed; retrying next interval")
                continue
            finally:
                self.runs += 1
            if not result.success:
                for error in result.errors:
                    logger.warning(f"Scheduled sync failed: {error}")
