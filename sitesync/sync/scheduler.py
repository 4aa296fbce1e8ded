"""Recurring timer that drives periodic record fetches."""

from __future__ import annotations

import logging
import threading
from typing import Callable, Optional

logger = logging.getLogger("sitesync.sync.scheduler")


class FetchScheduler:
    """Calls a function every ``interval`` seconds on a daemon thread.

    The first call happens one full interval after ``start``. Calls fire on
    schedule whether or not earlier fetches were answered.
    """

    def __init__(self) -> None:
        self._thread: Optional[threading.Thread] = None
        self._stop = threading.Event()
        self.interval: Optional[float] = None
        self.ticks = 0

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self, interval: float, callback: Callable[[], None]) -> bool:
        """Start the timer; returns False if it is already running."""
        if self.running:
            return False
        if interval <= 0:
            raise ValueError("Fetch interval must be positive.")

        self.interval = float(interval)
        self._stop.clear()
        self._thread = threading.Thread(
            target=self._run,
            args=(self.interval, callback),
            name="sitesync-fetch",
            daemon=True,
        )
        self._thread.start()
        logger.info("Fetch timer started (every %.1fs)", self.interval)
        return True

    def stop(self) -> None:
        """Stop the timer thread. Only used at process shutdown."""
        self._stop.set()
        if self._thread and self._thread.is_alive():
            self._thread.join(timeout=2.0)
        self._thread = None

    def _run(self, interval: float, callback: Callable[[], None]) -> None:
        while not self._stop.wait(interval):
            self.ticks += 1
            try:
                callback()
            except Exception as e:
                logger.error("Fetch tick failed: %s", e)


__all__ = ["FetchScheduler"]
