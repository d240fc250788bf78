"""Periodic cleanup of expired rate-limit records and relay results."""

from __future__ import annotations

import logging
from threading import Event, Thread
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)


class BackgroundSweeper:
    def __init__(self, result_store, rate_limiter, interval_seconds: float = 3600) -> None:
        self.result_store = result_store
        self.rate_limiter = rate_limiter
        self.interval_seconds = interval_seconds
        self._thread: Optional[Thread] = None
        self._stop_event = Event()

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def sweep_once(self) -> Dict[str, Any]:
        sessions_removed = self.rate_limiter.sweep()
        results_removed = self.result_store.prune()
        if sessions_removed or results_removed:
            logger.info(
                "Sweep removed %d rate-limit records and %d results",
                sessions_removed,
                results_removed,
            )
        return {"sessions_removed": sessions_removed, "results_removed": results_removed}

    def _loop(self) -> None:
        while not self._stop_event.wait(self.interval_seconds):
            try:
                self.sweep_once()
            except Exception as e:
                # Keep the loop alive for the next interval.
                logger.exception("Error during sweep: %s", e)

    def start(self) -> None:
        if self.running:
            return
        self._stop_event = Event()
        self._thread = Thread(target=self._loop, daemon=True, name="emailspy-sweeper")
        self._thread.start()

    def stop(self) -> None:
        if self._thread and self._thread.is_alive():
            self._stop_event.set()
            self._thread.join(timeout=5)
        self._thread = None
