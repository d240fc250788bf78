"""Session-scoped fixed-window rate limiting."""

from __future__ import annotations

import math
import time
from dataclasses import dataclass
from threading import Lock
from typing import Callable, Dict, Optional


@dataclass
class RateLimitRecord:
    count: int
    window_start: float


@dataclass(frozen=True)
class RateLimitDecision:
    allowed: bool
    remaining_minutes: Optional[int] = None


class SessionRateLimiter:
    """Fixed-window request counter keyed by session id.

    Records live in process memory. Subclasses can move them elsewhere by
    overriding ``_load_record``, ``_store_record`` and ``sweep``; the window
    policy in :meth:`check` stays the same.
    """

    def __init__(
        self,
        limit: int = 3,
        window_seconds: float = 300,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.limit = limit
        self.window_seconds = window_seconds
        self._clock = clock
        self._records: Dict[str, RateLimitRecord] = {}
        self._lock = Lock()

    def _load_record(self, session_id: str) -> Optional[RateLimitRecord]:
        return self._records.get(session_id)

    def _store_record(self, session_id: str, record: RateLimitRecord) -> None:
        self._records[session_id] = record

    def check(self, session_id: str) -> RateLimitDecision:
        """Count one request for ``session_id`` and decide whether it may proceed."""
        with self._lock:
            now = self._clock()
            record = self._load_record(session_id) or RateLimitRecord(count=0, window_start=now)
            elapsed = now - record.window_start

            if elapsed > self.window_seconds:
                self._store_record(session_id, RateLimitRecord(count=1, window_start=now))
                return RateLimitDecision(allowed=True)

            if record.count >= self.limit:
                remaining = math.ceil((self.window_seconds - elapsed) / 60)
                return RateLimitDecision(allowed=False, remaining_minutes=max(remaining, 1))

            record.count += 1
            self._store_record(session_id, record)
            return RateLimitDecision(allowed=True)

    def sweep(self) -> int:
        """Drop records whose window has already expired. Returns the number removed."""
        with self._lock:
            now = self._clock()
            removed = 0
            for session_id, record in list(self._records.items()):
                if now - record.window_start > self.window_seconds:
                    self._records.pop(session_id, None)
                    removed += 1
            return removed

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, session_id: object) -> bool:
        return session_id in self._records
