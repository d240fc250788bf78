"""In-memory data stores backing the relay and rate limiter.

The stores are built once by :func:`init_stores` and kept on
``app.extensions``; request handlers reach them through the accessor
functions below.
"""

from __future__ import annotations

import logging
import time
from threading import Lock
from typing import Any, Callable, Dict, Optional

from flask import Flask, current_app

from emailspy.config import Config
from emailspy.utils.rate_limit import SessionRateLimiter

_LOGGER = logging.getLogger(__name__)

STATUS_COMPLETED = "completed"
STATUS_PENDING = "pending"

CONFIG_KEY = "emailspy.config"
RESULT_STORE_KEY = "emailspy.result_store"
RATE_LIMITER_KEY = "emailspy.rate_limiter"
SWEEPER_KEY = "emailspy.sweeper"


def completed(data: Any) -> Dict[str, Any]:
    return {"status": STATUS_COMPLETED, "data": data}


def pending() -> Dict[str, Any]:
    return {"status": STATUS_PENDING}


class ResultStore:
    """Callback results waiting to be picked up by a polling client.

    With ``grace_seconds == 0`` a result is removed on its first fetch. With a
    positive grace period the first fetch only marks it consumed and it stays
    readable until the period lapses. ``ttl_seconds`` bounds how long a result
    nobody fetched is kept; ``0`` keeps it forever.
    """

    def __init__(
        self,
        ttl_seconds: float = 0,
        grace_seconds: float = 0,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.ttl_seconds = ttl_seconds
        self.grace_seconds = grace_seconds
        self._clock = clock
        self._results: Dict[str, Dict[str, Any]] = {}
        self._lock = Lock()

    def deposit(self, callback_id: str, payload: Any) -> None:
        with self._lock:
            self._results[callback_id] = {
                "data": payload,
                "received_at": self._clock(),
                "consumed_at": None,
            }

    def fetch(self, callback_id: str) -> Dict[str, Any]:
        with self._lock:
            entry = self._results.get(callback_id)
            if entry is None:
                return pending()

            if not self.grace_seconds:
                self._results.pop(callback_id, None)
                return completed(entry["data"])

            now = self._clock()
            if entry["consumed_at"] is None:
                entry["consumed_at"] = now
            elif now - entry["consumed_at"] > self.grace_seconds:
                self._results.pop(callback_id, None)
                return pending()
            return completed(entry["data"])

    def prune(self) -> int:
        """Remove expired results and return how many were dropped."""
        with self._lock:
            now = self._clock()
            removed = 0
            for callback_id, entry in list(self._results.items()):
                if self._is_expired(entry, now):
                    self._results.pop(callback_id, None)
                    removed += 1
            return removed

    def _is_expired(self, entry: Dict[str, Any], now: float) -> bool:
        consumed_at = entry["consumed_at"]
        if consumed_at is not None:
            return now - consumed_at > self.grace_seconds
        if self.ttl_seconds:
            return now - entry["received_at"] > self.ttl_seconds
        return False

    def __len__(self) -> int:
        return len(self._results)

    def __contains__(self, callback_id: object) -> bool:
        return callback_id in self._results


def build_stores(config: Config, clock: Optional[Callable[[], float]] = None):
    """Construct the result store and rate limiter selected by ``config``."""
    clock = clock or time.time

    if config.enable_mongodb:
        from emailspy.services.rate_limit_service import MongoSessionRateLimiter
        from emailspy.services.result_service import MongoResultStore

        result_store = MongoResultStore(
            ttl_seconds=config.result_ttl_seconds,
            grace_seconds=config.result_grace_seconds,
            clock=clock,
        )
        rate_limiter = MongoSessionRateLimiter(
            limit=config.rate_limit,
            window_seconds=config.rate_limit_window_seconds,
            clock=clock,
        )
    else:
        result_store = ResultStore(
            ttl_seconds=config.result_ttl_seconds,
            grace_seconds=config.result_grace_seconds,
            clock=clock,
        )
        rate_limiter = SessionRateLimiter(
            limit=config.rate_limit,
            window_seconds=config.rate_limit_window_seconds,
            clock=clock,
        )

    _LOGGER.debug(
        "Using %s and %s", type(result_store).__name__, type(rate_limiter).__name__
    )
    return result_store, rate_limiter


def init_stores(app: Flask, config: Config, result_store=None, rate_limiter=None) -> None:
    """Attach configuration and stores to ``app``, building any not supplied."""
    if result_store is None or rate_limiter is None:
        built_store, built_limiter = build_stores(config)
        if result_store is None:
            result_store = built_store
        if rate_limiter is None:
            rate_limiter = built_limiter

    app.extensions[CONFIG_KEY] = config
    app.extensions[RESULT_STORE_KEY] = result_store
    app.extensions[RATE_LIMITER_KEY] = rate_limiter


def get_config() -> Config:
    return current_app.extensions[CONFIG_KEY]


def get_result_store():
    return current_app.extensions[RESULT_STORE_KEY]


def get_rate_limiter() -> SessionRateLimiter:
    return current_app.extensions[RATE_LIMITER_KEY]
