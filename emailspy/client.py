"""HTTP client that starts an email check and polls until the result arrives."""

from __future__ import annotations

import logging
import time
from typing import Any, Callable, Dict, Optional

import requests

logger = logging.getLogger(__name__)

POLL_INTERVAL_SECONDS = 2
POLL_TIMEOUT_SECONDS = 120

TIMEOUT_MESSAGE = "No results found within the time limit. Please try again."
STATUS_ERROR_MESSAGE = "An error occurred while fetching email check status. Please try again."


class EmailCheckError(RuntimeError):
    """The server rejected or failed an email check."""


class PollTimeout(EmailCheckError):
    """No result arrived before the polling deadline."""


class EmailSpyClient:
    """Talks to the EmailSpy API the way the browser front-end does.

    The underlying ``requests.Session`` keeps the ``session_id`` cookie so
    repeated checks count against the same rate-limit bucket.
    """

    def __init__(
        self,
        base_url: str,
        session: Optional[requests.Session] = None,
        timeout: float = 10,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()
        self.timeout = timeout
        self._sleep = sleep
        self._clock = clock

    def start_check(self, domain: str) -> str:
        """Submit ``domain`` and return the callback id to poll."""
        try:
            resp = self.session.post(
                f"{self.base_url}/api/email-checks",
                json={"domain": domain},
                timeout=self.timeout,
            )
            body = resp.json()
        except (requests.RequestException, ValueError) as exc:
            raise EmailCheckError(
                "An error occurred while initiating the email check. Please try again."
            ) from exc

        if body.get("error"):
            raise EmailCheckError(body["error"])
        callback_id = body.get("callbackId")
        if not callback_id:
            raise EmailCheckError("No callback ID received")
        return callback_id

    def get_status(self, callback_id: str, sort: Optional[str] = None, order: str = "asc") -> Dict[str, Any]:
        params = {"sort": sort, "order": order} if sort else None
        try:
            resp = self.session.get(
                f"{self.base_url}/api/email-checks/{callback_id}",
                params=params,
                timeout=self.timeout,
            )
            resp.raise_for_status()
            return resp.json()
        except (requests.RequestException, ValueError) as exc:
            raise EmailCheckError(STATUS_ERROR_MESSAGE) from exc

    def wait_for_results(
        self,
        callback_id: str,
        interval: float = POLL_INTERVAL_SECONDS,
        timeout: float = POLL_TIMEOUT_SECONDS,
        sort: Optional[str] = None,
        order: str = "asc",
    ) -> Any:
        """Poll every ``interval`` seconds until completed or ``timeout`` elapses."""
        deadline = self._clock() + timeout
        while True:
            self._sleep(interval)
            if self._clock() > deadline:
                raise PollTimeout(TIMEOUT_MESSAGE)

            status = self.get_status(callback_id, sort=sort, order=order)
            if status.get("status") == "completed":
                return status.get("data")
            logger.debug("Check %s still pending", callback_id)

    def check_domain(self, domain: str, **kwargs: Any) -> Any:
        """Start a check for ``domain`` and block until its result arrives."""
        callback_id = self.start_check(domain)
        logger.info("Waiting for check %s (%s)", callback_id, domain)
        return self.wait_for_results(callback_id, **kwargs)
