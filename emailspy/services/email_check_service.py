"""Starting email checks on the workflow engine."""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

from emailspy.config import Config
from emailspy.services import engine_service
from emailspy.utils.domains import is_valid_domain, normalize_domain
from emailspy.utils.rate_limit import SessionRateLimiter

logger = logging.getLogger(__name__)

INVALID_DOMAIN_ERROR = "Please enter a valid domain (e.g., example.com or subdomain.example.com)"
UPSTREAM_ERROR = "An error occurred while initiating the email check. Please try again."

ERROR_VALIDATION = "validation"
ERROR_RATE_LIMITED = "rate_limited"
ERROR_UPSTREAM = "upstream"


def rate_limit_message(minutes: int) -> str:
    unit = "minute" if minutes == 1 else "minutes"
    return f"Rate limit exceeded. Please try again in {minutes} {unit}."


@dataclass(frozen=True)
class SubmissionResult:
    callback_id: Optional[str] = None
    error: Optional[str] = None
    error_kind: Optional[str] = None
    retry_after_minutes: Optional[int] = None

    @property
    def ok(self) -> bool:
        return self.callback_id is not None

    def to_dict(self) -> Dict[str, Any]:
        if self.ok:
            return {"callbackId": self.callback_id}
        body: Dict[str, Any] = {"error": self.error}
        if self.retry_after_minutes is not None:
            body["retryAfterMinutes"] = self.retry_after_minutes
        return body


def start_email_check(
    domain: Optional[str],
    session_id: str,
    *,
    config: Config,
    rate_limiter: SessionRateLimiter,
    trigger: Optional[Callable[..., None]] = None,
) -> SubmissionResult:
    """Validate ``domain``, apply the session quota and hand the job to the engine.

    Never raises for expected failures; the outcome is described by the
    returned :class:`SubmissionResult`.
    """
    trigger = trigger or engine_service.trigger_email_check

    rate_limiter.sweep()

    normalized = normalize_domain(domain)
    if not is_valid_domain(normalized):
        return SubmissionResult(error=INVALID_DOMAIN_ERROR, error_kind=ERROR_VALIDATION)

    if config.rate_limit_enabled:
        decision = rate_limiter.check(session_id)
        if not decision.allowed:
            logger.info("Rate limit exceeded for session ID: %s", session_id)
            return SubmissionResult(
                error=rate_limit_message(decision.remaining_minutes),
                error_kind=ERROR_RATE_LIMITED,
                retry_after_minutes=decision.remaining_minutes,
            )

    callback_id = str(uuid.uuid4())
    callback_url = engine_service.build_callback_url(config.public_base_url, callback_id)

    try:
        trigger(config, normalized, callback_id, callback_url)
    except engine_service.EngineError as exc:
        logger.warning("Could not start email check for %s: %s", normalized, exc)
        return SubmissionResult(error=UPSTREAM_ERROR, error_kind=ERROR_UPSTREAM)

    logger.info("Started email check %s for %s", callback_id, normalized)
    return SubmissionResult(callback_id=callback_id)
