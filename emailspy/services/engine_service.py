"""Outbound calls to the n8n workflow that performs the email discovery."""

from __future__ import annotations

import logging

import requests

from emailspy.config import Config

logger = logging.getLogger(__name__)


class EngineError(RuntimeError):
    """The workflow engine could not be reached or refused the job."""


def build_callback_url(public_base_url: str, callback_id: str) -> str:
    """Return the URL the engine must POST its result to."""
    return f"{public_base_url.rstrip('/')}/callback/{callback_id}"


def trigger_email_check(config: Config, domain: str, callback_id: str, callback_url: str) -> None:
    """Ask the engine to start an email search for ``domain``.

    Makes exactly one request. Raises :class:`EngineError` on a network
    failure, a timeout or a non-2xx response.
    """
    url = config.engine_webhook_url
    if not url:
        raise EngineError("N8N_INSTANCE_URL is not configured")

    body = {
        "domain": domain,
        "callbackId": callback_id,
        "callbackUrl": callback_url,
    }

    try:
        resp = requests.post(url, json=body, timeout=config.engine_timeout)
    except requests.RequestException as exc:
        raise EngineError(f"Engine request failed: {exc}") from exc

    if not resp.ok:
        raise EngineError(f"Engine returned {resp.status_code}: {resp.text[:200]}")

    logger.debug("Engine accepted check %s for %s", callback_id, domain)
