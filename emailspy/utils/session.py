"""Browser session cookie helpers.

The session id is only a rate-limit key; it carries no identity.
"""

from __future__ import annotations

import uuid

from flask import Flask, Response, g, request

from emailspy.storage import get_config

SESSION_COOKIE_NAME = "session_id"


def generate_session_id() -> str:
    """Return a fresh random session identifier."""
    return str(uuid.uuid4())


def get_or_create_session_id() -> str:
    """Return the caller's session id, minting one if the cookie is missing.

    A newly minted id is remembered on ``flask.g`` so the after-request hook
    can send it back as a cookie.
    """
    session_id = request.cookies.get(SESSION_COOKIE_NAME)
    if session_id:
        return session_id

    new_session_id = getattr(g, "new_session_id", None)
    if new_session_id is None:
        new_session_id = generate_session_id()
        g.new_session_id = new_session_id
    return new_session_id


def register_session_cookie(app: Flask) -> None:
    """Attach an after-request handler that issues newly minted session cookies."""

    @app.after_request
    def _issue_session_cookie(response: Response) -> Response:
        session_id = g.pop("new_session_id", None)
        if session_id is None:
            return response

        config = get_config()
        response.set_cookie(
            SESSION_COOKIE_NAME,
            session_id,
            max_age=config.session_max_age_seconds,
            httponly=True,
            secure=config.production,
            samesite="Strict",
        )
        return response
