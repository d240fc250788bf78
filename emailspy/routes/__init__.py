"""Blueprint registration helper."""

from __future__ import annotations

from flask import Flask, current_app, jsonify, request
from pymongo.errors import PyMongoError
from werkzeug.exceptions import RequestEntityTooLarge

from .callbacks import bp as callbacks_bp
from .email_checks import bp as email_checks_bp


def register_routes(app: Flask) -> None:
    """Register all application blueprints on the provided Flask app."""
    app.register_blueprint(email_checks_bp)
    app.register_blueprint(callbacks_bp)

    @app.get("/")
    def index():
        return jsonify(message="Hello from EmailSpy API"), 200

    @app.errorhandler(PyMongoError)
    def storage_unavailable(exc: PyMongoError):
        current_app.logger.error(f"Storage backend error: {exc}")
        return jsonify(error="Storage is temporarily unavailable. Please try again."), 503

    @app.errorhandler(RequestEntityTooLarge)
    def payload_too_large(exc: RequestEntityTooLarge):
        callback_id = (request.view_args or {}).get("callback_id")
        limit = current_app.config.get("MAX_CONTENT_LENGTH")
        if callback_id:
            current_app.logger.error("Dropped result for check %s: body exceeds %s bytes", callback_id, limit)
        return jsonify(error=f"Request body exceeds the {limit} byte limit."), 413
