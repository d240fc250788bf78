"""Callback endpoints the workflow engine posts finished results to."""

from __future__ import annotations

from flask import Blueprint, current_app, jsonify, request
from werkzeug.exceptions import BadRequest

from emailspy.storage import get_result_store

bp = Blueprint("callbacks", __name__)

# ``/api/email-results`` is the path older engine workflows were configured with.
CALLBACK_RULES = ("/callback/<callback_id>", "/api/email-results/<callback_id>")


def receive_result(callback_id: str):
    """Store the engine's result so the next poll can pick it up."""
    try:
        # ``null`` is a valid result; only unparseable bodies are rejected.
        payload = request.get_json(force=True)
    except BadRequest:
        return jsonify(error="Request body must be valid JSON."), 400

    get_result_store().deposit(callback_id, payload)
    current_app.logger.debug("Received result for check %s", callback_id)
    return jsonify(status="received"), 200


def get_result(callback_id: str):
    """Return the stored result once, or a pending status."""
    return jsonify(get_result_store().fetch(callback_id)), 200


for _rule in CALLBACK_RULES:
    bp.add_url_rule(_rule, view_func=receive_result, methods=["POST"])
    bp.add_url_rule(_rule, view_func=get_result, methods=["GET"])
