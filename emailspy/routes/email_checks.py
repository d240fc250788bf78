"""/api/email-checks routes used by the browser to start and poll checks."""

from __future__ import annotations

from typing import Any, Dict

from flask import Blueprint, current_app, jsonify, request

from emailspy.services.email_check_service import (
    ERROR_RATE_LIMITED,
    ERROR_UPSTREAM,
    start_email_check,
)
from emailspy.storage import STATUS_COMPLETED, get_config, get_rate_limiter, get_result_store
from emailspy.utils.results import SORT_FIELDS, SORT_ORDERS, sorted_result
from emailspy.utils.session import get_or_create_session_id

bp = Blueprint("email_checks", __name__, url_prefix="/api/email-checks")

_STATUS_BY_ERROR = {
    ERROR_RATE_LIMITED: 429,
    ERROR_UPSTREAM: 502,
}


@bp.post("")
def create_email_check():
    """Start an email search for the submitted domain and return its callback id."""
    session_id = get_or_create_session_id()

    payload: Dict[str, Any] = request.get_json(silent=True) or {}
    domain = payload.get("domain")
    if domain is not None and not isinstance(domain, str):
        domain = None

    result = start_email_check(
        domain,
        session_id,
        config=get_config(),
        rate_limiter=get_rate_limiter(),
    )

    if result.ok:
        return jsonify(result.to_dict()), 200

    status = _STATUS_BY_ERROR.get(result.error_kind, 400)
    response = jsonify(result.to_dict())
    if result.retry_after_minutes is not None:
        response.headers["Retry-After"] = str(result.retry_after_minutes * 60)
    return response, status


@bp.get("/<callback_id>")
def get_email_check_status(callback_id: str):
    """Poll for a check's result, optionally sorting the returned emails."""
    sort_by = request.args.get("sort")
    order = request.args.get("order", "asc")

    if sort_by is not None and sort_by not in SORT_FIELDS:
        return jsonify(error=f"sort must be one of: {', '.join(SORT_FIELDS)}"), 400
    if order not in SORT_ORDERS:
        return jsonify(error=f"order must be one of: {', '.join(SORT_ORDERS)}"), 400

    result = get_result_store().fetch(callback_id)
    if result["status"] == STATUS_COMPLETED:
        current_app.logger.info("Delivered result for check %s", callback_id)
        if sort_by:
            result = sorted_result(result, by=sort_by, order=order)

    return jsonify(result), 200
