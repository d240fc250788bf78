"""Ordering helpers for completed email results."""

from __future__ import annotations

from typing import Any, Dict, List

SORT_FIELDS = ("email", "sources")
SORT_ORDERS = ("asc", "desc")


def _email_key(entry: Dict[str, Any]) -> str:
    return str(entry.get("email") or "").lower()


def _sources_key(entry: Dict[str, Any]) -> int:
    websites = entry.get("websites") or []
    return len(websites) if isinstance(websites, list) else 0


def sort_emails(emails: List[Dict[str, Any]], by: str = "email", order: str = "asc") -> List[Dict[str, Any]]:
    """Return ``emails`` ordered by address or by number of source websites."""
    if by not in SORT_FIELDS:
        raise ValueError(f"Unsupported sort field: {by}")
    if order not in SORT_ORDERS:
        raise ValueError(f"Unsupported sort order: {order}")

    key = _email_key if by == "email" else _sources_key
    entries = [entry for entry in emails if isinstance(entry, dict)]
    return sorted(entries, key=key, reverse=order == "desc")


def sorted_result(result: Dict[str, Any], by: str, order: str = "asc") -> Dict[str, Any]:
    """Copy of a relay response with ``data.emails`` sorted, when there is one."""
    data = result.get("data")
    if not isinstance(data, dict) or not isinstance(data.get("emails"), list):
        return result

    return {
        **result,
        "data": {**data, "emails": sort_emails(data["emails"], by=by, order=order)},
    }
