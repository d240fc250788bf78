"""Domain name normalisation and validation."""

from __future__ import annotations

import re
from typing import Optional

# Dot-separated labels of letters, digits and inner hyphens, ending in an
# alphabetic TLD of at least two characters.
DOMAIN_PATTERN = re.compile(
    r"^(?:[a-zA-Z0-9](?:[a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?\.)+[a-zA-Z]{2,}$"
)

MAX_DOMAIN_LENGTH = 253


def normalize_domain(raw: Optional[str]) -> str:
    """Trim, lower-case and drop a single trailing root dot."""
    if not raw:
        return ""
    value = raw.strip().lower()
    if value.endswith("."):
        value = value[:-1]
    return value


def is_valid_domain(domain: Optional[str]) -> bool:
    if not domain or len(domain) > MAX_DOMAIN_LENGTH:
        return False
    return DOMAIN_PATTERN.match(domain) is not None
