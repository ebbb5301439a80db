# api/security/cors_policy.py

import re
import logging
from typing import Dict, Iterable, List, Optional

logger = logging.getLogger(__name__)

_SCHEME_RE = re.compile(r"^https?://", re.IGNORECASE)

DEFAULT_METHODS = ("POST", "OPTIONS")
PIXEL_METHODS = ("GET", "POST", "OPTIONS")


def parse_allow_list(raw: Optional[str]) -> List[str]:
    """Split a comma-separated CORS_ORIGIN value into trimmed, non-empty patterns"""
    if not raw:
        return []
    return [part.strip() for part in raw.split(",") if part.strip()]


def _host_of(value: str) -> str:
    return _SCHEME_RE.sub("", value).lower()


def origin_matches(origin: str, pattern: str) -> bool:
    """
    Compare one origin against one allow-list pattern.

    Both sides are compared without their http(s):// scheme and case-insensitively.
    A pattern of the form "*.example.com" matches "example.com" itself and any
    subdomain of it, but not "badexample.com".
    """
    host = _host_of(origin)
    wanted = _host_of(pattern)

    if wanted.startswith("*."):
        suffix = wanted[2:]
        return host == suffix or host.endswith("." + suffix)

    return host == wanted


def is_origin_allowed(origin: Optional[str], allow_list: Iterable[str]) -> bool:
    """
    Allow-decision for a request Origin.

    An empty allow list allows everything (including requests without an Origin).
    Otherwise the origin must be present and match at least one pattern.
    """
    patterns = list(allow_list)
    if not patterns:
        return True
    if not origin:
        return False
    return any(origin_matches(origin, pattern) for pattern in patterns)


def build_cors_headers(origin: Optional[str], allow_list: Iterable[str],
                       methods: Iterable[str] = DEFAULT_METHODS) -> Dict[str, str]:
    """Response headers advertising the CORS decision for this request"""
    allowed = is_origin_allowed(origin, allow_list)
    if not allowed:
        logger.debug(f"🚫 Origin not in allow list: {origin!r}")

    return {
        "Vary": "Origin",
        "Access-Control-Allow-Origin": (origin or "*") if allowed else "null",
        "Access-Control-Allow-Methods": ",".join(methods),
        "Access-Control-Allow-Headers": "Content-Type",
    }
