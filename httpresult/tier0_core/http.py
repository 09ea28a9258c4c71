"""
httpresult.tier0_core.http
───────────────────────────
HTTP primitives: standard status codes and status-line formatting. Handlers
and error codes share these constants so statuses are spelled the same way
everywhere.
"""
from __future__ import annotations

from http import HTTPStatus


# ── Status code constants ──────────────────────────────────────────────────

class HTTP:
    """Standard HTTP status codes used by handlers and error codes."""

    # 2xx
    OK = 200
    CREATED = 201
    ACCEPTED = 202
    NO_CONTENT = 204

    # 3xx
    MOVED_PERMANENTLY = 301
    FOUND = 302
    NOT_MODIFIED = 304

    # 4xx
    BAD_REQUEST = 400
    UNAUTHORIZED = 401
    FORBIDDEN = 403
    NOT_FOUND = 404
    METHOD_NOT_ALLOWED = 405
    CONFLICT = 409
    GONE = 410
    UNPROCESSABLE_ENTITY = 422
    TOO_MANY_REQUESTS = 429

    # 5xx
    INTERNAL_SERVER_ERROR = 500
    NOT_IMPLEMENTED = 501
    BAD_GATEWAY = 502
    SERVICE_UNAVAILABLE = 503
    GATEWAY_TIMEOUT = 504


# ── Status line ────────────────────────────────────────────────────────────

def reason_phrase(code: int) -> str:
    """Return the registered reason phrase for ``code``, or ``"Unknown"``."""
    try:
        return HTTPStatus(code).phrase
    except ValueError:
        return "Unknown"


def status_line(code: int) -> str:
    """
    Format a WSGI status line.

    Usage:
        status_line(404)   # → "404 Not Found"
        status_line(299)   # → "299 Unknown"
    """
    return f"{code} {reason_phrase(code)}"


def canonical_header_key(key: str) -> str:
    """Canonicalize a header name: ``content-type`` → ``Content-Type``."""
    return "-".join(part[:1].upper() + part[1:].lower() for part in key.split("-"))


__all__ = ["HTTP", "reason_phrase", "status_line", "canonical_header_key"]
