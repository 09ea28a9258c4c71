"""
httpresult.tier0_core.errors
─────────────────────────────
Structured error codes and the package's own exception taxonomy.

An ErrorCode is a named, reusable (code, status) pair. Declare them once at
import time and return their Results from handlers:

    ErrNotFound = new_error_code("NOT_FOUND", HTTP.NOT_FOUND)

    def handler(writer, request):
        return ErrNotFound.to_json_result()   # 404 {"code":"NOT_FOUND"}
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from httpresult.tier0_core.result import Result, new_result


# ── Base error ────────────────────────────────────────────────────────────────

class HttpResultError(Exception):
    """Base class for errors raised by httpresult itself."""


class ConfigurationError(HttpResultError):
    """Misconfiguration detected at startup."""


class UnsupportedOutcomeError(HttpResultError, TypeError):
    """A handler returned something other than None, a Result or an Exception."""

    def __init__(self, value: Any) -> None:
        self.value = value
        super().__init__(
            f"handler returned unsupported value of type {type(value).__name__!r}; "
            "expected None, a Result or an Exception"
        )


# ── Structured error codes ────────────────────────────────────────────────────

@dataclass(frozen=True)
class ErrorCode:
    """
    Immutable factory of JSON error Results. Holds no per-request state, so
    one instance can be shared by every request.
    """
    code: str
    status: int

    def to_json_result(self, extra: Any = None) -> Result:
        """
        Build a Result with this code's status and a ``{"code": ...}`` body.
        ``extra`` is added under the "extra" key only when supplied; the key
        is omitted, not null, otherwise.
        """
        payload: dict[str, Any] = {"code": self.code}
        if extra is not None:
            payload["extra"] = extra
        return new_result(self.status).with_json_body(payload)


def new_error_code(code: str, status: int) -> ErrorCode:
    """Return a new ErrorCode producing JSON error Results."""
    return ErrorCode(code=code, status=status)


__all__ = [
    "HttpResultError", "ConfigurationError", "UnsupportedOutcomeError",
    "ErrorCode", "new_error_code",
]
