"""
httpresult.tier1_runtime.hooks
───────────────────────────────
Ready-made resolver hooks that report through the structured logger.
Switched on by HTTPRESULT_LOG_OUTCOMES and HTTPRESULT_LOG_COPY_FAILURES, or
passed to ResolverConfig directly.
"""
from __future__ import annotations

from typing import Any

from httpresult.tier0_core.logging import get_logger
from httpresult.tier0_core.result import Result


def log_after_hook(writer: Any, request: Any, result: Result) -> None:
    """Log every response written through the Result path."""
    log = get_logger("httpresult.resolver")
    fields: dict[str, Any] = {
        "status": result.status,
        "headers": dict(result.headers),
        "body": type(result.body).__name__ if result.body is not None else None,
    }
    if isinstance(request, dict):
        fields["method"] = request.get("REQUEST_METHOD", "")
        fields["path"] = request.get("PATH_INFO", "")
    if result.status >= 500:
        log.error("response_written", **fields)
    elif result.status >= 400:
        log.warning("response_written", **fields)
    else:
        log.info("response_written", **fields)


def log_copy_failure(error: Exception) -> None:
    """Log a body that failed mid-copy. The status has already been sent."""
    get_logger("httpresult.resolver").warning(
        "body_copy_failed",
        error=str(error),
        error_type=type(error).__name__,
    )


__all__ = ["log_after_hook", "log_copy_failure"]
