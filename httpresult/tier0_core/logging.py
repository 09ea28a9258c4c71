"""
httpresult.tier0_core.logging
──────────────────────────────
Structured logs for the resolver and its WSGI binding: request_id/trace_id
injected from context, secrets and sensitive HTTP headers masked.

Stack: structlog (stdout JSON or console)
Configure via: HTTPRESULT_LOG_LEVEL, HTTPRESULT_LOG_FORMAT=json|console

configure_logging() may be called again, e.g. after settings change; it
swaps out the handler it installed before instead of stacking another one.
Handlers installed by the host application are left alone.
"""
from __future__ import annotations

import logging
import sys
from typing import IO, Any

import structlog

from httpresult.tier0_core.config import HttpResultSettings, get_settings


# ── Redaction ─────────────────────────────────────────────────────────────────

_REDACT_KEYS = frozenset({
    "password", "secret", "token", "api_key", "apikey",
    "authorization", "credential", "access_token", "refresh_token",
    "client_secret",
})

# Header names compared lower-cased.
_REDACT_HEADERS = frozenset({
    "authorization", "proxy-authorization", "cookie", "set-cookie",
    "x-api-key", "x-auth-token",
})

REDACTED = "[REDACTED]"


def redact_headers(headers: dict[str, str]) -> dict[str, str]:
    """Return a copy of ``headers`` with sensitive values replaced."""
    return {
        key: REDACTED if key.lower() in _REDACT_HEADERS else value
        for key, value in headers.items()
    }


def _redact_processor(logger: Any, method: str, event_dict: dict) -> dict:
    """Mask secret-named fields and sensitive values in a ``headers`` field."""
    for key in list(event_dict):
        if key.lower() in _REDACT_KEYS:
            event_dict[key] = REDACTED
    headers = event_dict.get("headers")
    if isinstance(headers, dict):
        event_dict["headers"] = redact_headers(headers)
    return event_dict


# ── Configuration ─────────────────────────────────────────────────────────────

_handler: logging.Handler | None = None


def _pre_chain() -> list[Any]:
    # Shared by structlog loggers and foreign stdlib records.
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        _redact_processor,
    ]


def _renderer(log_format: str) -> Any:
    if log_format == "console":
        return structlog.dev.ConsoleRenderer(colors=False)
    return structlog.processors.JSONRenderer(sort_keys=True)


def configure_logging(
    settings: HttpResultSettings | None = None,
    *,
    stream: IO[str] | None = None,
) -> None:
    """
    Route structlog through stdlib logging with one handler on the root logger.

    ``settings`` defaults to get_settings(); ``stream`` to the current
    sys.stdout.
    """
    global _handler
    settings = settings or get_settings()
    level = logging.getLevelName(settings.log_level.upper())
    if not isinstance(level, int):
        level = logging.INFO

    structlog.configure(
        processors=_pre_chain() + [structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(stream or sys.stdout)
    handler.setFormatter(structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=_pre_chain(),
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            _renderer(settings.log_format),
        ],
    ))

    root = logging.getLogger()
    if _handler is not None:
        root.removeHandler(_handler)
    root.addHandler(handler)
    root.setLevel(level)
    _handler = handler


# ── Public API ────────────────────────────────────────────────────────────────

def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """
    Return a structured logger bound to the given name, configuring logging
    on first use.

    Usage:
        log = get_logger(__name__)
        log.info("response_written", status=404, path="/users/u_1")
    """
    if _handler is None:
        configure_logging()
    return structlog.get_logger(name or __name__)


def bind_context(**kwargs: Any) -> None:
    """Bind key-value pairs to every subsequent log call in this context."""
    structlog.contextvars.bind_contextvars(**kwargs)


__all__ = [
    "REDACTED", "redact_headers", "configure_logging", "get_logger", "bind_context",
]
