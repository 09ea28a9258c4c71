"""
httpresult.tier1_runtime.context
─────────────────────────────────
Request context: correlation ids for the request being resolved, propagated
into log records.

Uses Python contextvars so each thread or task sees its own request.
Synced into structlog contextvars so every log call carries the ids.
"""
from __future__ import annotations

import uuid
from contextvars import ContextVar
from dataclasses import dataclass, field
from typing import Any

import structlog

from httpresult.tier0_core.logging import bind_context


# ── Domain model ─────────────────────────────────────────────────────────────

@dataclass
class RequestContext:
    """
    Per-request metadata available for the lifetime of a request. ``route``
    holds the router-supplied path parameters; empty for unrouted handlers.
    """
    request_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    trace_id: str | None = None
    method: str | None = None
    path: str | None = None
    route: dict[str, Any] = field(default_factory=dict)


# ── ContextVar storage ────────────────────────────────────────────────────────

_ctx: ContextVar[RequestContext | None] = ContextVar(
    "httpresult_request_context",
    default=None,
)


# ── Public API ────────────────────────────────────────────────────────────────

def get_context() -> RequestContext | None:
    """Return the current request context, or None outside a request."""
    return _ctx.get()


def set_context(ctx: RequestContext) -> None:
    """Set the request context for the current scope and bind it for logging."""
    _ctx.set(ctx)
    bind_context(request_id=ctx.request_id, trace_id=ctx.trace_id)


def clear_context() -> None:
    _ctx.set(None)
    structlog.contextvars.unbind_contextvars("request_id", "trace_id")


def get_request_id() -> str | None:
    ctx = get_context()
    return ctx.request_id if ctx is not None else None
