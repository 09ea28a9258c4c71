"""
httpresult.tier1_runtime.wsgi
──────────────────────────────
WSGI host binding. Runs Result-returning handlers as WSGI applications,
with a response writer over ``start_response``, a RequestContext per
request and a ``request_completed`` log line.

Usage (any WSGI server)::

    from wsgiref.simple_server import make_server
    from httpresult import wsgi_app

    def hello(writer, environ):
        return new_result(HTTP.OK).with_json_body({"hello": "world"})

    make_server("", 8080, wsgi_app(hello)).serve_forever()

Routed handlers receive keyword route params set by the router under
``environ["wsgiorg.routing_args"]``.
"""
from __future__ import annotations

import time
import uuid
from collections.abc import Iterator, MutableMapping
from typing import Any, Callable

from httpresult.tier0_core.http import HTTP, canonical_header_key, status_line
from httpresult.tier0_core.logging import get_logger
from httpresult.tier1_runtime.context import RequestContext, clear_context, set_context
from httpresult.tier1_runtime.outcome import capture_outcome
from httpresult.tier1_runtime.resolver import (
    Handler,
    Resolver,
    ResolverConfig,
    RoutedHandler,
)


# ── Response writer ────────────────────────────────────────────────────────

class HeaderMap(MutableMapping[str, str]):
    """Case-insensitive header mapping; setting a key replaces its value."""

    def __init__(self) -> None:
        self._items: dict[str, str] = {}

    def __getitem__(self, key: str) -> str:
        return self._items[canonical_header_key(key)]

    def __setitem__(self, key: str, value: str) -> None:
        self._items[canonical_header_key(key)] = value

    def __delitem__(self, key: str) -> None:
        del self._items[canonical_header_key(key)]

    def __iter__(self) -> Iterator[str]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __repr__(self) -> str:
        return f"HeaderMap({self._items!r})"


class WSGIResponseWriter:
    """
    Response sink over a WSGI ``start_response`` callable.

    The status is committed once: the first write_header() or write() calls
    start_response, later write_header() calls are logged and ignored, and
    header changes after that point have no effect. Bytes passed to write()
    are held until the application hands them to the server via drain().
    """

    def __init__(self, start_response: Callable[..., Any]) -> None:
        self._start_response = start_response
        self.headers = HeaderMap()
        self.status: int | None = None
        self._pending: list[bytes] = []

    @property
    def committed(self) -> bool:
        return self.status is not None

    def write_header(self, status: int) -> None:
        if self.status is not None:
            get_logger(__name__).warning("superfluous_write_header", status=status, committed_status=self.status)
            return
        self.status = status
        self._start_response(status_line(status), list(self.headers.items()))

    def write(self, data: bytes) -> int:
        if self.status is None:
            self.write_header(HTTP.OK)
        self._pending.append(bytes(data))
        return len(data)

    def drain(self) -> list[bytes]:
        """Return and forget the bytes written so far."""
        chunks, self._pending = self._pending, []
        return chunks

    def finish(self) -> list[bytes]:
        """Commit 200 if nothing was written and return what is left to send."""
        if self.status is None:
            self.write_header(HTTP.OK)
        return self.drain()


# ── Application ────────────────────────────────────────────────────────────

def route_params(environ: dict) -> dict[str, Any]:
    """Keyword route params from ``wsgiorg.routing_args``, or {}."""
    routing_args = environ.get("wsgiorg.routing_args")
    if not routing_args:
        return {}
    return dict(routing_args[1])


class ResultWSGIApp:
    """
    WSGI application around a single handler. The handler's ``request`` is
    the WSGI environ.

    The app returns a generator: the handler runs when the server starts
    iterating, and a Result's body reaches the server chunk by chunk as the
    body produces it. The after-hook fires once the last chunk is out.
    """

    def __init__(
        self,
        handler: Handler | RoutedHandler,
        resolver: Resolver | None = None,
        routed: bool = False,
    ) -> None:
        self.handler = handler
        self.resolver = resolver or Resolver(ResolverConfig.from_settings())
        self.routed = routed

    def __call__(self, environ: dict, start_response: Callable[..., Any]) -> Iterator[bytes]:
        request_id = (
            environ.get("HTTP_X_REQUEST_ID")
            or environ.get("HTTP_X_CORRELATION_ID")
            or str(uuid.uuid4())
        )
        trace_id = environ.get("HTTP_X_TRACE_ID") or request_id
        params = route_params(environ) if self.routed else {}
        set_context(RequestContext(
            request_id=request_id,
            trace_id=trace_id,
            method=environ.get("REQUEST_METHOD", ""),
            path=environ.get("PATH_INFO", ""),
            route=params,
        ))

        writer = WSGIResponseWriter(start_response)
        start = time.perf_counter()
        try:
            if self.routed:
                outcome = capture_outcome(self.handler, writer, environ, params)
            else:
                outcome = capture_outcome(self.handler, writer, environ)
            yield from writer.drain()
            yield from self.resolver.iter_resolve(outcome, writer, environ)
            yield from writer.finish()
        finally:
            duration_ms = (time.perf_counter() - start) * 1000
            get_logger(__name__).info(
                "request_completed",
                status=writer.status,
                duration_ms=round(duration_ms, 2),
                path=environ.get("PATH_INFO", ""),
                method=environ.get("REQUEST_METHOD", ""),
            )
            clear_context()


def wsgi_app(handler: Handler, resolver: Resolver | None = None) -> ResultWSGIApp:
    return ResultWSGIApp(handler, resolver)


def routed_wsgi_app(handler: RoutedHandler, resolver: Resolver | None = None) -> ResultWSGIApp:
    return ResultWSGIApp(handler, resolver, routed=True)


__all__ = [
    "HeaderMap", "WSGIResponseWriter", "ResultWSGIApp",
    "route_params", "wsgi_app", "routed_wsgi_app",
]
