"""
httpresult.tier1_runtime.resolver
──────────────────────────────────
Adapts handlers that return (or raise) a Result or an error into native
handlers that always write a response, exactly once.

Per request:
  handler runs → outcome normalized → Result chosen → headers set →
  status written → body copied → after-hook fired

A handler returning None is trusted to have written its own response; the
resolver then writes nothing at all.

Usage::

    resolver = Resolver(ResolverConfig.from_settings())

    @resolver.wrap
    def hello(writer, request):
        if request.get("QUERY_STRING"):
            return ErrNotFound.to_json_result()
        return new_result(HTTP.OK).with_json_body({"hello": "world"})
"""
from __future__ import annotations

import functools
from dataclasses import dataclass, field
from collections.abc import Iterator
from typing import Any, Callable, MutableMapping, Optional, Protocol, runtime_checkable

from httpresult.tier0_core.config import HttpResultSettings, get_settings
from httpresult.tier0_core.errors import ConfigurationError
from httpresult.tier0_core.result import Result, new_result
from httpresult.tier1_runtime.outcome import (
    NoAction,
    OpaqueError,
    Outcome,
    StructuredResult,
    capture_outcome,
)


# ── Writer protocol ───────────────────────────────────────────────────────────

@runtime_checkable
class ResponseWriter(Protocol):
    """The host's response sink. ``committed`` is True once a status is written."""

    headers: MutableMapping[str, str]

    @property
    def committed(self) -> bool: ...

    def write_header(self, status: int) -> None: ...

    def write(self, data: bytes) -> Any: ...


Handler = Callable[[ResponseWriter, Any], Optional[Exception]]
RoutedHandler = Callable[[ResponseWriter, Any, Any], Optional[Exception]]
NativeHandler = Callable[[ResponseWriter, Any], None]
RoutedNativeHandler = Callable[[ResponseWriter, Any, Any], None]

Classifier = Callable[[Exception], Result]
AfterHook = Callable[[ResponseWriter, Any, Result], None]
CopyFailureObserver = Callable[[Exception], None]


# ── Defaults ──────────────────────────────────────────────────────────────────

def text_classifier(status: int) -> Classifier:
    """Classifier answering every error with ``status`` and its message as text."""

    def classify(error: Exception) -> Result:
        return new_result(status).with_text_body(str(error))

    return classify


def default_classifier(error: Exception) -> Result:
    """text_classifier with HTTPRESULT_DEFAULT_ERROR_STATUS, read on every call."""
    return text_classifier(get_settings().default_error_status)(error)


def noop_after_hook(writer: ResponseWriter, request: Any, result: Result) -> None:
    pass


def noop_copy_failure_observer(error: Exception) -> None:
    pass


# ── Configuration ─────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class ResolverConfig:
    """
    Hooks used by a Resolver. Build once at startup; never mutated while
    serving, so it needs no locking.
    """
    classifier: Classifier = field(default=default_classifier)
    after_hook: AfterHook = field(default=noop_after_hook)
    copy_failure_observer: CopyFailureObserver = field(default=noop_copy_failure_observer)

    def __post_init__(self) -> None:
        for name in ("classifier", "after_hook", "copy_failure_observer"):
            if not callable(getattr(self, name)):
                raise ConfigurationError(f"ResolverConfig.{name} must be callable")

    @classmethod
    def from_settings(cls, settings: HttpResultSettings | None = None, **overrides: Any) -> ResolverConfig:
        """
        Hooks for ``settings`` (the process settings by default): the error
        status is fixed from ``settings`` rather than re-read per request, and
        the logging hooks are switched on by HTTPRESULT_LOG_OUTCOMES /
        HTTPRESULT_LOG_COPY_FAILURES. Keyword overrides replace individual hooks.
        """
        from httpresult.tier1_runtime.hooks import log_after_hook, log_copy_failure

        settings = settings or get_settings()
        hooks: dict[str, Any] = {"classifier": text_classifier(settings.default_error_status)}
        if settings.log_outcomes:
            hooks["after_hook"] = log_after_hook
        if settings.log_copy_failures:
            hooks["copy_failure_observer"] = log_copy_failure
        hooks.update(overrides)
        return cls(**hooks)


# ── Resolver ──────────────────────────────────────────────────────────────────

class Resolver:
    """Turns handler outcomes into exactly one written response."""

    def __init__(self, config: ResolverConfig | None = None) -> None:
        self.config = config or ResolverConfig()

    def _select(self, outcome: Outcome, writer: ResponseWriter) -> Result | None:
        if isinstance(outcome, NoAction):
            return None
        if isinstance(outcome, StructuredResult):
            return outcome.result
        if isinstance(outcome, OpaqueError):
            if writer.committed:
                # The handler already sent a status; a classified body would be
                # appended to its partial response.
                self.config.copy_failure_observer(outcome.error)
                return None
            return self.config.classifier(outcome.error)
        raise TypeError(f"unknown outcome variant: {outcome!r}")

    def _commit(self, result: Result, writer: ResponseWriter) -> None:
        for key, value in result.headers.items():
            writer.headers[key] = value
        writer.write_header(result.status)

    def resolve(self, outcome: Outcome, writer: ResponseWriter, request: Any) -> Result | None:
        """
        Write ``outcome`` to ``writer``. Returns the Result that was written,
        or None when the handler took care of the response itself.
        """
        result = self._select(outcome, writer)
        if result is None:
            return None
        self._commit(result, writer)

        if result.body is not None:
            try:
                result.body.write_to(writer)
            except Exception as exc:
                # Status is already on the wire; report and move on.
                self.config.copy_failure_observer(exc)

        self.config.after_hook(writer, request, result)
        return result

    def iter_resolve(self, outcome: Outcome, writer: ResponseWriter, request: Any) -> Iterator[bytes]:
        """
        resolve() for hosts that pull the body. Headers and status are written
        on the first step, body chunks are yielded as the body produces them,
        and the after-hook fires after the last chunk, or when the host
        closes the iterator early.
        """
        result = self._select(outcome, writer)
        if result is None:
            return
        self._commit(result, writer)
        try:
            if result.body is not None:
                try:
                    yield from result.body.chunks()
                except Exception as exc:
                    self.config.copy_failure_observer(exc)
        finally:
            self.config.after_hook(writer, request, result)

    def wrap(self, handler: Handler) -> NativeHandler:
        """Adapt ``handler(writer, request)`` into a native handler."""

        @functools.wraps(handler)
        def native(writer: ResponseWriter, request: Any) -> None:
            self.resolve(capture_outcome(handler, writer, request), writer, request)

        return native

    def wrap_routed(self, handler: RoutedHandler) -> RoutedNativeHandler:
        """Adapt ``handler(writer, request, params)``; params come from the router."""

        @functools.wraps(handler)
        def native(writer: ResponseWriter, request: Any, params: Any) -> None:
            self.resolve(capture_outcome(handler, writer, request, params), writer, request)

        return native


# ── Convenience ───────────────────────────────────────────────────────────────

def wrap(handler: Handler, config: ResolverConfig | None = None) -> NativeHandler:
    """Wrap a single handler with a Resolver built from ``config``."""
    return Resolver(config).wrap(handler)


def wrap_routed(handler: RoutedHandler, config: ResolverConfig | None = None) -> RoutedNativeHandler:
    return Resolver(config).wrap_routed(handler)


__all__ = [
    "ResponseWriter", "Resolver", "ResolverConfig",
    "text_classifier", "default_classifier", "noop_after_hook", "noop_copy_failure_observer",
    "wrap", "wrap_routed",
]
