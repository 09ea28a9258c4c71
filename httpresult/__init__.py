"""
httpresult
──────────
Stable top-level exports. Import from here, not from sub-modules directly.
Every name exported here is part of the public API and subject to semver.
"""
from httpresult.tier0_core.http import HTTP, status_line
from httpresult.tier0_core.logging import configure_logging, get_logger
from httpresult.tier0_core.errors import (
    HttpResultError,
    ConfigurationError,
    UnsupportedOutcomeError,
    ErrorCode,
    new_error_code,
)
from httpresult.tier0_core.config import get_settings, HttpResultSettings
from httpresult.tier0_core.result import (
    Result,
    BodyWriter,
    Body,
    new_result,
    no_content_result,
)

from httpresult.tier1_runtime.outcome import (
    NoAction,
    StructuredResult,
    OpaqueError,
    Outcome,
    to_outcome,
    capture_outcome,
)
from httpresult.tier1_runtime.resolver import (
    ResponseWriter,
    Resolver,
    ResolverConfig,
    text_classifier,
    wrap,
    wrap_routed,
)
from httpresult.tier1_runtime.hooks import log_after_hook, log_copy_failure
from httpresult.tier1_runtime.context import get_context, set_context, RequestContext
from httpresult.tier1_runtime.wsgi import (
    ResultWSGIApp,
    WSGIResponseWriter,
    wsgi_app,
    routed_wsgi_app,
)

__version__ = "0.1.0"
__all__ = [
    # http
    "HTTP", "status_line",
    # logging
    "configure_logging", "get_logger",
    # errors
    "HttpResultError", "ConfigurationError", "UnsupportedOutcomeError",
    "ErrorCode", "new_error_code",
    # config
    "get_settings", "HttpResultSettings",
    # result
    "Result", "BodyWriter", "Body", "new_result", "no_content_result",
    # outcome
    "NoAction", "StructuredResult", "OpaqueError", "Outcome", "to_outcome", "capture_outcome",
    # resolver
    "ResponseWriter", "Resolver", "ResolverConfig", "text_classifier", "wrap", "wrap_routed",
    # hooks
    "log_after_hook", "log_copy_failure",
    # context
    "get_context", "set_context", "RequestContext",
    # wsgi
    "ResultWSGIApp", "WSGIResponseWriter", "wsgi_app", "routed_wsgi_app",
]
