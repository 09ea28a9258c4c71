"""
httpresult test configuration.

Tests run with logging hooks off and the default 400 error status. Override
by setting environment variables before running pytest.
"""
from __future__ import annotations

import os

import pytest

# ── Pin settings for all tests ─────────────────────────────────────────────
# These must be set before any httpresult modules read settings.

os.environ.setdefault("HTTPRESULT_LOG_LEVEL", "INFO")
os.environ.setdefault("HTTPRESULT_LOG_FORMAT", "json")
os.environ.setdefault("HTTPRESULT_DEFAULT_ERROR_STATUS", "400")
os.environ.setdefault("HTTPRESULT_LOG_OUTCOMES", "false")
os.environ.setdefault("HTTPRESULT_LOG_COPY_FAILURES", "false")


class RecordingWriter:
    """In-memory ResponseWriter that records every call made on it."""

    def __init__(self) -> None:
        self.headers: dict[str, str] = {}
        self.status: int | None = None
        self.status_writes = 0
        self.body = b""
        self.calls: list[str] = []

    @property
    def committed(self) -> bool:
        return self.status is not None

    def write_header(self, status: int) -> None:
        self.calls.append("write_header")
        self.status_writes += 1
        if self.status is None:
            self.status = status

    def write(self, data: bytes) -> int:
        self.calls.append("write")
        if self.status is None:
            self.status = 200
        self.body += data
        return len(data)


class StartResponse:
    """Records what a WSGI app passes to start_response."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, list[tuple[str, str]]]] = []

    def __call__(self, status: str, headers: list[tuple[str, str]], exc_info=None):
        self.calls.append((status, headers))
        return lambda data: None

    @property
    def status(self) -> str:
        return self.calls[-1][0]

    @property
    def headers(self) -> dict[str, str]:
        return dict(self.calls[-1][1])


# ── Fixtures ───────────────────────────────────────────────────────────────

@pytest.fixture(scope="session", autouse=True)
def logging_configured():
    """Configure structlog up front so capture_logs() is not overwritten mid-test."""
    from httpresult.tier0_core.logging import configure_logging

    configure_logging()


@pytest.fixture(autouse=True)
def reset_settings():
    """Clear cached settings so each test sees the current environment."""
    from httpresult.tier0_core.config import _reset_settings

    _reset_settings()
    yield
    _reset_settings()


@pytest.fixture
def writer() -> RecordingWriter:
    return RecordingWriter()


@pytest.fixture
def start_response() -> StartResponse:
    return StartResponse()


@pytest.fixture
def environ() -> dict:
    """A minimal WSGI environ for a GET request."""
    return {
        "REQUEST_METHOD": "GET",
        "PATH_INFO": "/hello",
        "QUERY_STRING": "",
        "SERVER_NAME": "localhost",
        "SERVER_PORT": "8080",
        "wsgi.url_scheme": "http",
    }
