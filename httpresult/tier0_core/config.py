"""
httpresult.tier0_core.config
─────────────────────────────
Typed settings with env layering. Reads from .env → environment variables.
All fields are typed via Pydantic; invalid values fail at startup, not
mid-request.

Stack: pydantic-settings + python-dotenv
"""
from __future__ import annotations

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class HttpResultSettings(BaseSettings):
    """
    Process settings for the resolver and its logging hooks.
    All env vars are prefixed with HTTPRESULT_.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    # ── Logging ───────────────────────────────────────────────────────────────
    log_level: str = Field(default="INFO", alias="HTTPRESULT_LOG_LEVEL")
    log_format: str = Field(default="json", alias="HTTPRESULT_LOG_FORMAT")

    # ── Resolver defaults ─────────────────────────────────────────────────────
    default_error_status: int = Field(default=400, alias="HTTPRESULT_DEFAULT_ERROR_STATUS")
    log_outcomes: bool = Field(default=False, alias="HTTPRESULT_LOG_OUTCOMES")
    log_copy_failures: bool = Field(default=False, alias="HTTPRESULT_LOG_COPY_FAILURES")

    # ── Body streaming ────────────────────────────────────────────────────────
    read_chunk_size: int = Field(default=32 * 1024, alias="HTTPRESULT_READ_CHUNK_SIZE")

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        allowed = {"json", "console"}
        if v.lower() not in allowed:
            raise ValueError(f"log_format must be one of {allowed}, got {v!r}")
        return v.lower()

    @field_validator("default_error_status")
    @classmethod
    def validate_status(cls, v: int) -> int:
        if not 100 <= v <= 599:
            raise ValueError(f"default_error_status must be in 100..599, got {v}")
        return v

    @field_validator("read_chunk_size")
    @classmethod
    def validate_chunk_size(cls, v: int) -> int:
        if v <= 0:
            raise ValueError(f"read_chunk_size must be positive, got {v}")
        return v


@lru_cache(maxsize=1)
def get_settings() -> HttpResultSettings:
    """
    Return the singleton settings. Cached after first call.
    Call _reset_settings() in tests to pick up new env vars.
    """
    return HttpResultSettings()


def _reset_settings() -> None:
    """For tests — clear the settings cache."""
    get_settings.cache_clear()
