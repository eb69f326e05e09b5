"""
standard_http.tier0_core.config
────────────────────────────────
Typed configuration with env layering. Reads from .env → environment
variables. All fields are typed via Pydantic; invalid values fail when the
settings are loaded, not mid-request.

Minimal stack: pydantic-settings + python-dotenv
All env vars are prefixed with STDHTTP_.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from standard_http.tier0_core.http import (
    StatusPredicate,
    Transformer,
    default_validate_status,
    parse_json,
)


class ClientSettings(BaseSettings):
    """Process-wide defaults for every StandardHttpClient."""

    model_config = SettingsConfigDict(
        env_prefix="STDHTTP_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ── Transport ─────────────────────────────────────────────────────────────
    base_url: str | None = None
    timeout: float | None = Field(default=None, gt=0)

    # ── JSONP ─────────────────────────────────────────────────────────────────
    jsonp_callback: str = "callback"

    # ── Logging ───────────────────────────────────────────────────────────────
    log_level: str = "INFO"
    log_format: str = "json"

    # ── Error reporting ───────────────────────────────────────────────────────
    error_backend: str = "none"

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        allowed = {"json", "console"}
        if v.lower() not in allowed:
            raise ValueError(f"log_format must be one of {allowed}, got {v!r}")
        return v.lower()

    @field_validator("error_backend")
    @classmethod
    def validate_error_backend(cls, v: str) -> str:
        allowed = {"none", "sentry"}
        if v.lower() not in allowed:
            raise ValueError(f"error_backend must be one of {allowed}, got {v!r}")
        return v.lower()


@lru_cache(maxsize=1)
def get_settings() -> ClientSettings:
    """
    Return the singleton settings. Cached after first call.
    Call _reset_settings() in tests to pick up new env vars.
    """
    return ClientSettings()


def _reset_settings() -> None:
    """For tests — clear the settings cache."""
    get_settings.cache_clear()


@dataclass
class ClientDefaults:
    """Per-client defaults, applied wherever a request leaves a field unset."""
    base_url: str | None = None
    timeout: float | None = None
    headers: dict[str, str] = field(default_factory=dict)
    transform_response: list[Transformer] = field(default_factory=lambda: [parse_json])
    validate_status: StatusPredicate = default_validate_status
    jsonp_callback: str = "callback"

    @classmethod
    def from_settings(cls, settings: ClientSettings | None = None) -> ClientDefaults:
        settings = settings or get_settings()
        return cls(
            base_url=settings.base_url,
            timeout=settings.timeout,
            jsonp_callback=settings.jsonp_callback,
        )


__all__ = ["ClientSettings", "ClientDefaults", "get_settings"]
