"""
standard_http.tier0_core.logging
─────────────────────────────────
Structured logs for the request pipeline. Configured once, on the first
``get_logger`` call. Sensitive keys (tokens, auth headers) are redacted
before output.

Minimal stack: structlog (stdout JSON or console)
Configure via: STDHTTP_LOG_LEVEL, STDHTTP_LOG_FORMAT=json|console
"""
from __future__ import annotations

import logging
import sys
from typing import Any

import structlog

from standard_http.tier0_core.config import get_settings


# ── Configuration ─────────────────────────────────────────────────────────────

def _configure_structlog() -> None:
    settings = get_settings()
    log_level = getattr(logging, settings.log_level.upper(), logging.INFO)

    shared_processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        _redact_processor,
    ]

    if settings.log_format == "console":
        renderer = structlog.dev.ConsoleRenderer()
    else:
        renderer = structlog.processors.JSONRenderer(default=str)

    structlog.configure(
        processors=shared_processors + [
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared_processors,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)

    package_logger = logging.getLogger("standard_http")
    package_logger.addHandler(handler)
    package_logger.setLevel(log_level)


# ── Redaction processor ───────────────────────────────────────────────────────

_REDACT_KEYS = frozenset({
    "password", "passwd", "secret", "token", "api_key", "apikey",
    "authorization", "cookie", "access_token", "refresh_token",
    "client_secret", "x-api-key",
})

_REDACTED = "[REDACTED]"


def _redact(value: Any) -> Any:
    if isinstance(value, dict):
        return {
            k: _REDACTED if str(k).lower() in _REDACT_KEYS else _redact(v)
            for k, v in value.items()
        }
    return value


def _redact_processor(
    logger: Any, method: str, event_dict: dict
) -> dict:
    """Strip sensitive fields, including inside dict values, before output."""
    for key in list(event_dict.keys()):
        if key.lower() in _REDACT_KEYS:
            event_dict[key] = _REDACTED
        else:
            event_dict[key] = _redact(event_dict[key])
    return event_dict


# ── Public API ────────────────────────────────────────────────────────────────

_configured = False


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """
    Return a structured logger bound to the given name.

    Usage:
        log = get_logger(__name__)
        log.warning("request.failed", error_code="H404", url="/api")
    """
    global _configured
    if not _configured:
        _configure_structlog()
        _configured = True
    return structlog.get_logger(name or __name__)


__all__ = ["get_logger"]
