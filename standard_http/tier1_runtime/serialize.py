"""
standard_http.tier1_runtime.serialize
──────────────────────────────────────
Request fingerprints. Two requests are the same request iff method, url, and
the JSON text of params and data match; headers and timeout are not part of
identity.

``fingerprint`` never raises: values json cannot encode (circular or very deep
structures) fall back to ``str(value)`` with a warning.
"""
from __future__ import annotations

import json
from typing import Any

from standard_http.tier0_core.http import RequestConfig
from standard_http.tier0_core.logging import get_logger

log = get_logger(__name__)


def serialize(value: Any, field: str = "value") -> str:
    """JSON text of *value*, insertion order preserved."""
    try:
        return json.dumps(value, default=str, ensure_ascii=False)
    except Exception as exc:  # includes RecursionError
        log.warning("fingerprint.serialize_failed", field=field, error=repr(exc))
        return _fallback_text(value)


def _fallback_text(value: Any) -> str:
    try:
        return str(value)
    except Exception:
        return object.__repr__(value)


def fingerprint(config: RequestConfig) -> str:
    params = serialize(config.params, "params")
    data = serialize(config.data, "data")
    return f"{config.method} {config.url} {params} {data}"


__all__ = ["serialize", "fingerprint"]
