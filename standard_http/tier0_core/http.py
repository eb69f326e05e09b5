"""
standard_http.tier0_core.http
──────────────────────────────
HTTP primitives shared by both transports: the request config, the normalized
response, the success envelope check, and the default response transformer.

Success envelope::

    {"status": 0, "data": ..., "statusInfo": {"message": "..."}}

``status`` absent or 0 means success; anything else is an API-level failure.
"""
from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass, field, fields
from typing import Any, Callable

Transformer = Callable[[Any], Any]
StatusPredicate = Callable[[int], bool]

BODY_METHODS = frozenset({"post", "put", "patch"})

NO_MESSAGE = "API call failed without an error message"


class HTTP:
    """Status codes referenced by the pipeline."""

    OK = 200
    MULTIPLE_CHOICES = 300


# ── Request config ────────────────────────────────────────────────────────

@dataclass
class RequestConfig:
    """
    Everything needed to dispatch one request. Mutable until dispatch: the
    data-option adapter and ``before_send`` may change it.

    Extension fields:
    - payload: shorthand that becomes ``data`` (body methods) or ``params``
    - intercept_duplicate: suppress this call if an identical one is in flight
    - jsonp / jsonp_callback: deliver through the JSONP transport
    """

    url: str = ""
    method: str = "get"
    base_url: str | None = None
    params: Any = None
    data: Any = None
    headers: dict[str, str] = field(default_factory=dict)
    timeout: float | None = None
    transform_response: list[Transformer] | None = None
    validate_status: StatusPredicate | None = None

    payload: Any = None
    intercept_duplicate: bool = False
    jsonp: bool = False
    jsonp_callback: str | None = None

    def __post_init__(self) -> None:
        self.method = (self.method or "get").lower()

    @classmethod
    def build(
        cls, config: RequestConfig | Mapping[str, Any] | None = None, **overrides: Any
    ) -> RequestConfig:
        """Coerce a config, a mapping, or keyword arguments into a RequestConfig."""
        if isinstance(config, RequestConfig):
            values = {f.name: getattr(config, f.name) for f in fields(cls)}
        else:
            values = dict(config or {})
        values.update(overrides)
        values["headers"] = dict(values.get("headers") or {})
        known = {f.name for f in fields(cls)}
        unknown = set(values) - known
        if unknown:
            raise TypeError(f"Unknown request config option(s): {sorted(unknown)}")
        return cls(**values)


# ── Response ──────────────────────────────────────────────────────────────

@dataclass
class Response:
    """Transport-neutral response. ``request`` is ``"script"`` for JSONP."""
    data: Any
    status: int
    status_text: str
    headers: Mapping[str, str]
    config: RequestConfig
    request: Any = None


# ── Envelope ──────────────────────────────────────────────────────────────

def is_api_success(body: Any) -> bool:
    """True iff *body* is a JSON object or array whose ``status`` is absent or 0."""
    if isinstance(body, list):
        return True
    if not isinstance(body, Mapping):
        return False
    if "status" not in body:
        return True
    status = body["status"]
    return not isinstance(status, bool) and status == 0


def api_message(body: Any) -> str:
    """Failure description: statusInfo.message, then message, then a fallback."""
    if isinstance(body, Mapping):
        status_info = body.get("statusInfo")
        if isinstance(status_info, Mapping) and status_info.get("message"):
            return str(status_info["message"])
        if body.get("message"):
            return str(body["message"])
    return NO_MESSAGE


# ── Defaults ──────────────────────────────────────────────────────────────

def default_validate_status(status: int) -> bool:
    return HTTP.OK <= status < HTTP.MULTIPLE_CHOICES


def parse_json(data: Any) -> Any:
    """Decode JSON text; anything that is not JSON text passes through."""
    if isinstance(data, bytes):
        data = data.decode("utf-8", errors="replace")
    if isinstance(data, str) and data.strip():
        try:
            return json.loads(data)
        except ValueError:
            return data
    return data


def apply_transformers(data: Any, transformers: list[Transformer] | None) -> Any:
    for transform in transformers or ():
        data = transform(data)
    return data


__all__ = [
    "HTTP",
    "BODY_METHODS",
    "NO_MESSAGE",
    "RequestConfig",
    "Response",
    "Transformer",
    "StatusPredicate",
    "is_api_success",
    "api_message",
    "default_validate_status",
    "parse_json",
    "apply_transformers",
]
