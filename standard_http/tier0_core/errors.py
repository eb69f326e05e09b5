"""
standard_http.tier0_core.errors
────────────────────────────────
Error taxonomy for the request pipeline. Every failed ``send`` ends in a
``RequestError`` classified into exactly one of four categories:

    H  HTTP status rejected by the status predicate
    B  HTTP ok, but the envelope reports a failure
    A  no response received (timeout, connection refused, ...)
    C  code running locally (a transformer or a hook) raised

The error code is always ``type + number``, e.g. ``H404``, ``B2``, ``A116``.

Optional error reporting: STDHTTP_ERROR_BACKEND=sentry|none
"""
from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable


# ── Base error ────────────────────────────────────────────────────────────────

class HttpClientError(Exception):
    """
    Base class for all errors raised by this package. Every error has:
    - code: stable machine-readable string
    - user_message: safe to surface to end users
    - detail: internal context, never shown to users
    """

    code: str = "http_client_error"

    def __init__(
        self,
        user_message: str = "An unexpected error occurred.",
        code: str | None = None,
        detail: str | None = None,
    ) -> None:
        self.code = code or self.__class__.code
        self.user_message = user_message
        self.detail = detail or user_message
        super().__init__(self.detail)

    def to_dict(self) -> dict:
        return {
            "error": {
                "code": self.code,
                "message": self.user_message,
            }
        }


class ConfigurationError(HttpClientError):
    """Misconfiguration detected while building a client."""
    code = "configuration_error"


class JsonpError(HttpClientError):
    """JSONP delivery failed (bad status, missing callback wrapper)."""
    code = "jsonp_error"


class JsonpTimeoutError(JsonpError):
    """JSONP response did not arrive within the timeout."""
    code = "jsonp_timeout"


# ── Classification ────────────────────────────────────────────────────────────

class ErrorType(str, Enum):
    HTTP = "H"
    API = "B"
    NETWORK = "A"
    CLIENT = "C"

    @property
    def desc(self) -> str:
        return _DESCRIPTIONS[self]


_DESCRIPTIONS = {
    ErrorType.HTTP: "HTTP request error",
    ErrorType.API: "API call failed",
    ErrorType.NETWORK: "Network request failed",
    ErrorType.CLIENT: "Client processing failed",
}


@dataclass(frozen=True)
class Classification:
    desc: str
    error_type: ErrorType
    error_number: int | str

    @property
    def code(self) -> str:
        return f"{self.error_type.value}{self.error_number}"


class RequestError(HttpClientError):
    """
    A failed request. ``config``, ``request`` and ``response`` describe how far
    the request got; ``classification`` is attached once by ``classify``.

    ``config`` present means the transport attempted the call. ``response``
    present means the server answered.
    """

    code = "request_error"

    def __init__(
        self,
        message: str,
        *,
        config: Any = None,
        request: Any = None,
        response: Any = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.config = config
        self.request = request
        self.response = response
        self.classification: Classification | None = None

    @property
    def desc(self) -> str | None:
        return self.classification.desc if self.classification else None

    @property
    def error_type(self) -> str | None:
        return self.classification.error_type.value if self.classification else None

    @property
    def error_number(self) -> int | str | None:
        return self.classification.error_number if self.classification else None

    @property
    def error_code(self) -> str | None:
        return self.classification.code if self.classification else None

    def _classify(
        self, error_type: ErrorType, error_number: int | str | None = None
    ) -> RequestError:
        if error_number is None:
            error_number = _message_number(self.message)
        self.classification = Classification(error_type.desc, error_type, error_number)
        self.code = self.classification.code
        return self

    def to_dict(self) -> dict:
        d = super().to_dict()
        if self.classification:
            d["error"].update({
                "_desc": self.desc,
                "_errorType": self.error_type,
                "_errorNumber": self.error_number,
                "_errorCode": self.error_code,
            })
        return d

    def __repr__(self) -> str:
        return f"RequestError({self.message!r}, code={self.error_code!r})"


def _message_number(message: str | None) -> int:
    """Code point of the first character of *message*, 0 when empty."""
    return ord(message[0]) if message else 0


def _envelope_status(response: Any) -> int | str:
    body = getattr(response, "data", None)
    if isinstance(body, Mapping):
        return body.get("status") or 0
    return 0


def classify(
    error: BaseException,
    validate_status: Callable[[int], bool] | None = None,
) -> RequestError:
    """
    Attach a classification to *error* and return it.

    Non-``RequestError`` exceptions are wrapped in one (chained through
    ``__cause__``) and classified C. Already classified errors are returned
    unchanged.
    """
    if not isinstance(error, RequestError):
        return classify_client_error(error)
    if error.classification is not None:
        return error
    if error.config is None:
        return error._classify(ErrorType.CLIENT)

    response = error.response
    if response is None:
        return error._classify(ErrorType.NETWORK)

    predicate = getattr(error.config, "validate_status", None) or validate_status
    if predicate is not None and predicate(response.status):
        return error._classify(ErrorType.API, _envelope_status(response))
    return error._classify(ErrorType.HTTP, response.status)


def classify_client_error(
    exc: BaseException,
    context: RequestError | None = None,
    fallback_number: int | str | None = None,
) -> RequestError:
    """
    Classify *exc* as a client-side (C) failure.

    When *context* is given (the error that was being handled when *exc* was
    raised), its config/request/response are carried over.
    """
    message = str(exc)
    if isinstance(exc, RequestError):
        error = exc
        error.classification = None
    else:
        error = RequestError(message)
        error.__cause__ = exc
    if context is not None:
        error.config = context.config
        error.request = context.request
        error.response = context.response
    number = _message_number(message) if message else fallback_number
    return error._classify(ErrorType.CLIENT, number if number is not None else 0)


# ── Error reporting backend ───────────────────────────────────────────────────

def report(error: RequestError) -> None:
    """Send a classified error to the configured backend."""
    from standard_http.tier0_core.config import get_settings

    if get_settings().error_backend == "sentry":
        _report_sentry(error)


def _report_sentry(error: RequestError) -> None:
    try:
        import sentry_sdk
    except ImportError:
        return
    extras = {"error_code": error.error_code, "desc": error.desc}
    if error.error_type == ErrorType.API.value:
        sentry_sdk.capture_message(str(error), level="warning", extras=extras)
    else:
        sentry_sdk.capture_exception(error)


__all__ = [
    "HttpClientError",
    "ConfigurationError",
    "JsonpError",
    "JsonpTimeoutError",
    "ErrorType",
    "Classification",
    "RequestError",
    "classify",
    "classify_client_error",
    "report",
]
