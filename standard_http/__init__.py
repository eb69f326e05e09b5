"""
standard_http
─────────────
Stable top-level exports. Import from here, not from sub-modules directly.
Every name exported here is part of the public API and subject to semver.
"""
from standard_http.tier0_core.errors import (
    HttpClientError,
    ConfigurationError,
    JsonpError,
    JsonpTimeoutError,
    RequestError,
    ErrorType,
    Classification,
    classify,
)
from standard_http.tier0_core.http import (
    RequestConfig,
    Response,
    is_api_success,
    parse_json,
)
from standard_http.tier0_core.config import ClientSettings, ClientDefaults, get_settings
from standard_http.tier0_core.logging import get_logger

from standard_http.tier1_runtime.serialize import fingerprint
from standard_http.tier1_runtime.interceptors import InterceptorManager, run_pipeline

from standard_http.tier2_reliability.dedupe import InFlightRegistry

from standard_http.tier3_platform.api_client import StandardHttpClient, LifecycleHooks
from standard_http.tier3_platform.jsonp import JsonpAdapter, JsonpTransport
from standard_http.tier3_platform.transport import HttpxTransport

__version__ = "0.1.0"
__all__ = [
    # errors
    "HttpClientError", "ConfigurationError", "JsonpError", "JsonpTimeoutError",
    "RequestError", "ErrorType", "Classification", "classify",
    # http
    "RequestConfig", "Response", "is_api_success", "parse_json",
    # config
    "ClientSettings", "ClientDefaults", "get_settings",
    # logging
    "get_logger",
    # fingerprint
    "fingerprint",
    # interceptors
    "InterceptorManager", "run_pipeline",
    # dedupe
    "InFlightRegistry",
    # client
    "StandardHttpClient", "LifecycleHooks",
    # transports
    "HttpxTransport", "JsonpAdapter", "JsonpTransport",
]
