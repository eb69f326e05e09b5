"""
standard_http.tier3_platform.api_client
────────────────────────────────────────
HTTP client for JSON APIs that answer with the standard envelope::

    {"status": 0, "data": ..., "statusInfo": {"message": ""}}

Every request runs through the same interceptor chain, whichever transport
serves it (httpx, or JSONP for legacy endpoints)::

                        ┌─> success ─> after_send ─> unwrap envelope
    before_send ─> send ┤
                        └─> failure ─> after_send ─> classify ─> handle_error ─> log

Failures always surface as a classified ``RequestError`` (H/B/A/C, see
``tier0_core.errors``); nothing is swallowed.

Usage::

    async with StandardHttpClient(base_url="https://api.example.com") as client:
        data, response = await client.send(url="/user", params={"id": 1})
"""
from __future__ import annotations

import asyncio
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Callable

import httpx

from standard_http.tier0_core.config import ClientDefaults, ClientSettings
from standard_http.tier0_core.errors import (
    ConfigurationError,
    RequestError,
    classify,
    classify_client_error,
    report,
)
from standard_http.tier0_core.http import (
    BODY_METHODS,
    RequestConfig,
    Response,
    StatusPredicate,
    Transformer,
    api_message,
    is_api_success,
)
from standard_http.tier0_core.logging import get_logger
from standard_http.tier0_core.urls import encode_form
from standard_http.tier1_runtime.interceptors import Interceptors, run_pipeline
from standard_http.tier1_runtime.serialize import fingerprint
from standard_http.tier2_reliability.dedupe import InFlightRegistry
from standard_http.tier3_platform.jsonp import JsonpAdapter, JsonpTransport
from standard_http.tier3_platform.transport import HttpxTransport

log = get_logger(__name__)


def _noop(_: Any) -> None:
    return None


@dataclass
class LifecycleHooks:
    """
    Side-effect-only callbacks with fixed call sites:

    - before_send(config): once, right before dispatch; mutations are honored
    - after_send(response_or_error): once, before classification, on both paths
    - handle_error(error): on failure, after classification; if it raises,
      the raised exception replaces the error as a client (C) failure
    """
    before_send: Callable[[RequestConfig], None] = _noop
    after_send: Callable[[Any], None] = _noop
    handle_error: Callable[[RequestError], None] = _noop


class StandardHttpClient:
    """
    Envelope-aware async HTTP client.

    Additional interceptors go through ``client.interceptors.request.use`` /
    ``client.interceptors.response.use``, or a subclass overriding
    ``use_interceptors`` (call ``super().use_interceptors()`` first so the
    built-in order is kept).
    """

    def __init__(
        self,
        base_url: str | None = None,
        *,
        timeout: float | None = None,
        headers: dict[str, str] | None = None,
        transform_response: list[Transformer] | None = None,
        validate_status: StatusPredicate | None = None,
        jsonp_callback: str | None = None,
        hooks: LifecycleHooks | None = None,
        http_client: httpx.AsyncClient | None = None,
        jsonp_transport: JsonpTransport | None = None,
        settings: ClientSettings | None = None,
    ) -> None:
        if timeout is not None and timeout <= 0:
            raise ConfigurationError(f"timeout must be positive, got {timeout!r}")
        defaults = ClientDefaults.from_settings(settings)
        if base_url is not None:
            defaults.base_url = base_url
        if timeout is not None:
            defaults.timeout = timeout
        if headers:
            defaults.headers.update(headers)
        if transform_response is not None:
            defaults.transform_response = list(transform_response)
        if validate_status is not None:
            defaults.validate_status = validate_status
        if jsonp_callback:
            defaults.jsonp_callback = jsonp_callback

        self.defaults = defaults
        self.hooks = hooks or LifecycleHooks()
        self.interceptors = Interceptors()
        self._in_flight = InFlightRegistry()
        self._owns_client = http_client is None
        self._http_client = http_client
        self._jsonp_transport = jsonp_transport
        self._transport: HttpxTransport | None = None
        self._jsonp: JsonpAdapter | None = None
        self.use_interceptors()

    # ── Transports ─────────────────────────────────────────────────────────────

    @property
    def http_client(self) -> httpx.AsyncClient:
        if self._http_client is None:
            self._http_client = httpx.AsyncClient()
        return self._http_client

    def _primary(self) -> HttpxTransport:
        if self._transport is None:
            self._transport = HttpxTransport(self.http_client, self.defaults)
        return self._transport

    def _jsonp_adapter(self) -> JsonpAdapter:
        if self._jsonp is None:
            transport = self._jsonp_transport or JsonpTransport(self.http_client)
            self._jsonp = JsonpAdapter(transport, self.defaults)
        return self._jsonp

    async def aclose(self) -> None:
        if self._owns_client and self._http_client is not None:
            await self._http_client.aclose()
            self._http_client = None
            self._transport = None
            self._jsonp = None

    async def __aenter__(self) -> StandardHttpClient:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    # ── Interceptors ───────────────────────────────────────────────────────────

    def use_interceptors(self) -> None:
        """Register the built-in interceptors. The order is part of the contract."""
        self._use_lifecycle_hooks()
        self._use_envelope_check()
        self._use_error_description()
        self._use_error_handler()
        self._use_error_logging()

    def _use_lifecycle_hooks(self) -> None:
        def before_send(config: RequestConfig) -> RequestConfig:
            self.hooks.before_send(config)
            return config

        def after_send(response: Response) -> Response:
            self.hooks.after_send(response)
            return response

        def after_send_error(error: BaseException) -> Any:
            self.hooks.after_send(error)
            raise error

        self.interceptors.request.use(before_send)
        self.interceptors.response.use(after_send, after_send_error)

    def _use_envelope_check(self) -> None:
        def unwrap(response: Response) -> tuple[Any, Response]:
            body = response.data
            if is_api_success(body):
                data = body.get("data") if isinstance(body, Mapping) else None
                return data, response
            raise RequestError(
                api_message(body),
                config=response.config,
                request=response.request,
                response=response,
            )

        self.interceptors.response.use(unwrap)

    def _use_error_description(self) -> None:
        def describe(error: BaseException) -> Any:
            raise classify(error, self.defaults.validate_status)

        self.interceptors.response.use(None, describe)

    def _use_error_handler(self) -> None:
        def handle(error: RequestError) -> Any:
            try:
                self.hooks.handle_error(error)
            except Exception as exc:
                raise classify_client_error(exc, context=error)
            raise error

        self.interceptors.response.use(None, handle)

    def _use_error_logging(self) -> None:
        def log_error(error: RequestError) -> Any:
            config = getattr(error, "config", None)
            log.warning(
                "request.failed",
                desc=getattr(error, "desc", None),
                error_code=getattr(error, "error_code", None),
                method=getattr(config, "method", None),
                url=getattr(config, "url", None),
                status=getattr(getattr(error, "response", None), "status", None),
                message=str(error),
            )
            if isinstance(error, RequestError):
                report(error)
            raise error

        self.interceptors.response.use(None, log_error)

    # ── Sending ────────────────────────────────────────────────────────────────

    async def send(
        self, config: RequestConfig | Mapping[str, Any] | None = None, **options: Any
    ) -> tuple[Any, Response]:
        """
        Send a request and return ``(envelope data, response)``.

        Raises a classified ``RequestError`` on any failure. With
        ``intercept_duplicate=True``, a call identical to one still in flight
        never completes; fire such calls with ``asyncio.create_task``.
        """
        config = RequestConfig.build(config, **options)
        self._adapt_data_option(config)

        key = fingerprint(config)
        if config.intercept_duplicate and key in self._in_flight:
            log.warning(
                "request.duplicate_suppressed", method=config.method, url=config.url
            )
            # Never resolved.
            return await asyncio.get_running_loop().create_future()

        self._in_flight.add(key, config)
        try:
            log.debug("request.send", method=config.method, url=config.url, jsonp=config.jsonp)
            if config.jsonp:
                return await run_pipeline(
                    self.interceptors,
                    JsonpAdapter.config_for(config),
                    self._jsonp_adapter().dispatch,
                )
            return await run_pipeline(self.interceptors, config, self._primary())
        finally:
            self._in_flight.remove(key)

    @staticmethod
    def _adapt_data_option(config: RequestConfig) -> None:
        """Move ``payload`` into ``data`` (body methods) or ``params``."""
        if config.payload is None:
            return
        if config.method in BODY_METHODS:
            if config.data is None:
                if isinstance(config.payload, Mapping):
                    config.data = encode_form(config.payload)
                else:
                    config.data = config.payload
        elif config.params is None:
            config.params = config.payload

    def is_in_flight(self, config: RequestConfig | Mapping[str, Any]) -> bool:
        config = RequestConfig.build(config)
        self._adapt_data_option(config)
        return fingerprint(config) in self._in_flight

    async def get(self, url: str, **options: Any) -> tuple[Any, Response]:
        return await self.send(url=url, method="get", **options)

    async def post(self, url: str, **options: Any) -> tuple[Any, Response]:
        return await self.send(url=url, method="post", **options)

    async def put(self, url: str, **options: Any) -> tuple[Any, Response]:
        return await self.send(url=url, method="put", **options)

    async def patch(self, url: str, **options: Any) -> tuple[Any, Response]:
        return await self.send(url=url, method="patch", **options)

    async def delete(self, url: str, **options: Any) -> tuple[Any, Response]:
        return await self.send(url=url, method="delete", **options)


__all__ = ["StandardHttpClient", "LifecycleHooks"]
