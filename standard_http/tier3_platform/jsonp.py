"""
standard_http.tier3_platform.jsonp
───────────────────────────────────
JSONP delivery for legacy endpoints that only answer with a callback-wrapped
script body (``cb({...});``).

``JsonpTransport`` fetches and unwraps the script body. ``JsonpAdapter`` turns
the result into the same ``Response`` / ``RequestError`` shapes the primary
transport produces, so response interceptors cannot tell which transport
served a request:

- delivery or parse failure → RequestError(config=..., request="script",
  response=None), which classifies as a network (A) failure
- a response transformer raising → propagated as-is (client, C)

Only GET is supported; the adapter forwards base_url, url, params, timeout,
transform_response and jsonp_callback and ignores everything else.
"""
from __future__ import annotations

import json
import uuid
from typing import Any

import httpx

from standard_http.tier0_core.config import ClientDefaults
from standard_http.tier0_core.errors import JsonpError, JsonpTimeoutError, RequestError
from standard_http.tier0_core.http import (
    HTTP,
    RequestConfig,
    Response,
    apply_transformers,
)
from standard_http.tier0_core.urls import build_url, resolve_url

SCRIPT_REQUEST = "script"


class JsonpResponse:
    """Script body returned for one JSONP call."""

    def __init__(self, text: str, callback_name: str) -> None:
        self.text = text
        self.callback_name = callback_name

    def json(self) -> Any:
        start = self.text.find(f"{self.callback_name}(")
        end = self.text.rfind(")")
        if start == -1 or end < start:
            raise JsonpError(f"JSONP response did not call {self.callback_name}")
        inner = self.text[start + len(self.callback_name) + 1:end]
        try:
            return json.loads(inner)
        except ValueError as exc:
            raise JsonpError(f"JSONP payload of {self.callback_name} is not JSON") from exc


class JsonpTransport:
    """
    Fetch ``url`` with a generated callback name in ``jsonp_callback``.

    Usage::

        transport = JsonpTransport(httpx.AsyncClient())
        payload = (await transport("https://api.example.com/user", timeout=5)).json()
    """

    def __init__(self, client: httpx.AsyncClient) -> None:
        self._client = client

    async def __call__(
        self,
        url: str,
        *,
        timeout: float | None = None,
        jsonp_callback: str = "callback",
    ) -> JsonpResponse:
        callback_name = f"jsonp_{uuid.uuid4().hex}"
        target = build_url(url, {jsonp_callback: callback_name})
        try:
            response = await self._client.get(
                target,
                timeout=timeout if timeout else httpx.USE_CLIENT_DEFAULT,
            )
        except httpx.TimeoutException as exc:
            raise JsonpTimeoutError(f"JSONP request to {url} timed out") from exc
        except httpx.HTTPError as exc:
            raise JsonpError(f"JSONP request to {url} failed: {exc}") from exc
        if response.is_error:
            raise JsonpError(
                f"JSONP request to {url} failed with status code {response.status_code}"
            )
        return JsonpResponse(response.text, callback_name)


class JsonpAdapter:
    """Dispatch a RequestConfig through a JsonpTransport."""

    def __init__(self, transport: JsonpTransport, defaults: ClientDefaults) -> None:
        self._transport = transport
        self._defaults = defaults

    @staticmethod
    def config_for(config: RequestConfig) -> RequestConfig:
        """The GET-only subset of *config* that JSONP can honor."""
        return RequestConfig(
            method="get",
            base_url=config.base_url,
            url=config.url,
            params=config.params,
            timeout=config.timeout,
            transform_response=config.transform_response,
            jsonp=True,
            jsonp_callback=config.jsonp_callback,
        )

    async def dispatch(self, config: RequestConfig) -> Response:
        config.url = resolve_url(config.base_url or self._defaults.base_url, config.url)
        url = build_url(config.url, config.params)
        if not config.timeout:
            config.timeout = self._defaults.timeout
        transformers = (
            config.transform_response
            if config.transform_response is not None
            else self._defaults.transform_response
        )

        try:
            script = await self._transport(
                url,
                timeout=config.timeout,
                jsonp_callback=config.jsonp_callback or self._defaults.jsonp_callback,
            )
            payload = script.json()
        except Exception as exc:
            raise RequestError(
                str(exc), config=config, request=SCRIPT_REQUEST, response=None
            ) from exc

        data = apply_transformers(payload, transformers)
        return Response(
            data=data,
            status=HTTP.OK,
            status_text="OK",
            headers={},
            config=config,
            request=SCRIPT_REQUEST,
        )


__all__ = ["JsonpResponse", "JsonpTransport", "JsonpAdapter", "SCRIPT_REQUEST"]
