"""
standard_http.tier3_platform.transport
───────────────────────────────────────
Primary transport: executes a RequestConfig on an httpx.AsyncClient and
returns a transport-neutral ``Response``.

Failure shapes (consumed by the classifier):
- httpx transport error → RequestError(config, request, response=None)
- status rejected by validate_status → RequestError(config, request, response)
- response transformer raising → propagated as-is
"""
from __future__ import annotations

import httpx

from standard_http.tier0_core.config import ClientDefaults
from standard_http.tier0_core.errors import RequestError
from standard_http.tier0_core.http import (
    BODY_METHODS,
    RequestConfig,
    Response,
    apply_transformers,
)
from standard_http.tier0_core.urls import build_url, resolve_url

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"


class HttpxTransport:
    """
    Usage::

        transport = HttpxTransport(httpx.AsyncClient(), ClientDefaults())
        response = await transport(RequestConfig(url="https://api.example.com/user"))
    """

    def __init__(self, client: httpx.AsyncClient, defaults: ClientDefaults) -> None:
        self._client = client
        self._defaults = defaults

    def _build_request(self, config: RequestConfig) -> httpx.Request:
        url = build_url(
            resolve_url(config.base_url or self._defaults.base_url, config.url),
            config.params,
        )
        headers = {**self._defaults.headers, **config.headers}
        content = None
        json_body = None
        if isinstance(config.data, (str, bytes)):
            content = config.data
            has_type = any(k.lower() == "content-type" for k in headers)
            if config.method in BODY_METHODS and not has_type:
                headers["Content-Type"] = FORM_CONTENT_TYPE
        elif config.data is not None:
            json_body = config.data

        timeout = config.timeout or self._defaults.timeout
        return self._client.build_request(
            config.method.upper(),
            url,
            headers=headers,
            content=content,
            json=json_body,
            timeout=timeout if timeout else httpx.USE_CLIENT_DEFAULT,
        )

    async def __call__(self, config: RequestConfig) -> Response:
        request = self._build_request(config)
        try:
            raw = await self._client.send(request)
        except httpx.HTTPError as exc:
            raise RequestError(
                str(exc) or exc.__class__.__name__, config=config, request=request
            ) from exc

        transformers = (
            config.transform_response
            if config.transform_response is not None
            else self._defaults.transform_response
        )
        response = Response(
            data=apply_transformers(raw.text, transformers),
            status=raw.status_code,
            status_text=raw.reason_phrase,
            headers=raw.headers,
            config=config,
            request=request,
        )

        validate_status = config.validate_status or self._defaults.validate_status
        if validate_status and not validate_status(response.status):
            raise RequestError(
                f"Request failed with status code {response.status}",
                config=config,
                request=request,
                response=response,
            )
        return response


__all__ = ["HttpxTransport", "FORM_CONTENT_TYPE"]
