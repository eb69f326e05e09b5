"""
standard_http.tier0_core.urls
──────────────────────────────
URL composition shared by the primary and JSONP transports, so both build
identical query strings. Sequences repeat the key (``a=1&a=2``), which is what
form-style backends expect.

Backed by: httpx.URL / httpx.QueryParams.
"""
from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any

import httpx

_ABSOLUTE_URL = re.compile(r"^([a-z][a-z\d+\-.]*:)?//", re.I)


def is_absolute_url(url: str) -> bool:
    """``scheme://`` or protocol-relative ``//`` URLs are absolute."""
    return bool(_ABSOLUTE_URL.match(url or ""))


def combine_urls(base_url: str, relative_url: str) -> str:
    if not relative_url:
        return base_url
    return f"{base_url.rstrip('/')}/{relative_url.lstrip('/')}"


def resolve_url(base_url: str | None, url: str) -> str:
    if base_url and not is_absolute_url(url):
        return combine_urls(base_url, url)
    return url


def _query_items(params: Any) -> list[tuple[str, Any]]:
    if params is None:
        return []
    if isinstance(params, Mapping):
        items: list[tuple[str, Any]] = []
        for key, value in params.items():
            if value is None:
                continue
            if isinstance(value, (list, tuple)):
                items.extend((str(key), v) for v in value)
            else:
                items.append((str(key), value))
        return items
    return list(httpx.QueryParams(params).multi_items())


def build_url(url: str, params: Any = None) -> str:
    """Append *params* to *url*, keeping any query string already present."""
    items = _query_items(params)
    if not items:
        return url
    parsed = httpx.URL(url)
    merged = httpx.QueryParams(list(parsed.params.multi_items()) + items)
    return str(parsed.copy_with(params=merged))


def encode_form(data: Mapping[str, Any]) -> str:
    """URL-encode a mapping as a form body: ``{"a": 1, "b": 2}`` → ``a=1&b=2``."""
    return str(httpx.QueryParams(_query_items(data)))


__all__ = ["is_absolute_url", "combine_urls", "resolve_url", "build_url", "encode_form"]
