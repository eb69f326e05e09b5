"""
standard_http test configuration.

All HTTP goes through httpx.MockTransport (see mock_api.py); no network
access required.
"""
from __future__ import annotations

import os

import httpx
import pytest

from mock_api import BASE_URL, api_handler

# ── Pin settings for all tests ─────────────────────────────────────────────
# These must be set before any standard_http modules are imported.

os.environ.setdefault("STDHTTP_LOG_LEVEL", "WARNING")
os.environ.setdefault("STDHTTP_LOG_FORMAT", "json")
os.environ.setdefault("STDHTTP_ERROR_BACKEND", "none")


# ── Fixtures ───────────────────────────────────────────────────────────────

@pytest.fixture(autouse=True)
def reset_settings():
    """Each test reads settings from a clean cache."""
    from standard_http.tier0_core.config import _reset_settings

    _reset_settings()
    yield
    _reset_settings()


@pytest.fixture
def recorded():
    """Requests seen by the mock transport, in order."""
    return []


@pytest.fixture
def http_client(recorded):
    def handler(request: httpx.Request) -> httpx.Response:
        recorded.append(request)
        return api_handler(request)

    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


@pytest.fixture
def make_client(http_client):
    """Build a StandardHttpClient on the mock transport."""
    from standard_http.tier3_platform.api_client import StandardHttpClient

    def _make(**kwargs):
        kwargs.setdefault("base_url", BASE_URL)
        kwargs.setdefault("http_client", http_client)
        return StandardHttpClient(**kwargs)

    return _make
