"""Tests for tier1_runtime modules."""
from __future__ import annotations

import pytest

from standard_http.tier0_core.http import RequestConfig
from standard_http.tier1_runtime.interceptors import Interceptors, run_pipeline
from standard_http.tier1_runtime.serialize import fingerprint, serialize


# ── fingerprint ────────────────────────────────────────────────────────────

class TestFingerprint:
    def test_is_idempotent(self):
        config = RequestConfig(url="/api", params={"a": 1}, data={"b": [1, 2]})
        assert fingerprint(config) == fingerprint(config)

    def test_format(self):
        config = RequestConfig(method="post", url="/api", data="a=1")
        assert fingerprint(config) == 'post /api null "a=1"'

    def test_ignores_headers_and_timeout(self):
        a = RequestConfig(url="/api", params={"a": 1}, timeout=1, headers={"x": "1"})
        b = RequestConfig(url="/api", params={"a": 1}, timeout=9, headers={"y": "2"})
        assert fingerprint(a) == fingerprint(b)

    def test_differs_on_method_url_params_data(self):
        base = fingerprint(RequestConfig(url="/api", params={"a": 1}))
        assert fingerprint(RequestConfig(url="/api", method="post", params={"a": 1})) != base
        assert fingerprint(RequestConfig(url="/api2", params={"a": 1})) != base
        assert fingerprint(RequestConfig(url="/api", params={"a": 2})) != base
        assert fingerprint(RequestConfig(url="/api", params={"a": 1}, data=1)) != base

    def test_circular_structure_does_not_raise(self):
        params: dict = {"a": 1}
        params["self"] = params
        config = RequestConfig(url="/api", params=params)
        key = fingerprint(config)
        assert key.startswith("get /api ")
        assert key == fingerprint(config)

    def test_deeply_nested_structure_does_not_raise(self):
        params: list = []
        inner = params
        for _ in range(5000):
            inner.append([])
            inner = inner[0]
        config = RequestConfig(url="/api", params=params)
        key = fingerprint(config)
        assert key.startswith("get /api ")
        assert key == fingerprint(config)

    def test_unprintable_value_does_not_raise(self):
        class Unprintable:
            def __str__(self):
                raise RuntimeError("boom")

            __repr__ = __str__

        config = RequestConfig(method="post", url="/api", data={"x": Unprintable()})
        key = fingerprint(config)
        assert key.startswith("post /api null <dict object at ")

    def test_serialize_non_json_values(self):
        assert serialize({"when": object}).startswith('{"when": "')


# ── interceptors ───────────────────────────────────────────────────────────

class TestInterceptors:
    @pytest.mark.asyncio
    async def test_order(self):
        seen = []
        interceptors = Interceptors()
        interceptors.request.use(lambda c: seen.append("req1") or c)
        interceptors.request.use(lambda c: seen.append("req2") or c)
        interceptors.response.use(lambda r: seen.append("res1") or r)
        interceptors.response.use(lambda r: seen.append("res2") or r)

        async def dispatch(config):
            seen.append("dispatch")
            return config + 1

        assert await run_pipeline(interceptors, 1, dispatch) == 2
        assert seen == ["req1", "req2", "dispatch", "res1", "res2"]

    @pytest.mark.asyncio
    async def test_request_failure_skips_dispatch(self):
        interceptors = Interceptors()

        def explode(config):
            raise ValueError("before")

        interceptors.request.use(explode)
        seen = []

        async def dispatch(config):
            seen.append(config)

        with pytest.raises(ValueError, match="before"):
            await run_pipeline(interceptors, 1, dispatch)
        assert seen == []

    @pytest.mark.asyncio
    async def test_rejected_handler_can_recover(self):
        interceptors = Interceptors()
        interceptors.response.use(None, lambda exc: "recovered")

        async def dispatch(config):
            raise RuntimeError("down")

        assert await run_pipeline(interceptors, 1, dispatch) == "recovered"

    @pytest.mark.asyncio
    async def test_async_handlers(self):
        interceptors = Interceptors()

        async def double(value):
            return value * 2

        interceptors.response.use(double)

        async def dispatch(config):
            return config

        assert await run_pipeline(interceptors, 3, dispatch) == 6

    @pytest.mark.asyncio
    async def test_eject(self):
        interceptors = Interceptors()
        first = interceptors.response.use(lambda v: v + 1)
        interceptors.response.use(lambda v: v * 10)
        interceptors.response.eject(first)
        assert len(interceptors.response) == 1

        async def dispatch(config):
            return config

        assert await run_pipeline(interceptors, 1, dispatch) == 10
