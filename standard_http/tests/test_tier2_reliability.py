"""Tests for tier2_reliability modules."""
from __future__ import annotations

from standard_http.tier0_core.http import RequestConfig
from standard_http.tier2_reliability.dedupe import InFlightRegistry


class TestInFlightRegistry:
    def test_add_and_remove(self):
        registry = InFlightRegistry()
        config = RequestConfig(url="/api")
        registry.add("k", config)
        assert "k" in registry
        assert registry.contains("k")
        registry.remove("k")
        assert "k" not in registry
        assert len(registry) == 0

    def test_one_entry_per_key(self):
        registry = InFlightRegistry()
        registry.add("k", RequestConfig(url="/a"))
        second = RequestConfig(url="/a")
        registry.add("k", second)
        assert len(registry) == 1
        assert "k" in registry

    def test_remove_missing_is_noop(self):
        registry = InFlightRegistry()
        registry.remove("missing")
        assert len(registry) == 0
