"""
standard_http.tier2_reliability.dedupe
───────────────────────────────────────
In-flight request registry used to suppress duplicate requests.

States per fingerprint: absent → registered (on send) → absent (on settle).
A request is in flight iff its fingerprint is a key. Access is synchronous, so
within one event loop there is no window between check and register.
"""
from __future__ import annotations

from standard_http.tier0_core.http import RequestConfig


class InFlightRegistry:
    """Fingerprint → config of the request currently holding it."""

    def __init__(self) -> None:
        self._store: dict[str, RequestConfig] = {}

    def contains(self, key: str) -> bool:
        return key in self._store

    def add(self, key: str, config: RequestConfig) -> None:
        self._store[key] = config

    def remove(self, key: str) -> None:
        self._store.pop(key, None)

    def __contains__(self, key: object) -> bool:
        return key in self._store

    def __len__(self) -> int:
        return len(self._store)


__all__ = ["InFlightRegistry"]
