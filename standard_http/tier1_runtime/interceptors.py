"""
standard_http.tier1_runtime.interceptors
─────────────────────────────────────────
Ordered interceptor lists and the one chain runner both transports use.

An interceptor is a pair of optional handlers. ``fulfilled`` receives the
current value (the config before dispatch, the response after). ``rejected``
receives the current exception; it keeps the failure going by raising and
recovers by returning a value. Handlers may be sync or async.

Chain::

    request interceptors (registration order)
        → dispatch(config)
    response interceptors (registration order)
"""
from __future__ import annotations

import inspect
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Iterator

Handler = Callable[[Any], Any]
Dispatch = Callable[[Any], Awaitable[Any]]


@dataclass(frozen=True)
class Interceptor:
    fulfilled: Handler | None = None
    rejected: Handler | None = None


class InterceptorManager:
    """Interceptors in registration order. Ejected slots are skipped."""

    def __init__(self) -> None:
        self._handlers: list[Interceptor | None] = []

    def use(
        self,
        fulfilled: Handler | None = None,
        rejected: Handler | None = None,
    ) -> int:
        """Register an interceptor; returns an id for ``eject``."""
        self._handlers.append(Interceptor(fulfilled, rejected))
        return len(self._handlers) - 1

    def eject(self, interceptor_id: int) -> None:
        if 0 <= interceptor_id < len(self._handlers):
            self._handlers[interceptor_id] = None

    def __iter__(self) -> Iterator[Interceptor]:
        return (h for h in self._handlers if h is not None)

    def __len__(self) -> int:
        return sum(1 for _ in self)


class Interceptors:
    def __init__(self) -> None:
        self.request = InterceptorManager()
        self.response = InterceptorManager()


class _Outcome:
    """Either a value or an exception, like a settled promise."""

    __slots__ = ("value", "error")

    def __init__(self, value: Any = None, error: BaseException | None = None) -> None:
        self.value = value
        self.error = error


async def _call(handler: Handler, arg: Any) -> Any:
    result = handler(arg)
    if inspect.isawaitable(result):
        result = await result
    return result


async def _step(outcome: _Outcome, interceptor: Interceptor) -> _Outcome:
    if outcome.error is None:
        handler = interceptor.fulfilled
        arg: Any = outcome.value
    else:
        handler = interceptor.rejected
        arg = outcome.error
    if handler is None:
        return outcome
    try:
        return _Outcome(value=await _call(handler, arg))
    except Exception as exc:
        return _Outcome(error=exc)


async def run_pipeline(interceptors: Interceptors, config: Any, dispatch: Dispatch) -> Any:
    """
    Run *config* through request interceptors, *dispatch*, then response
    interceptors. Returns the final value or raises the final exception.
    """
    outcome = _Outcome(value=config)
    for interceptor in interceptors.request:
        outcome = await _step(outcome, interceptor)

    if outcome.error is None:
        try:
            outcome = _Outcome(value=await dispatch(outcome.value))
        except Exception as exc:
            outcome = _Outcome(error=exc)

    for interceptor in interceptors.response:
        outcome = await _step(outcome, interceptor)

    if outcome.error is not None:
        raise outcome.error
    return outcome.value


__all__ = ["Interceptor", "InterceptorManager", "Interceptors", "run_pipeline"]
