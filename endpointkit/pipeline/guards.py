"""Guards run before a handler and may end the request early."""

from __future__ import annotations

from collections.abc import Awaitable
from collections.abc import Callable
from collections.abc import Iterable
from typing import Protocol
from typing import runtime_checkable

from starlette.requests import Request

from endpointkit.core.concurrency import call
from endpointkit.responses import Response


@runtime_checkable
class Guard(Protocol):
    """Pre-handler that returns a response to end the request or ``None`` to continue.

    Raising an exception ends the request with an error. ``guard`` may be a
    plain or an async method.
    """

    def guard(self, request: Request) -> Response | None | Awaitable[Response | None]: ...


class GuardFunc:
    """Adapts a plain (sync or async) callable to the Guard interface."""

    def __init__(self, fn: Callable[[Request], Response | None | Awaitable[Response | None]]) -> None:
        self._fn = fn

    async def guard(self, request: Request) -> Response | None:
        return await call(self._fn, request)


class GuardStack:
    """Guards evaluated in order until one returns a response or raises."""

    def __init__(self, guards: Iterable[Guard | None] = ()) -> None:
        self._guards = tuple(g for g in guards if g is not None)

    def __len__(self) -> int:
        return len(self._guards)

    def __iter__(self):
        return iter(self._guards)

    async def guard(self, request: Request) -> Response | None:
        for g in self._guards:
            response = await call(g.guard, request)
            if response is not None:
                return response
        return None
