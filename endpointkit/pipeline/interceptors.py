"""Request interceptors transform the request before guards and handlers run."""

from __future__ import annotations

from collections.abc import Awaitable
from collections.abc import Callable
from collections.abc import Iterable
from typing import Any
from typing import Protocol
from typing import runtime_checkable

from starlette.requests import Request

from endpointkit.core.concurrency import call


@runtime_checkable
class RequestInterceptor(Protocol):
    """Pre-handler that returns a (possibly new) request or raises to abort.

    Returning ``None`` keeps the current request.
    """

    def intercept_request(self, request: Request) -> Request | None | Awaitable[Request | None]: ...


class RequestInterceptorFunc:
    """Adapts a plain (sync or async) callable to the RequestInterceptor interface."""

    def __init__(self, fn: Callable[[Request], Request | None | Awaitable[Request | None]]) -> None:
        self._fn = fn

    async def intercept_request(self, request: Request) -> Request | None:
        return await call(self._fn, request)


class RequestInterceptorStack:
    """Interceptors chained so each one receives the previous one's request."""

    def __init__(self, interceptors: Iterable[RequestInterceptor | None] = ()) -> None:
        self._interceptors = tuple(i for i in interceptors if i is not None)

    def __len__(self) -> int:
        return len(self._interceptors)

    def __iter__(self):
        return iter(self._interceptors)

    async def intercept_request(self, request: Request) -> Request:
        for interceptor in self._interceptors:
            intercepted = await call(interceptor.intercept_request, request)
            if intercepted is not None:
                request = intercepted
        return request


def with_state(request: Request, **values: Any) -> Request:
    """Return a new request whose state also carries *values*.

    The original request and its state are left untouched.
    """
    scope = dict(request.scope)
    scope["state"] = {**request.scope.get("state", {}), **values}
    return Request(scope, request.receive)
