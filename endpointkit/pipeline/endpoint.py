"""Declarative endpoints and bulk transformations over groups of them."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from dataclasses import replace
from typing import Any

from endpointkit.handlers.base import Handler
from endpointkit.handlers.raw import RawHandler
from endpointkit.pipeline.guards import Guard
from endpointkit.pipeline.interceptors import RequestInterceptor
from endpointkit.pipeline.middleware import Middleware
from endpointkit.pipeline.middleware import MiddlewareHandler


def as_handler(handler: Handler | Callable[..., Any]) -> Handler:
    """Return *handler*, wrapping plain endpoint functions in a RawHandler."""
    if isinstance(handler, Handler):
        return handler
    return RawHandler(handler)


@dataclass(frozen=True)
class Endpoint:
    """Method, path and handler with the guards and interceptors attached to it."""

    method: str
    path: str
    handler: Handler | Callable[..., Any]
    guards: tuple[Guard, ...] = ()
    interceptors: tuple[RequestInterceptor, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "method", self.method.upper())
        object.__setattr__(self, "handler", as_handler(self.handler))

    def with_guard(self, guard: Guard | None) -> Endpoint:
        """Return a copy with *guard* run after the existing guards."""
        if guard is None:
            return self
        return replace(self, guards=(*self.guards, guard))

    def with_request_interceptor(self, interceptor: RequestInterceptor | None) -> Endpoint:
        """Return a copy with *interceptor* run after the existing interceptors."""
        if interceptor is None:
            return self
        return replace(self, interceptors=(*self.interceptors, interceptor))

    def with_middleware(self, middleware: Middleware | None) -> Endpoint:
        """Return a copy whose handler is wrapped by *middleware*."""
        if middleware is None:
            return self
        return replace(self, handler=MiddlewareHandler(self.handler, middleware))


class EndpointGroup(tuple[Endpoint, ...]):
    """Ordered, immutable collection of endpoints.

    Every transformation returns a new group; the order of the endpoints and
    of the guards, interceptors and middleware applied to them is kept.
    """

    def __new__(cls, endpoints: Any = ()) -> EndpointGroup:
        return super().__new__(cls, endpoints)

    def __repr__(self) -> str:
        return f"EndpointGroup({list(self)!r})"

    def _map(self, update: Callable[[Endpoint], Endpoint]) -> EndpointGroup:
        return EndpointGroup(update(endpoint) for endpoint in self)

    def with_prefix(self, prefix: str) -> EndpointGroup:
        """Prefix the path of every endpoint."""
        return self._map(lambda e: replace(e, path=prefix + e.path))

    def with_guard(self, guard: Guard | None) -> EndpointGroup:
        """Append *guard* to every endpoint's guard stack."""
        if guard is None:
            return self
        return self._map(lambda e: e.with_guard(guard))

    def with_request_interceptor(self, interceptor: RequestInterceptor | None) -> EndpointGroup:
        """Append *interceptor* to every endpoint's interceptor stack."""
        if interceptor is None:
            return self
        return self._map(lambda e: e.with_request_interceptor(interceptor))

    def with_middleware(self, middleware: Middleware | None) -> EndpointGroup:
        """Wrap every endpoint's handler with *middleware*."""
        if middleware is None:
            return self
        return self._map(lambda e: e.with_middleware(middleware))
