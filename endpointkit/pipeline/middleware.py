"""Middleware wraps a handler function with additional behaviour."""

from __future__ import annotations

from collections.abc import Callable
import logging

from starlette.requests import Request
from starlette.responses import Response as StarletteResponse
from starlette.types import Message
from starlette.types import Receive

from endpointkit.codec import JSONServerCodec
from endpointkit.core.errors import find_problem
from endpointkit.handlers.base import Handler
from endpointkit.handlers.base import HandlerContext
from endpointkit.handlers.base import HandlerFunc

Middleware = Callable[[HandlerFunc], HandlerFunc]


def apply_middleware(handler: HandlerFunc, *middleware: Middleware | None) -> HandlerFunc:
    """Wrap *handler* so the first middleware given is the innermost."""
    for m in middleware:
        if m is not None:
            handler = m(handler)
    return handler


class MiddlewareHandler:
    """Handler wrapped by a middleware that forwards binding to the inner handler."""

    def __init__(self, handler: Handler, middleware: Middleware) -> None:
        self.handler = handler
        self.middleware = middleware
        self._wrapped = middleware(handler)

    async def __call__(self, request: Request) -> StarletteResponse:
        return await self._wrapped(request)

    def bind(self, context: HandlerContext) -> MiddlewareHandler:
        return MiddlewareHandler(self.handler.bind(context), self.middleware)


def recover_middleware(codec: JSONServerCodec, log: logging.Logger) -> Middleware:
    """Answer exceptions escaping the wrapped handler with problem details.

    A DetailedError found in the exception chain is written as is; anything
    else is logged and becomes a server error. Anything the handler already
    sent before failing stays sent.
    """

    def middleware(next_handler: HandlerFunc) -> HandlerFunc:
        async def handler(request: Request) -> StarletteResponse:
            try:
                return await next_handler(request)
            except Exception as exc:
                problem = find_problem(exc)
                if problem is None:
                    log.exception("Handler raised an unhandled exception")
                    problem = codec.catalog.server_error(request)
                return codec.encode_error(request, problem)

        return handler

    return middleware


def _limit_receive(receive: Receive, max_bytes: int, reject: Callable[[], Exception]) -> Receive:
    received = 0

    async def limited() -> Message:
        nonlocal received
        message = await receive()
        if message["type"] == "http.request":
            received += len(message.get("body", b""))
            if received > max_bytes:
                raise reject()
        return message

    return limited


def max_body_size_middleware(codec: JSONServerCodec, log: logging.Logger, max_bytes: int) -> Middleware:
    """Reject request bodies larger than *max_bytes*.

    A declared Content-Length over the limit is rejected before the handler
    runs. Bodies without one, such as chunked uploads, are counted as they
    are read and reading fails with ``request_too_large`` past the limit.
    """

    def middleware(next_handler: HandlerFunc) -> HandlerFunc:
        async def handler(request: Request) -> StarletteResponse:
            content_length = request.headers.get("content-length")
            if content_length is not None and content_length.isdigit() and int(content_length) > max_bytes:
                log.warning("Request body exceeds max bytes limit: max_bytes=%s", max_bytes)
                return codec.encode_error(request, codec.catalog.request_too_large(request))

            def reject() -> Exception:
                log.warning("Streamed request body exceeds max bytes limit: max_bytes=%s", max_bytes)
                return codec.catalog.request_too_large(request)

            limited = Request(request.scope, _limit_receive(request.receive, max_bytes, reject))
            return await next_handler(limited)

        return handler

    return middleware
