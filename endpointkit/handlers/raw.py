"""Adapter letting plain Starlette endpoint functions sit behind guards."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from starlette.requests import Request
from starlette.responses import Response as StarletteResponse

from endpointkit.core.concurrency import call
from endpointkit.handlers.base import HandlerContext


class RawHandler:
    """Runs the bound guard stack, then delegates to a Starlette endpoint function."""

    def __init__(self, endpoint: Callable[[Request], Any], *, context: HandlerContext | None = None) -> None:
        self.endpoint = endpoint
        self.context = context or HandlerContext()

    def bind(self, context: HandlerContext) -> RawHandler:
        return RawHandler(self.endpoint, context=context)

    async def __call__(self, request: Request) -> StarletteResponse:
        ctx = self.context
        try:
            guard_response = await ctx.guard.guard(request)
        except Exception as exc:
            return ctx.error_response(request, exc, "calling guard")
        if guard_response is not None:
            return ctx.codec.encode(request, guard_response)

        return await call(self.endpoint, request)
