"""Server registering endpoints on a FastAPI application."""

from __future__ import annotations

import logging

from fastapi import FastAPI
from starlette.requests import Request
from starlette.responses import Response as StarletteResponse
from starlette.types import Receive
from starlette.types import Scope
from starlette.types import Send

from endpointkit.codec import JSONServerCodec
from endpointkit.core.config import Settings
from endpointkit.core.config import get_settings
from endpointkit.core.errors import register_problem_handlers
from endpointkit.handlers.base import HandlerContext
from endpointkit.handlers.base import HandlerFunc
from endpointkit.pipeline.endpoint import Endpoint
from endpointkit.pipeline.guards import GuardStack
from endpointkit.pipeline.interceptors import RequestInterceptorStack
from endpointkit.pipeline.middleware import apply_middleware
from endpointkit.pipeline.middleware import max_body_size_middleware
from endpointkit.pipeline.middleware import recover_middleware
from endpointkit.problem.constructors import ProblemCatalog

logger = logging.getLogger(__name__)


class Server:
    """Composes each registered endpoint's pipeline and routes requests to it.

    For every request the route runs, outermost first: exception recovery, the
    body size limit, the endpoint's request interceptors, the endpoint's
    middleware and finally the handler, which runs the guards before its own
    work. The underlying FastAPI application is exposed as ``app`` and the
    server itself is an ASGI application.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        *,
        log: logging.Logger | None = None,
        catalog: ProblemCatalog | None = None,
        codec: JSONServerCodec | None = None,
        title: str = "endpointkit",
    ) -> None:
        self.settings = settings or get_settings()
        self.logger = log or logger
        self.catalog = catalog or ProblemCatalog(self.settings.error_documentation_location)
        self.codec = codec or JSONServerCodec(self.catalog, log=self.logger)
        self.app = FastAPI(title=title)
        register_problem_handlers(self.app, self.codec, log=self.logger)

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        await self.app(scope, receive, send)

    def register(self, *endpoints: Endpoint) -> None:
        """Route each endpoint's method and path to its composed pipeline."""
        for endpoint in endpoints:
            route = self._compose(endpoint)
            self.app.add_route(endpoint.path, route, methods=[endpoint.method])
            self.logger.debug("Registered endpoint %s %s", endpoint.method, endpoint.path)

    def _compose(self, endpoint: Endpoint) -> HandlerFunc:
        context = HandlerContext(
            logger=self.logger,
            guard=GuardStack(endpoint.guards),
            catalog=self.catalog,
            codec=self.codec,
        )
        handler = endpoint.handler.bind(context)
        interceptors = RequestInterceptorStack(endpoint.interceptors)

        async def route(request: Request) -> StarletteResponse:
            try:
                request = await interceptors.intercept_request(request)
            except Exception as exc:
                return context.error_response(request, exc, "calling request interceptor")
            return await handler(request)

        return apply_middleware(
            route,
            max_body_size_middleware(self.codec, self.logger, self.settings.max_body_size),
            recover_middleware(self.codec, self.logger),
        )
