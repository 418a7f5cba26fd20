"""Handler interface shared by the JSON and raw handlers."""

from __future__ import annotations

from collections.abc import Awaitable
from collections.abc import Callable
from dataclasses import dataclass
from dataclasses import field
import logging
from typing import Protocol
from typing import runtime_checkable

from starlette.requests import Request
from starlette.responses import Response as StarletteResponse

from endpointkit.codec import JSONServerCodec
from endpointkit.core.errors import find_problem
from endpointkit.pipeline.guards import GuardStack
from endpointkit.problem.constructors import ProblemCatalog
from endpointkit.problem.constructors import default_catalog
from endpointkit.problem.details import DetailedError

HandlerFunc = Callable[[Request], Awaitable[StarletteResponse]]


@dataclass(frozen=True)
class HandlerContext:
    """Dependencies a server injects into each registered handler."""

    logger: logging.Logger = field(default_factory=lambda: logging.getLogger("endpointkit"))
    guard: GuardStack = field(default_factory=GuardStack)
    catalog: ProblemCatalog = field(default_factory=default_catalog)
    codec: JSONServerCodec | None = None

    def __post_init__(self) -> None:
        if self.codec is None:
            object.__setattr__(self, "codec", JSONServerCodec(self.catalog, log=self.logger))

    def problem_for(self, request: Request, exc: BaseException, stage: str) -> DetailedError:
        """Return the problem carried by *exc*, or a server error after logging it."""
        problem = find_problem(exc)
        if problem is not None:
            return problem
        self.logger.error("Handler received an unhandled error while %s: %s", stage, exc, exc_info=exc)
        return self.catalog.server_error(request)

    def error_response(self, request: Request, exc: BaseException, stage: str) -> StarletteResponse:
        """Write *exc* as problem details."""
        return self.codec.encode_error(request, self.problem_for(request, exc, stage))


@runtime_checkable
class Handler(Protocol):
    """Transport handler that can be bound to a server's dependencies."""

    async def __call__(self, request: Request) -> StarletteResponse: ...

    def bind(self, context: HandlerContext) -> Handler: ...
