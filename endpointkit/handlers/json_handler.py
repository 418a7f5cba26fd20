"""Typed JSON handler bridging Starlette requests to business actions."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any
from typing import Generic
from typing import TypeVar

from pydantic import TypeAdapter
from pydantic import ValidationError
from starlette.requests import Request as StarletteRequest
from starlette.responses import Response as StarletteResponse

from endpointkit.core.concurrency import call
from endpointkit.core.errors import find_problem
from endpointkit.handlers.base import HandlerContext
from endpointkit.params import bind_parameters
from endpointkit.params import ensure_params_model
from endpointkit.problem.details import DetailedError
from endpointkit.schemas.problem import Property

D = TypeVar("D")
P = TypeVar("P")

EMPTY_BODY_DETAIL = "The server received an unexpected empty request body"


@dataclass(frozen=True)
class Request(Generic[D, P]):
    """Transport request together with its decoded data and parameters."""

    request: StarletteRequest
    data: D = None
    params: P = None


Action = Callable[[Request[Any, Any]], Any]


class _Rejected(Exception):
    """Carries the response written when decoding stops the pipeline."""

    def __init__(self, response: StarletteResponse) -> None:
        super().__init__("request rejected")
        self.response = response


def _describe(issue: dict[str, Any]) -> Property:
    location = [str(part) for part in issue.get("loc", ())]
    pointer = "/" + "/".join(location) if location else ""
    if issue.get("type") == "missing" and location:
        detail = f"{location[-1]} is required"
    else:
        detail = str(issue.get("msg", "Invalid value"))
    return Property(detail=detail, pointer=pointer)


class JSONHandler(Generic[D, P]):
    """Decodes JSON request data, invokes an action and encodes its response.

    ``data_type`` may be any type pydantic can validate; when it is ``None``
    the body is left alone. ``params_type`` must be a pydantic model whose
    fields are annotated with parameter sources (see ``endpointkit.params``).
    Actions may be plain functions, which run in the threadpool, or
    coroutines.
    """

    def __init__(
        self,
        action: Action,
        *,
        data_type: type[D] | Any | None = None,
        params_type: type[P] | None = None,
        context: HandlerContext | None = None,
    ) -> None:
        self.action = action
        self.data_type = data_type
        self.params_type = ensure_params_model(params_type) if params_type is not None else None
        self.context = context or HandlerContext()
        self._adapter = TypeAdapter(data_type) if data_type is not None else None

    def bind(self, context: HandlerContext) -> JSONHandler[D, P]:
        return JSONHandler(
            self.action,
            data_type=self.data_type,
            params_type=self.params_type,
            context=context,
        )

    async def __call__(self, request: StarletteRequest) -> StarletteResponse:
        ctx = self.context

        try:
            guard_response = await ctx.guard.guard(request)
        except Exception as exc:
            return ctx.error_response(request, exc, "calling guard")
        if guard_response is not None:
            return ctx.codec.encode(request, guard_response)

        try:
            params = self._params(request)
            data = await self._data(request)
        except _Rejected as rejected:
            return rejected.response

        try:
            response = await call(self.action, Request(request=request, data=data, params=params))
        except Exception as exc:
            return ctx.error_response(request, exc, "calling action")

        return ctx.codec.encode(request, response)

    def _params(self, request: StarletteRequest) -> Any:
        if self.params_type is None:
            return None
        try:
            return bind_parameters(request, self.params_type, catalog=self.context.catalog)
        except DetailedError as problem:
            raise _Rejected(self.context.codec.encode_error(request, problem)) from problem

    async def _data(self, request: StarletteRequest) -> Any:
        if self._adapter is None:
            return None

        ctx = self.context
        try:
            body = await request.body()
        except Exception as exc:
            problem = find_problem(exc)
            if problem is None:
                ctx.logger.warning("JSON handler failed to read request body: %s", exc)
                problem = ctx.catalog.server_error(request)
            raise _Rejected(ctx.codec.encode_error(request, problem)) from exc

        if not body:
            problem = ctx.catalog.bad_request(request).with_detail(EMPTY_BODY_DETAIL)
            raise _Rejected(ctx.codec.encode_error(request, problem))

        try:
            return self._adapter.validate_json(body)
        except ValidationError as exc:
            issues = exc.errors()
            if any(issue.get("type") == "json_invalid" for issue in issues):
                ctx.logger.warning("JSON handler failed to decode request data: %s", exc)
                raise _Rejected(ctx.codec.encode_error(request, ctx.catalog.bad_request(request))) from exc
            problem = ctx.catalog.constraint_violation(request, *[_describe(issue) for issue in issues])
            raise _Rejected(ctx.codec.encode_error(request, problem)) from exc

