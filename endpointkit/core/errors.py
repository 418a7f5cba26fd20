"""Problem lookup and exception handler registration."""

from __future__ import annotations

from http import HTTPStatus
import logging

from fastapi import FastAPI
from fastapi import Request
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.responses import Response

from endpointkit.codec import JSONServerCodec
from endpointkit.problem.details import DetailedError
from endpointkit.schemas.problem import Property

logger = logging.getLogger(__name__)


def find_problem(exc: BaseException | None) -> DetailedError | None:
    """Return the first DetailedError in the ``__cause__`` chain of *exc*."""
    seen: set[int] = set()
    while exc is not None and id(exc) not in seen:
        if isinstance(exc, DetailedError):
            return exc
        seen.add(id(exc))
        exc = exc.__cause__
    return None


def _phrase(status: int) -> str:
    try:
        return HTTPStatus(status).phrase
    except ValueError:
        return ""


def _pointer(location: tuple | list) -> str:
    prefixes = {"body", "query", "path", "header", "cookie"}
    parts = [str(part) for part in location if part not in prefixes]
    return "/" + "/".join(parts)


def register_problem_handlers(app: FastAPI, codec: JSONServerCodec, *, log: logging.Logger | None = None) -> None:
    """Answer errors raised outside the endpoint pipeline with problem details."""
    log = log or logger
    catalog = codec.catalog

    async def detailed_error_handler(request: Request, exc: DetailedError) -> Response:
        return codec.encode_error(request, exc)

    async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> Response:
        detail = exc.detail if isinstance(exc.detail, str) else None
        if detail == _phrase(exc.status_code):
            detail = None
        problem = catalog.from_status(request, exc.status_code, detail)
        response = codec.encode_error(request, problem)
        if exc.headers:
            response.headers.update(exc.headers)
        return response

    async def request_validation_exception_handler(request: Request, exc: RequestValidationError) -> Response:
        properties = [
            Property(detail=str(issue.get("msg", "Invalid value")), pointer=_pointer(issue.get("loc", ())))
            for issue in exc.errors()
        ]
        return codec.encode_error(request, catalog.constraint_violation(request, *properties))

    async def unhandled_exception_handler(request: Request, exc: Exception) -> Response:
        problem = find_problem(exc)
        if problem is None:
            log.error("Unhandled exception reached the application: %s", exc, exc_info=exc)
            problem = catalog.server_error(request)
        return codec.encode_error(request, problem)

    app.add_exception_handler(DetailedError, detailed_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
