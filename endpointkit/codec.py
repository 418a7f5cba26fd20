"""JSON encoding of handler responses and problem details."""

from __future__ import annotations

import logging

from fastapi.encoders import jsonable_encoder
from starlette.requests import HTTPConnection
from starlette.responses import JSONResponse
from starlette.responses import RedirectResponse
from starlette.responses import Response as StarletteResponse

from endpointkit.problem.constructors import ProblemCatalog
from endpointkit.problem.details import DetailedError
from endpointkit.problem.details import ProblemMarshalError
from endpointkit.responses import Response

logger = logging.getLogger(__name__)

JSON_MEDIA_TYPE = "application/json"
PROBLEM_MEDIA_TYPE = "application/problem+json"


class JSONServerCodec:
    """Writes handler responses as JSON and errors as problem details."""

    def __init__(self, catalog: ProblemCatalog, *, log: logging.Logger | None = None) -> None:
        self.catalog = catalog
        self._logger = log or logger

    def encode(self, request: HTTPConnection, response: Response | None) -> StarletteResponse:
        """Build the transport response for a handler or guard response."""
        if response is None:
            return StarletteResponse(status_code=200)

        if response.redirect:
            return RedirectResponse(response.redirect, status_code=response.status)

        if response.data is None:
            return StarletteResponse(status_code=response.status)

        try:
            content = jsonable_encoder(response.data)
            return JSONResponse(content, status_code=response.status, media_type=JSON_MEDIA_TYPE)
        except (TypeError, ValueError) as exc:
            self._logger.error("Codec failed to encode response data: %s", exc, exc_info=exc)
            return self.encode_error(request, self.catalog.server_error(request))

    def encode_error(self, request: HTTPConnection, problem: DetailedError) -> StarletteResponse:
        """Build the transport response for a problem."""
        try:
            body = problem.marshal_json()
        except ProblemMarshalError as exc:
            self._logger.error("Codec failed to encode problem details: %s", exc, exc_info=exc)
            problem = self.catalog.server_error(request)
            body = problem.must_marshal_json()
        return StarletteResponse(body, status_code=problem.status, media_type=PROBLEM_MEDIA_TYPE)
