"""Canonical problem details for common failure categories."""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from http import HTTPStatus

from starlette.requests import HTTPConnection

from endpointkit.core.config import DEFAULT_ERROR_DOCUMENTATION_LOCATION
from endpointkit.core.config import get_settings
from endpointkit.problem.details import DetailedError
from endpointkit.schemas.problem import Parameter
from endpointkit.schemas.problem import Property

BLANK_TYPE = "about:blank"


@dataclass(frozen=True)
class ProblemKind:
    """Static members shared by every occurrence of a problem category."""

    slug: str
    title: str
    detail: str
    status: int
    code: str


BAD_REQUEST = ProblemKind(
    slug="bad-request",
    title="Bad Request",
    detail="The request is invalid or malformed",
    status=HTTPStatus.BAD_REQUEST,
    code="400-01",
)
BAD_PARAMETERS = ProblemKind(
    slug="bad-parameters",
    title="Bad Parameters",
    detail="The request parameters are invalid or malformed",
    status=HTTPStatus.BAD_REQUEST,
    code="400-02",
)
UNAUTHORIZED = ProblemKind(
    slug="unauthorized",
    title="Unauthorized",
    detail="You must be authenticated to {method} this resource",
    status=HTTPStatus.UNAUTHORIZED,
    code="401-01",
)
FORBIDDEN = ProblemKind(
    slug="forbidden",
    title="Forbidden",
    detail="You do not have the necessary permissions to {method} this resource",
    status=HTTPStatus.FORBIDDEN,
    code="403-01",
)
NOT_FOUND = ProblemKind(
    slug="not-found",
    title="Not Found",
    detail="The requested resource was not found",
    status=HTTPStatus.NOT_FOUND,
    code="404-01",
)
RESOURCE_EXISTS = ProblemKind(
    slug="resource-exists",
    title="Resource Exists",
    detail="A resource already exists with the specified identifier",
    status=HTTPStatus.CONFLICT,
    code="409-01",
)
REQUEST_TOO_LARGE = ProblemKind(
    slug="request-too-large",
    title="Request Too Large",
    detail="The request body exceeds the maximum allowed size",
    status=HTTPStatus.REQUEST_ENTITY_TOO_LARGE,
    code="413-01",
)
BUSINESS_RULE_VIOLATION = ProblemKind(
    slug="business-rule-violation",
    title="Business Rule Violation",
    detail="The request data violated one or more business rules",
    status=HTTPStatus.UNPROCESSABLE_ENTITY,
    code="422-01",
)
CONSTRAINT_VIOLATION = ProblemKind(
    slug="constraint-violation",
    title="Constraint Violation",
    detail="The request data violated one or more validation constraints",
    status=HTTPStatus.UNPROCESSABLE_ENTITY,
    code="422-02",
)
SERVER_ERROR = ProblemKind(
    slug="server-error",
    title="Server Error",
    detail="The server encountered an unexpected internal error",
    status=HTTPStatus.INTERNAL_SERVER_ERROR,
    code="500-01",
)


class ProblemCatalog:
    """Builds canonical problems whose type points at a documentation location."""

    def __init__(self, documentation_location: str = DEFAULT_ERROR_DOCUMENTATION_LOCATION) -> None:
        self.documentation_location = documentation_location

    def type_location(self, slug: str) -> str:
        """Return the documentation URI for the problem *slug*."""
        return f"{self.documentation_location}{slug}.md"

    def build(self, kind: ProblemKind, request: HTTPConnection, **extensions: object) -> DetailedError:
        """Create the problem described by *kind* for the given request."""
        return DetailedError(
            type=self.type_location(kind.slug),
            title=kind.title,
            detail=kind.detail.format(method=_method(request)),
            status=int(kind.status),
            code=kind.code,
            instance=request.url.path,
            extension_members=extensions,
        )

    def bad_request(self, request: HTTPConnection) -> DetailedError:
        return self.build(BAD_REQUEST, request)

    def bad_parameters(self, request: HTTPConnection, *parameters: Parameter) -> DetailedError:
        return self.build(BAD_PARAMETERS, request, violations=list(parameters))

    def unauthorized(self, request: HTTPConnection) -> DetailedError:
        return self.build(UNAUTHORIZED, request)

    def forbidden(self, request: HTTPConnection) -> DetailedError:
        return self.build(FORBIDDEN, request)

    def not_found(self, request: HTTPConnection) -> DetailedError:
        return self.build(NOT_FOUND, request)

    def resource_exists(self, request: HTTPConnection) -> DetailedError:
        return self.build(RESOURCE_EXISTS, request)

    def request_too_large(self, request: HTTPConnection) -> DetailedError:
        return self.build(REQUEST_TOO_LARGE, request)

    def business_rule_violation(self, request: HTTPConnection, *properties: Property) -> DetailedError:
        return self.build(BUSINESS_RULE_VIOLATION, request, violations=list(properties))

    def constraint_violation(self, request: HTTPConnection, *properties: Property) -> DetailedError:
        return self.build(CONSTRAINT_VIOLATION, request, violations=list(properties))

    def server_error(self, request: HTTPConnection) -> DetailedError:
        return self.build(SERVER_ERROR, request)

    def from_status(self, request: HTTPConnection, status: int, detail: str | None = None) -> DetailedError:
        """Map a transport status code to the closest catalog problem."""
        builder = _STATUS_BUILDERS.get(status)
        if builder is not None:
            problem = builder(self, request)
            return problem.with_detail(detail) if detail else problem

        try:
            phrase = HTTPStatus(status).phrase
        except ValueError:
            phrase = "Error"
        return DetailedError(
            type=BLANK_TYPE,
            title=phrase,
            detail=detail or phrase,
            status=status,
            code=f"{status}-00",
            instance=request.url.path,
        )


_STATUS_BUILDERS = {
    HTTPStatus.BAD_REQUEST: ProblemCatalog.bad_request,
    HTTPStatus.UNAUTHORIZED: ProblemCatalog.unauthorized,
    HTTPStatus.FORBIDDEN: ProblemCatalog.forbidden,
    HTTPStatus.NOT_FOUND: ProblemCatalog.not_found,
    HTTPStatus.CONFLICT: ProblemCatalog.resource_exists,
    HTTPStatus.REQUEST_ENTITY_TOO_LARGE: ProblemCatalog.request_too_large,
    HTTPStatus.INTERNAL_SERVER_ERROR: ProblemCatalog.server_error,
}


def _method(request: HTTPConnection) -> str:
    return request.scope.get("method", "")


@lru_cache(maxsize=1)
def default_catalog() -> ProblemCatalog:
    """Return the catalog configured from the environment settings."""
    return ProblemCatalog(get_settings().error_documentation_location)


def bad_request(request: HTTPConnection) -> DetailedError:
    """Create a problem for a malformed request."""
    return default_catalog().bad_request(request)


def bad_parameters(request: HTTPConnection, *parameters: Parameter) -> DetailedError:
    """Create a problem for request parameters that could not be bound."""
    return default_catalog().bad_parameters(request, *parameters)


def unauthorized(request: HTTPConnection) -> DetailedError:
    """Create a problem for an unauthenticated request."""
    return default_catalog().unauthorized(request)


def forbidden(request: HTTPConnection) -> DetailedError:
    """Create a problem for a request lacking permissions."""
    return default_catalog().forbidden(request)


def not_found(request: HTTPConnection) -> DetailedError:
    """Create a problem for a missing resource."""
    return default_catalog().not_found(request)


def resource_exists(request: HTTPConnection) -> DetailedError:
    """Create a problem for a duplicate resource."""
    return default_catalog().resource_exists(request)


def request_too_large(request: HTTPConnection) -> DetailedError:
    """Create a problem for an oversized request body."""
    return default_catalog().request_too_large(request)


def business_rule_violation(request: HTTPConnection, *properties: Property) -> DetailedError:
    """Create a problem for data that breaks business rules."""
    return default_catalog().business_rule_violation(request, *properties)


def constraint_violation(request: HTTPConnection, *properties: Property) -> DetailedError:
    """Create a problem for data that fails validation constraints."""
    return default_catalog().constraint_violation(request, *properties)


def server_error(request: HTTPConnection) -> DetailedError:
    """Create a problem for an unexpected internal error."""
    return default_catalog().server_error(request)
