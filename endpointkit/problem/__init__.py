"""Problem details (RFC 9457) errors and their canonical constructors."""

from endpointkit.problem.constructors import ProblemCatalog
from endpointkit.problem.constructors import bad_parameters
from endpointkit.problem.constructors import bad_request
from endpointkit.problem.constructors import business_rule_violation
from endpointkit.problem.constructors import constraint_violation
from endpointkit.problem.constructors import default_catalog
from endpointkit.problem.constructors import forbidden
from endpointkit.problem.constructors import not_found
from endpointkit.problem.constructors import request_too_large
from endpointkit.problem.constructors import resource_exists
from endpointkit.problem.constructors import server_error
from endpointkit.problem.constructors import unauthorized
from endpointkit.problem.details import DetailedError
from endpointkit.problem.details import ProblemMarshalError
from endpointkit.problem.details import ProblemUnmarshalError
from endpointkit.schemas.problem import Parameter
from endpointkit.schemas.problem import ParameterType
from endpointkit.schemas.problem import Property

__all__ = [
    "DetailedError",
    "Parameter",
    "ParameterType",
    "ProblemCatalog",
    "ProblemMarshalError",
    "ProblemUnmarshalError",
    "Property",
    "bad_parameters",
    "bad_request",
    "business_rule_violation",
    "constraint_violation",
    "default_catalog",
    "forbidden",
    "not_found",
    "request_too_large",
    "resource_exists",
    "server_error",
    "unauthorized",
]
