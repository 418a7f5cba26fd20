"""Binding of query, header and path parameters into pydantic models.

Fields of a params model declare where their value comes from with
``Annotated`` markers::

    class Params(BaseModel):
        page: Annotated[int, QueryParam("page")] = 1
        token: Annotated[str, HeaderParam("Authorization")]
        user_id: Annotated[UUID, PathParam("id")]

A field may carry several markers; the first source holding a value wins.
Missing values fall back to the model defaults, which are not validated.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any
from typing import TypeVar

from pydantic import BaseModel
from pydantic import ValidationError
from starlette.requests import HTTPConnection

from endpointkit.problem.constructors import ProblemCatalog
from endpointkit.problem.constructors import default_catalog
from endpointkit.schemas.problem import Parameter
from endpointkit.schemas.problem import ParameterType

ParamsT = TypeVar("ParamsT", bound=BaseModel)


@dataclass(frozen=True)
class ParamSource:
    """Marker naming the request location and key of a parameter."""

    type: ParameterType
    key: str

    def lookup(self, request: HTTPConnection) -> str | None:
        if self.type is ParameterType.QUERY:
            return request.query_params.get(self.key)
        if self.type is ParameterType.HEADER:
            return request.headers.get(self.key)
        return request.path_params.get(self.key)


def QueryParam(key: str) -> ParamSource:  # noqa: N802
    return ParamSource(ParameterType.QUERY, key)


def HeaderParam(key: str) -> ParamSource:  # noqa: N802
    return ParamSource(ParameterType.HEADER, key)


def PathParam(key: str) -> ParamSource:  # noqa: N802
    return ParamSource(ParameterType.PATH, key)


def ensure_params_model(params_type: Any) -> type[BaseModel]:
    """Raise TypeError unless *params_type* is a pydantic model class."""
    if not (isinstance(params_type, type) and issubclass(params_type, BaseModel)):
        raise TypeError(f"params type must be a pydantic model, got {params_type!r}")
    return params_type


def _sources(params_type: type[BaseModel], name: str) -> list[ParamSource]:
    field = params_type.model_fields[name]
    return [item for item in field.metadata if isinstance(item, ParamSource)]


def bind_parameters(
    request: HTTPConnection,
    params_type: type[ParamsT],
    *,
    catalog: ProblemCatalog | None = None,
) -> ParamsT:
    """Build *params_type* from the request, raising ``bad_parameters`` on failure."""
    ensure_params_model(params_type)
    catalog = catalog or default_catalog()

    raw: dict[str, str] = {}
    resolved: dict[str, ParamSource] = {}
    for name in params_type.model_fields:
        sources = _sources(params_type, name)
        for source in sources:
            value = source.lookup(request)
            if value:
                raw[name] = value
                resolved[name] = source
                break
        else:
            if sources:
                resolved[name] = sources[0]

    try:
        return params_type.model_validate(raw)
    except ValidationError as exc:
        parameters = []
        for issue in exc.errors():
            location = issue.get("loc", ())
            name = str(location[0]) if location else ""
            source = resolved.get(name)
            key = source.key if source else name
            if issue.get("type") == "missing":
                detail = f"{key} is required"
            else:
                detail = str(issue.get("msg", "Invalid value"))
            parameters.append(
                Parameter(
                    detail=detail,
                    parameter=key,
                    type=source.type if source else ParameterType.QUERY,
                )
            )
        raise catalog.bad_parameters(request, *parameters) from exc
