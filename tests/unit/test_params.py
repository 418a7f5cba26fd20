"""Unit tests for binding request parameters into pydantic models."""

from __future__ import annotations

from typing import Annotated

from pydantic import BaseModel
import pytest
from starlette.requests import Request

from endpointkit.params import HeaderParam
from endpointkit.params import PathParam
from endpointkit.params import QueryParam
from endpointkit.params import bind_parameters
from endpointkit.params import ensure_params_model
from endpointkit.problem.constructors import ProblemCatalog
from endpointkit.problem.details import DetailedError
from endpointkit.schemas.problem import Parameter
from endpointkit.schemas.problem import ParameterType


class _WidgetParams(BaseModel):
    widget_id: Annotated[int, PathParam("id")]
    token: Annotated[str, HeaderParam("Authorization")]
    page: Annotated[int, QueryParam("page")] = 1
    locale: Annotated[str, QueryParam("lang"), HeaderParam("Accept-Language")] = "en"


def _request(query: bytes = b"", headers: dict[str, str] | None = None, path_params=None) -> Request:
    return Request(
        {
            "type": "http",
            "method": "GET",
            "path": "/widgets/7",
            "root_path": "",
            "scheme": "http",
            "query_string": query,
            "headers": [(k.lower().encode(), v.encode()) for k, v in (headers or {}).items()],
            "path_params": path_params or {},
            "server": ("testserver", 80),
        }
    )


def test_binds_every_source() -> None:
    request = _request(
        b"page=3",
        {"Authorization": "Bearer t", "Accept-Language": "fr"},
        {"id": "7"},
    )

    params = bind_parameters(request, _WidgetParams)

    assert params == _WidgetParams(widget_id=7, token="Bearer t", page=3, locale="fr")


def test_first_source_with_value_wins() -> None:
    request = _request(b"lang=de", {"Authorization": "t", "Accept-Language": "fr"}, {"id": "7"})

    assert bind_parameters(request, _WidgetParams).locale == "de"


def test_missing_optional_values_use_defaults() -> None:
    params = bind_parameters(_request(headers={"Authorization": "t"}, path_params={"id": "1"}), _WidgetParams)

    assert params.page == 1
    assert params.locale == "en"


def test_failures_are_collected_into_bad_parameters() -> None:
    catalog = ProblemCatalog("https://docs.example.test/problems/")
    request = _request(b"page=abc", path_params={"id": "7"})

    with pytest.raises(DetailedError) as exc_info:
        bind_parameters(request, _WidgetParams, catalog=catalog)

    problem = exc_info.value
    assert problem.code == "400-02"
    violations = problem.extension_members["violations"]
    assert Parameter(detail="Authorization is required", parameter="Authorization", type=ParameterType.HEADER) in (
        violations
    )
    assert [v.parameter for v in violations] == ["Authorization", "page"]
    assert violations[1].type is ParameterType.QUERY


def test_non_model_params_type_is_rejected() -> None:
    with pytest.raises(TypeError):
        ensure_params_model(dict)
