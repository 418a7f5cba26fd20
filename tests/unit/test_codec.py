"""Unit tests for the JSON server codec."""

from __future__ import annotations

import json
import logging

import pytest

from endpointkit.codec import JSONServerCodec
from endpointkit.problem.constructors import ProblemCatalog
from endpointkit.problem.testing import new_request
from endpointkit.responses import Response
from endpointkit.responses import accepted

DOCS = "https://docs.example.test/problems/"


@pytest.fixture
def codec() -> JSONServerCodec:
    return JSONServerCodec(ProblemCatalog(DOCS))


def test_encode_writes_json_data(codec: JSONServerCodec) -> None:
    response = codec.encode(new_request("/jobs"), accepted({"id": 3}))

    assert response.status_code == 202
    assert response.media_type == "application/json"
    assert json.loads(response.body) == {"id": 3}


def test_encode_without_data_writes_empty_body(codec: JSONServerCodec) -> None:
    assert codec.encode(new_request("/jobs"), Response(status=418)).body == b""
    assert codec.encode(new_request("/jobs"), None).status_code == 200


def test_unencodable_data_becomes_server_error(codec: JSONServerCodec, caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.ERROR):
        response = codec.encode(new_request("/jobs"), Response(status=200, data={"ratio": float("inf")}))

    assert response.status_code == 500
    assert json.loads(response.body)["code"] == "500-01"
    assert "failed to encode response data" in caplog.text


def test_unmarshalable_problem_falls_back_to_server_error(codec: JSONServerCodec) -> None:
    request = new_request("/jobs")
    problem = codec.catalog.bad_request(request).with_extension("handle", object())

    response = codec.encode_error(request, problem)

    assert response.status_code == 500
    assert response.media_type == "application/problem+json"
    assert json.loads(response.body)["type"] == f"{DOCS}server-error.md"
