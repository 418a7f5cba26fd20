"""Unit tests for the JSON API client."""

from __future__ import annotations

from collections.abc import Callable
from datetime import date
import json
from typing import Any

from pydantic import BaseModel
import pytest
import requests

from endpointkit.client import Client
from endpointkit.client import ClientRequestError
from endpointkit.client import ClientResponseError
from endpointkit.problem.details import DetailedError


def _response(status_code: int, body: bytes) -> requests.Response:
    response = requests.Response()
    response.status_code = status_code
    response._content = body
    return response


class _SessionStub:
    def __init__(self, request_fn: Callable[..., requests.Response]) -> None:
        self._request_fn = request_fn
        self.calls: list[dict[str, Any]] = []
        self.closed = False

    def request(self, method: str, url: str, **kwargs: Any) -> requests.Response:
        self.calls.append({"method": method, "url": url, **kwargs})
        return self._request_fn(method=method, url=url, **kwargs)

    def close(self) -> None:
        self.closed = True


class _Widget(BaseModel):
    name: str
    size: int


def test_post_encodes_body_and_sets_json_headers() -> None:
    session = _SessionStub(lambda **_: _response(201, b'{"name":"bolt","size":3}'))
    client = Client(
        "https://api.example.test/",
        timeout_seconds=4.0,
        headers={"Authorization": "Bearer t"},
        session=session,  # type: ignore[arg-type]
    )

    result = client.post("/widgets", {"name": "bolt", "size": 3, "made": date(2024, 5, 1)})

    call = session.calls[0]
    assert call["method"] == "POST"
    assert call["url"] == "https://api.example.test/widgets"
    assert json.loads(call["data"]) == {"name": "bolt", "size": 3, "made": "2024-05-01"}
    assert call["headers"]["Accept"].startswith("application/json")
    assert call["headers"]["Content-Type"].startswith("application/json")
    assert call["headers"]["Authorization"] == "Bearer t"
    assert call["timeout"] == 4.0
    assert result.is_success()
    assert result.decode(_Widget) == _Widget(name="bolt", size=3)


def test_get_sends_no_body_and_passes_params() -> None:
    session = _SessionStub(lambda **_: _response(200, b"[1,2]"))
    client = Client("https://api.example.test", session=session)  # type: ignore[arg-type]

    result = client.get("widgets", params={"page": 2})

    assert session.calls[0]["data"] is None
    assert session.calls[0]["params"] == {"page": 2}
    assert result.decode() == [1, 2]
    assert result.decode(list[int]) == [1, 2]


def test_error_responses_decode_as_problems() -> None:
    body = (
        b'{"code":"404-01","detail":"The requested resource was not found","instance":"/widgets/9",'
        b'"status":404,"title":"Not Found","trace":"abc","type":"about:blank"}'
    )
    client = Client(session=_SessionStub(lambda **_: _response(404, body)))  # type: ignore[arg-type]

    result = client.delete("/widgets/9")

    assert result.is_error()
    assert not result.is_success()
    problem = result.as_problem()
    assert isinstance(problem, DetailedError)
    assert problem.code == "404-01"
    assert problem.extension_members == {"trace": "abc"}


def test_undecodable_bodies_raise_response_errors() -> None:
    session = _SessionStub(lambda **_: _response(502, b"<html>bad gateway</html>"))
    client = Client(session=session)  # type: ignore[arg-type]

    result = client.put("/widgets/1", {"name": "bolt"})

    with pytest.raises(ClientResponseError):
        result.decode()
    with pytest.raises(ClientResponseError):
        result.as_problem()


def test_transport_failures_raise_request_errors() -> None:
    def request_fn(**_: Any) -> requests.Response:
        raise requests.ConnectionError("connection refused")

    client = Client("https://api.example.test", session=_SessionStub(request_fn))  # type: ignore[arg-type]

    with pytest.raises(ClientRequestError, match="PATCH https://api.example.test/widgets/1"):
        client.patch("/widgets/1", {"size": 4})


def test_context_manager_closes_session() -> None:
    session = _SessionStub(lambda **_: _response(200, b"{}"))

    with Client(session=session) as client:  # type: ignore[arg-type]
        client.get("/health")

    assert session.closed


def test_timeout_must_be_positive() -> None:
    with pytest.raises(ValueError):
        Client(timeout_seconds=0)
