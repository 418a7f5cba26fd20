"""HTTP client for JSON APIs that answer errors with problem details."""

from __future__ import annotations

from collections.abc import Mapping
import json
from typing import Any

from fastapi.encoders import jsonable_encoder
from pydantic import TypeAdapter
from pydantic import ValidationError
import requests

from endpointkit.problem.details import DetailedError

JSON_CONTENT_TYPE = "application/json; charset=utf-8"


class ClientError(RuntimeError):
    """Base error raised by client operations."""


class ClientRequestError(ClientError):
    """Raised when a request could not be sent or no response was received."""


class ClientResponseError(ClientError):
    """Raised when a response body cannot be decoded."""


class Result:
    """Response wrapper with helpers for decoding data and problems."""

    def __init__(self, response: requests.Response) -> None:
        self.response = response

    @property
    def status_code(self) -> int:
        return self.response.status_code

    @property
    def headers(self) -> Mapping[str, str]:
        return self.response.headers

    def is_success(self) -> bool:
        return 200 <= self.status_code < 300

    def is_error(self) -> bool:
        return self.status_code >= 400

    def decode(self, into: Any = None) -> Any:
        """Decode the JSON body, validating it against *into* when given."""
        content = self.response.content
        try:
            if into is None:
                return json.loads(content)
            return TypeAdapter(into).validate_json(content)
        except (ValueError, ValidationError) as exc:
            raise ClientResponseError(f"decoding response body as JSON: {exc}") from exc

    def as_problem(self) -> DetailedError:
        """Decode the body as problem details."""
        try:
            return DetailedError.from_json(self.response.content)
        except ValueError as exc:
            raise ClientResponseError(f"decoding response body as problem details: {exc}") from exc


class Client:
    """Send JSON requests relative to a base URL."""

    def __init__(
        self,
        base_url: str = "",
        *,
        timeout_seconds: float = 60.0,
        headers: Mapping[str, str] | None = None,
        session: requests.Session | None = None,
    ) -> None:
        if timeout_seconds <= 0:
            raise ValueError("timeout_seconds must be positive")

        self._base_url = base_url.rstrip("/")
        self._timeout_seconds = timeout_seconds
        self._headers = dict(headers or {})
        self._session = session or requests.Session()

    @property
    def base_url(self) -> str:
        return self._base_url

    def close(self) -> None:
        """Release pooled connections held by the session."""
        self._session.close()

    def __enter__(self) -> Client:
        return self

    def __exit__(self, *_: object) -> None:
        self.close()

    def get(self, path: str, **options: Any) -> Result:
        return self.request("GET", path, **options)

    def post(self, path: str, body: Any = None, **options: Any) -> Result:
        return self.request("POST", path, body, **options)

    def put(self, path: str, body: Any = None, **options: Any) -> Result:
        return self.request("PUT", path, body, **options)

    def patch(self, path: str, body: Any = None, **options: Any) -> Result:
        return self.request("PATCH", path, body, **options)

    def delete(self, path: str, **options: Any) -> Result:
        return self.request("DELETE", path, **options)

    def request(
        self,
        method: str,
        path: str,
        body: Any = None,
        *,
        params: Mapping[str, Any] | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> Result:
        """Send a request and wrap the response, whatever its status."""
        url = f"{self._base_url}/{path.lstrip('/')}" if self._base_url else path
        data = None
        if body is not None:
            data = body if isinstance(body, (bytes, str)) else json.dumps(jsonable_encoder(body))

        try:
            response = self._session.request(
                method,
                url,
                data=data,
                params=params,
                headers=self._request_headers(headers),
                timeout=self._timeout_seconds,
            )
        except requests.RequestException as exc:
            raise ClientRequestError(f"executing {method} {url}: {exc}") from exc

        return Result(response)

    def _request_headers(self, extra: Mapping[str, str] | None) -> dict[str, str]:
        headers = {
            "Accept": JSON_CONTENT_TYPE,
            "Content-Type": JSON_CONTENT_TYPE,
        }
        headers.update(self._headers)
        if extra:
            headers.update(extra)
        return headers
