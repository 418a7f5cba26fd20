"""Responses returned by guards and actions."""

from __future__ import annotations

from dataclasses import dataclass
from http import HTTPStatus
from typing import Any


@dataclass(frozen=True)
class Response:
    """Status, optional data and optional redirect target to be written."""

    status: int
    data: Any = None
    redirect: str = ""


def ok(data: Any) -> Response:
    """Create a 200 OK response."""
    return Response(status=HTTPStatus.OK, data=data)


def created(data: Any) -> Response:
    """Create a 201 Created response."""
    return Response(status=HTTPStatus.CREATED, data=data)


def accepted(data: Any) -> Response:
    """Create a 202 Accepted response."""
    return Response(status=HTTPStatus.ACCEPTED, data=data)


def no_content() -> Response:
    """Create a 204 No Content response."""
    return Response(status=HTTPStatus.NO_CONTENT)


def redirect(status: int, url: str) -> Response:
    """Create a response redirecting the client to *url*."""
    return Response(status=status, redirect=url)
