"""Helpers for asserting on problems in tests."""

from __future__ import annotations

from starlette.requests import Request


def new_request(instance: str, method: str = "GET") -> Request:
    """Create a request for the given instance path to build expected problems."""
    return Request(
        {
            "type": "http",
            "method": method,
            "path": instance,
            "raw_path": instance.encode("utf-8"),
            "root_path": "",
            "scheme": "http",
            "query_string": b"",
            "headers": [],
            "server": ("testserver", 80),
        }
    )
