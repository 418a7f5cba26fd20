"""Shared pytest fixtures for endpointkit test suites."""

from collections.abc import Callable
from collections.abc import Generator
from pathlib import Path
import sys

import pytest
from fastapi.testclient import TestClient

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

DOCS = "https://docs.example.test/problems/"


@pytest.fixture(autouse=True)
def _reset_cached_settings() -> Generator[None, None, None]:
    """Drop settings and catalogs cached from the environment between tests."""
    from endpointkit.core.config import get_settings
    from endpointkit.problem.constructors import default_catalog

    get_settings.cache_clear()
    default_catalog.cache_clear()
    yield
    get_settings.cache_clear()
    default_catalog.cache_clear()


@pytest.fixture
def settings():
    from endpointkit.core.config import Settings

    return Settings(error_documentation_location=DOCS, max_body_size=1024)


@pytest.fixture
def server(settings):
    """Provide a server configured with test settings."""
    from endpointkit.server import Server

    return Server(settings)


@pytest.fixture
def serve(server) -> Generator[Callable[..., TestClient], None, None]:
    """Register endpoints on the shared server and return a test client for it."""
    clients: list[TestClient] = []

    def _serve(*endpoints, raise_server_exceptions: bool = True) -> TestClient:
        server.register(*endpoints)
        test_client = TestClient(server.app, raise_server_exceptions=raise_server_exceptions)
        clients.append(test_client)
        return test_client

    yield _serve
    for test_client in clients:
        test_client.close()
