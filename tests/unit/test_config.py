"""Unit tests for environment-backed settings."""

from __future__ import annotations

import pytest

from endpointkit.core.config import DEFAULT_ERROR_DOCUMENTATION_LOCATION
from endpointkit.core.config import DEFAULT_MAX_BODY_SIZE
from endpointkit.core.config import get_settings


def test_defaults_apply_without_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("ENDPOINTKIT_ERROR_DOCUMENTATION_LOCATION", raising=False)
    monkeypatch.delenv("ENDPOINTKIT_MAX_BODY_SIZE", raising=False)

    settings = get_settings()

    assert settings.error_documentation_location == DEFAULT_ERROR_DOCUMENTATION_LOCATION
    assert settings.max_body_size == DEFAULT_MAX_BODY_SIZE == 5 * 1024 * 1024


def test_environment_overrides_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ENDPOINTKIT_ERROR_DOCUMENTATION_LOCATION", "https://docs.example.test/")
    monkeypatch.setenv("ENDPOINTKIT_MAX_BODY_SIZE", "2048")

    settings = get_settings()

    assert settings.safe_for_logging() == {
        "error_documentation_location": "https://docs.example.test/",
        "max_body_size": 2048,
    }
    assert get_settings() is settings
