"""Library configuration helpers."""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
import os

DEFAULT_ERROR_DOCUMENTATION_LOCATION = "https://github.com/endpointkit/endpointkit/blob/main/docs/problems/"
DEFAULT_MAX_BODY_SIZE = 5 * 1024 * 1024


def _get_int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None:
        return default
    return int(raw)


@dataclass(frozen=True)
class Settings:
    """Runtime settings shared by the server and the problem catalog."""

    error_documentation_location: str = DEFAULT_ERROR_DOCUMENTATION_LOCATION
    max_body_size: int = DEFAULT_MAX_BODY_SIZE

    def safe_for_logging(self) -> dict[str, str | int]:
        """Return settings safe for logs."""
        return {
            "error_documentation_location": self.error_documentation_location,
            "max_body_size": self.max_body_size,
        }


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Load settings from the environment."""
    return Settings(
        error_documentation_location=os.getenv(
            "ENDPOINTKIT_ERROR_DOCUMENTATION_LOCATION",
            DEFAULT_ERROR_DOCUMENTATION_LOCATION,
        ),
        max_body_size=_get_int_env("ENDPOINTKIT_MAX_BODY_SIZE", DEFAULT_MAX_BODY_SIZE),
    )
