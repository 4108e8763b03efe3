"""Application configuration and constants."""
from __future__ import annotations

import os
from dataclasses import dataclass

from .errors import ConfigurationError


def _get_env(name: str, default: str) -> str:
    value = os.getenv(name)
    return value if value is not None else default


@dataclass(frozen=True)
class Settings:
    """Simple settings container with environment variable overrides."""

    api_base_url: str = _get_env("API_BASE_URL", "")
    api_key: str = _get_env("API_KEY", "")
    api_host: str = _get_env("API_HOST", "wft-geo-db.p.rapidapi.com")
    api_key_header: str = _get_env("API_KEY_HEADER", "X-RapidAPI-Key")
    api_host_header: str = _get_env("API_HOST_HEADER", "X-RapidAPI-Host")
    debounce_ms: int = int(_get_env("DEBOUNCE_MS", "800"))
    min_query_length: int = int(_get_env("MIN_QUERY_LENGTH", "3"))
    default_fetch_limit: int = int(_get_env("DEFAULT_FETCH_LIMIT", "5"))
    default_page_size: int = int(_get_env("DEFAULT_PAGE_SIZE", "3"))
    request_timeout_seconds: float = float(_get_env("REQUEST_TIMEOUT_SECONDS", "10"))
    log_level: str = _get_env("LOG_LEVEL", "INFO")

    @property
    def debounce_seconds(self) -> float:
        return self.debounce_ms / 1000

    def require_api(self) -> None:
        """Fail fast when the remote endpoint cannot be reached with these settings."""

        missing = [
            name
            for name, value in (("API_BASE_URL", self.api_base_url), ("API_KEY", self.api_key))
            if not value
        ]
        if missing:
            raise ConfigurationError(f"Missing required configuration: {', '.join(missing)}")


settings = Settings()
