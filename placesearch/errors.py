"""Exception taxonomy for the place search front end."""
from __future__ import annotations


class PlaceSearchError(Exception):
    """Base class for errors raised by this package."""


class ConfigurationError(PlaceSearchError):
    """Startup misconfiguration, e.g. a missing endpoint or credential."""


class FetchError(PlaceSearchError):
    """A single place-search request did not produce a usable result."""

    def __init__(self, reason: str) -> None:
        super().__init__(reason)
        self.reason = reason


class TransportError(FetchError):
    """Network, DNS or timeout failure before a response arrived."""


class ServerError(FetchError):
    """Non-2xx response, or a body that does not match the expected schema."""

    def __init__(self, reason: str, status_code: int | None = None) -> None:
        super().__init__(reason)
        self.status_code = status_code
