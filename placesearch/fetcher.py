"""Single-attempt place search against the remote API."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Protocol

import httpx
from pydantic import ValidationError

from .config import Settings
from .errors import FetchError, ServerError, TransportError
from .models import PlaceRecord, PlaceSearchResponse

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FetchResult:
    """Outcome of one request: either ``records`` or ``error`` is meaningful."""

    records: tuple[PlaceRecord, ...] = ()
    error: FetchError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, records: list[PlaceRecord]) -> "FetchResult":
        return cls(records=tuple(records))

    @classmethod
    def failure(cls, error: FetchError) -> "FetchResult":
        return cls(error=error)


class Fetcher(Protocol):
    async def fetch(self, query: str, fetch_limit: int) -> FetchResult: ...


class PlaceFetcher:
    """Issues exactly one GET per call and never raises past ``fetch``."""

    def __init__(self, client: httpx.AsyncClient, settings: Settings) -> None:
        self._client = client
        self._url = settings.api_base_url
        self._headers = {
            settings.api_key_header: settings.api_key,
            settings.api_host_header: settings.api_host,
        }

    async def fetch(self, query: str, fetch_limit: int) -> FetchResult:
        params = {"namePrefix": query, "limit": fetch_limit}
        try:
            response = await self._client.get(self._url, params=params, headers=self._headers)
        # InvalidURL (e.g. an oversized query) and header encoding errors are not HTTPError subclasses.
        except (httpx.HTTPError, httpx.InvalidURL, ValueError) as exc:
            return FetchResult.failure(TransportError(f"{type(exc).__name__}: {exc}"))

        if not response.is_success:
            return FetchResult.failure(
                ServerError(f"Unexpected status {response.status_code}", status_code=response.status_code)
            )

        try:
            payload = PlaceSearchResponse.model_validate(response.json())
        except (ValueError, ValidationError) as exc:
            logger.debug("Rejected response body for %r: %s", query, exc)
            return FetchResult.failure(
                ServerError("Response body does not match the expected schema", status_code=response.status_code)
            )
        return FetchResult.success(payload.data)
