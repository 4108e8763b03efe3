"""Shared fixtures for the place search tests."""
from __future__ import annotations

import asyncio

import pytest

from placesearch.fetcher import FetchResult
from placesearch.models import PlaceRecord


def _places(prefix: str, count: int) -> list[PlaceRecord]:
    return [
        PlaceRecord(id=idx, name=f"{prefix.title()} {idx}", country="United Kingdom", countryCode="GB")
        for idx in range(1, count + 1)
    ]


class FakeFetcher:
    """Records every call; answers with ``default_count`` places unless told otherwise."""

    def __init__(self, default_count: int = 8) -> None:
        self.calls: list[tuple[str, int]] = []
        self.default_count = default_count
        self.results: dict[tuple[str, int], FetchResult] = {}
        self._gates: dict[tuple[str, int], asyncio.Event] = {}

    def hold(self, query: str, fetch_limit: int) -> asyncio.Event:
        """Block responses for this pair until the returned event is set."""
        gate = asyncio.Event()
        self._gates[(query, fetch_limit)] = gate
        return gate

    async def fetch(self, query: str, fetch_limit: int) -> FetchResult:
        self.calls.append((query, fetch_limit))
        gate = self._gates.get((query, fetch_limit))
        if gate is not None:
            await gate.wait()
        result = self.results.get((query, fetch_limit))
        if result is not None:
            return result
        return FetchResult.success(_places(query, self.default_count))


@pytest.fixture
def make_places():
    return _places


@pytest.fixture
def fetcher() -> FakeFetcher:
    return FakeFetcher()
