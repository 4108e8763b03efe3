"""Pydantic models for remote payloads and the UI-facing snapshot."""
from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class PlaceRecord(BaseModel):
    """One place as returned by the remote search endpoint."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: int | str
    name: str
    country: str
    countryCode: str


class PlaceSearchResponse(BaseModel):
    """Expected body of a successful place-search response."""

    data: list[PlaceRecord]


class RequestState(str, Enum):
    IDLE = "idle"
    DEBOUNCING = "debouncing"
    IN_FLIGHT = "in_flight"
    SETTLED = "settled"
    FAILED = "failed"


class PageView(BaseModel):
    items: list[PlaceRecord]
    page_number: int = Field(..., ge=1, description="1-based page number")
    total_pages: int = Field(..., ge=1)
    start: int = Field(..., ge=0, description="Offset of the first item in the cached set")
    page_size: int = Field(..., ge=1)
    total_items: int = Field(..., ge=0)

    def has_next(self) -> bool:
        return self.page_number < self.total_pages

    def has_prev(self) -> bool:
        return self.page_number > 1


class SearchSnapshot(BaseModel):
    query: str
    fetch_limit: int
    page_size: int
    request_state: RequestState
    loading: bool
    error: str | None = None
    message: str | None = None
    page_view: PageView


class QueryChange(BaseModel):
    text: str = Field(..., description="Current contents of the search field")


class NumberChange(BaseModel):
    value: int


class PageRequest(BaseModel):
    page: int = Field(..., description="1-based page number")
