"""FastAPI application exposing the search controller to UI glue."""
from __future__ import annotations

import logging

import httpx
from fastapi import Depends, FastAPI, HTTPException

from .config import settings
from .controller import QueryController
from .fetcher import PlaceFetcher
from .http_client import create_client
from .logs import configure_logging
from .models import NumberChange, PageRequest, QueryChange, SearchSnapshot

configure_logging(settings.log_level)

logger = logging.getLogger(__name__)
logger.info("Logging configured at %s", settings.log_level.upper())

app = FastAPI(title="Place Search")

# One search session per process, matching the single search field it serves.
_client: httpx.AsyncClient | None = None
_controller: QueryController | None = None


@app.on_event("startup")
async def startup_event() -> None:
    global _client, _controller
    settings.require_api()
    _client = create_client(settings)
    _controller = QueryController.from_settings(PlaceFetcher(_client, settings), settings)
    logger.info(
        "Controller ready: debounce=%sms min_length=%s fetch_limit=%s page_size=%s",
        settings.debounce_ms,
        settings.min_query_length,
        settings.default_fetch_limit,
        settings.default_page_size,
    )


@app.on_event("shutdown")
async def shutdown_event() -> None:
    global _client, _controller
    if _controller is not None:
        await _controller.aclose()
        _controller = None
    if _client is not None:
        await _client.aclose()
        _client = None


def get_controller() -> QueryController:
    if _controller is None:
        raise HTTPException(status_code=503, detail="Search controller is not initialised")
    return _controller


@app.get("/health")
async def health() -> dict:
    return {
        "status": "ok",
        "endpoint": settings.api_base_url,
        "controller": _controller is not None,
    }


@app.get("/state", response_model=SearchSnapshot)
async def state(controller: QueryController = Depends(get_controller)) -> SearchSnapshot:
    return controller.snapshot()


@app.post("/query", response_model=SearchSnapshot)
async def change_query(body: QueryChange, controller: QueryController = Depends(get_controller)) -> SearchSnapshot:
    controller.on_query_change(body.text)
    return controller.snapshot()


@app.post("/fetch-limit", response_model=SearchSnapshot)
async def change_fetch_limit(
    body: NumberChange, controller: QueryController = Depends(get_controller)
) -> SearchSnapshot:
    controller.on_fetch_limit_change(body.value)
    return controller.snapshot()


@app.post("/page-size", response_model=SearchSnapshot)
async def change_page_size(
    body: NumberChange, controller: QueryController = Depends(get_controller)
) -> SearchSnapshot:
    controller.on_page_size_change(body.value)
    return controller.snapshot()


@app.post("/page", response_model=SearchSnapshot)
async def change_page(body: PageRequest, controller: QueryController = Depends(get_controller)) -> SearchSnapshot:
    controller.on_page_request(body.page)
    return controller.snapshot()


@app.post("/search", response_model=SearchSnapshot)
async def search_now(controller: QueryController = Depends(get_controller)) -> SearchSnapshot:
    return await controller.submit()
