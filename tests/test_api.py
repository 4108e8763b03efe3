"""HTTP surface exposing the controller."""

import httpx
import pytest
from fastapi.testclient import TestClient

from placesearch import main
from placesearch.config import Settings

PLACES = [
    {"id": idx, "name": f"London {idx}", "country": "United Kingdom", "countryCode": "GB"}
    for idx in range(1, 9)
]


@pytest.fixture
def upstream():
    state = {"status": 200, "requests": []}

    def handler(request: httpx.Request) -> httpx.Response:
        state["requests"].append(request)
        if state["status"] != 200:
            return httpx.Response(state["status"], json={"message": "upstream failure"})
        return httpx.Response(200, json={"data": PLACES})

    state["handler"] = handler
    return state


@pytest.fixture
def api(monkeypatch, upstream):
    test_settings = Settings(
        api_base_url="https://geo.example.test/v1/geo/cities",
        api_key="secret-key",
        debounce_ms=60_000,
        min_query_length=3,
        default_fetch_limit=5,
        default_page_size=3,
    )
    monkeypatch.setattr(main, "settings", test_settings)
    monkeypatch.setattr(
        main,
        "create_client",
        lambda config: httpx.AsyncClient(transport=httpx.MockTransport(upstream["handler"])),
    )
    with TestClient(main.app) as client:
        yield client


def test_state_before_startup_is_unavailable():
    client = TestClient(main.app)
    response = client.get("/state")
    assert response.status_code == 503


def test_health(api):
    response = api.get("/health")
    assert response.status_code == 200
    assert response.json()["controller"] is True


def test_initial_state(api):
    body = api.get("/state").json()
    assert body["query"] == ""
    assert body["message"] == "Start searching"
    assert body["page_view"]["total_pages"] == 1
    assert body["request_state"] == "idle"


def test_query_then_search_populates_first_page(api, upstream):
    body = api.post("/query", json={"text": "lon"}).json()
    assert body["request_state"] == "debouncing"
    assert upstream["requests"] == []

    body = api.post("/search").json()

    assert len(upstream["requests"]) == 1
    assert upstream["requests"][0].url.params["namePrefix"] == "lon"
    assert upstream["requests"][0].url.params["limit"] == "5"
    assert body["request_state"] == "settled"
    assert body["loading"] is False
    assert body["page_view"]["total_pages"] == 3
    assert [item["name"] for item in body["page_view"]["items"]] == ["London 1", "London 2", "London 3"]


def test_page_size_and_page_changes_do_not_fetch(api, upstream):
    """Pagination endpoints only re-slice the cached set."""
    api.post("/query", json={"text": "lon"})
    api.post("/search")

    body = api.post("/page-size", json={"value": 4}).json()
    assert body["page_view"]["total_pages"] == 2

    body = api.post("/page", json={"page": 2}).json()
    assert body["page_view"]["page_number"] == 2
    assert body["page_view"]["items"][0]["name"] == "London 5"
    assert len(upstream["requests"]) == 1


def test_fetch_limit_change_is_applied(api, upstream):
    api.post("/query", json={"text": "lon"})
    body = api.post("/fetch-limit", json={"value": 8}).json()
    assert body["fetch_limit"] == 8

    api.post("/search")
    assert upstream["requests"][-1].url.params["limit"] == "8"

    body = api.post("/fetch-limit", json={"value": 42}).json()
    assert body["fetch_limit"] == 8


def test_upstream_failure_is_reported(api, upstream):
    upstream["status"] = 502
    api.post("/query", json={"text": "lon"})

    body = api.post("/search").json()

    assert body["request_state"] == "failed"
    assert body["error"] == "Failed to fetch data"
    assert body["loading"] is False
    assert body["page_view"]["items"] == []
