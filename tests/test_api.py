"""
HTTP contract tests for the medicine endpoints.

The search service is swapped in through FastAPI dependency overrides, so no
database is touched.
"""

import inspect

import pytest
from fastapi.testclient import TestClient

from src.api.app import app
from src.api.routers.medicines import (
    get_search_service,
    list_medicines,
    search_medicines,
    suggest_medicines,
)
from src.search import MedicineSearchService

from tests.factories import SpyStore, med


@pytest.fixture
def client(service):
    app.dependency_overrides[get_search_service] = lambda: service
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def failing_client(catalog, config):
    broken = MedicineSearchService(store=SpyStore(catalog, fail_on_call=1), config=config)
    app.dependency_overrides[get_search_service] = lambda: broken
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_list_all(client, catalog):
    response = client.get("/medicines")
    assert response.status_code == 200
    data = response.json()["data"]
    assert [m["name"] for m in data] == sorted(m.name for m in catalog)
    assert set(data[0]) == {"id", "name", "type", "price", "created_at", "updated_at"}


class TestSearchEndpoint:

    def test_ranked(self, client):
        response = client.get("/medicines/search", params={"query": "aspirin"})
        assert response.status_code == 200
        body = response.json()
        assert [m["name"] for m in body["data"]] == ["Aspirin", "Aspirin Plus", "Baby Aspirin"]
        assert body["message"] == 'Showing top 3 relevant results for "aspirin"'

    @pytest.mark.parametrize("params", [{}, {"query": ""}, {"query": "   "}])
    def test_empty_query_shows_popular(self, client, params):
        response = client.get("/medicines/search", params=params)
        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "Showing popular medicines"
        assert len(body["data"]) == 7

    def test_no_matches(self, client):
        body = client.get("/medicines/search", params={"query": "xyz"}).json()
        assert body == {"data": [], "message": 'No matches found for "xyz"'}

    def test_store_failure_is_500(self, failing_client):
        response = failing_client.get("/medicines/search", params={"query": "aspirin"})
        assert response.status_code == 500
        assert response.json()["detail"].startswith("Search failed:")


class TestSuggestEndpoint:

    def test_reduced_projection(self, client):
        response = client.get("/medicines/suggest/asp")
        assert response.status_code == 200
        suggestions = response.json()["suggestions"]
        assert [s["name"] for s in suggestions] == ["Aspirin", "Aspirin Plus", "Baby Aspirin"]
        assert all(set(s) == {"id", "name", "type", "price"} for s in suggestions)

    def test_capped_at_ten(self, client, spy_store):
        spy_store.upsert([med(f"Parol {i:02d}") for i in range(15)])
        suggestions = client.get("/medicines/suggest/par").json()["suggestions"]
        assert len(suggestions) == 10
        assert len({s["id"] for s in suggestions}) == 10

    @pytest.mark.parametrize("path", ["/medicines/suggest/%20", "/medicines/suggest/", "/medicines/suggest"])
    def test_empty_term_is_400(self, client, spy_store, path):
        response = client.get(path)
        assert response.status_code == 400
        assert response.json() == {"detail": "Search term is required"}
        assert spy_store.calls == []

    def test_store_failure_is_500(self, failing_client):
        response = failing_client.get("/medicines/suggest/par")
        assert response.status_code == 500
        assert response.json()["detail"].startswith("Suggestion failed:")


def test_cors_headers(client):
    response = client.get("/medicines", headers={"Origin": "https://pharmacy.example"})
    assert response.headers["access-control-allow-origin"] == "*"


def test_openapi_lists_medicine_routes(client):
    schema = client.get("/openapi.json").json()
    assert "/medicines/search" in schema["paths"]
    assert "/medicines/suggest/{term}" in schema["paths"]


@pytest.mark.parametrize(
    "handler", [list_medicines, search_medicines, suggest_medicines]
)
def test_store_backed_handlers_run_in_threadpool(handler):
    # FastAPI runs plain def endpoints in a worker thread, off the event loop
    assert not inspect.iscoroutinefunction(handler)
