"""
API tests using FastAPI's TestClient with the services wired to an in-memory store.
Run: python -m pytest tests/test_api.py
"""

import pytest
from fastapi.testclient import TestClient

import api


@pytest.fixture
def client(store):
    api.init_services(store)
    yield TestClient(api.app)  # no context manager: startup (real redis) is skipped
    api.CATALOG = api.VOCABULARIES = api.INDEX = None


def test_health(client):
    body = client.get("/health").json()
    assert body["status"] == "ok"
    assert body["ready"] is True


def test_ingest_then_read_facets_and_index(client, make_detail):
    resp = client.post("/details", json={"details": [make_detail(mid=1), make_detail(mid=2, area="Japan")]})
    assert resp.status_code == 200
    assert resp.json()["received"] == 2
    assert resp.json()["error"] is None

    facets = client.get("/facets/1").json()["facets"]
    assert set(facets["area"]) == {"USA", "Canada", "Japan"}
    assert facets["sort"] == ["Time", "Db", "Score"]
    assert len(facets["year"]) == 12

    records = client.get("/index/rank/1").json()["records"]
    assert [r["movieId"] for r in records] == [1, 2]


def test_unknown_order_is_404(client):
    assert client.get("/index/popularity/1").status_code == 404


def test_not_ready_is_503():
    api.CATALOG = None
    assert TestClient(api.app).get("/facets/1").status_code == 503
