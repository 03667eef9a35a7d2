"""HTTP API поверх снимка."""
import pytest
from fastapi.testclient import TestClient

from apartments_sync.api.app import create_app
from apartments_sync.pipeline import Pipeline
from apartments_sync.scraper.errors import CatalogUnavailableError

from conftest import make_record

SNAPSHOT = [
    make_record(project="Kalnciema", plan="K-2", rooms_count=2, price=150000.0, sq_meters=60.0),
    make_record(project="Kalnciema", plan="K-3", rooms_count=3, price=210000.0, sq_meters=82.0),
    make_record(project="Lucavsala", plan="L-2", rooms_count=2, price=99000.0, sq_meters=48.0),
]


@pytest.fixture
def scraped():
    """Что вернёт следующий сбор: список записей или исключение."""
    return {"result": list(SNAPSHOT)}


@pytest.fixture
def pipeline(settings, scraped):
    async def scrape(settings, cancel_event):
        if isinstance(scraped["result"], Exception):
            raise scraped["result"]
        return scraped["result"]

    return Pipeline(settings=settings, scrape=scrape)


@pytest.fixture
def client(pipeline):
    with TestClient(create_app(pipeline)) as test_client:
        yield test_client


@pytest.fixture
def synced_client(client, pipeline):
    pipeline.db.listings.replace_all(SNAPSHOT)
    return client


def test_health_on_empty_database(client):
    response = client.get("/health")

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "ok"
    assert body["listings"] == 0
    assert body["last_synced_at"] is None
    assert body["sync_running"] is False


def test_listings_returns_snapshot(synced_client):
    response = synced_client.get("/api/listings")

    assert response.status_code == 200
    assert [item["plan"] for item in response.json()] == ["K-2", "K-3", "L-2"]


def test_listings_filters(synced_client):
    by_rooms = synced_client.get("/api/listings", params={"rooms_count": 2}).json()
    by_project = synced_client.get("/api/listings", params={"project_name": "Kalnciema"}).json()
    all_projects = synced_client.get("/api/listings", params={"project_name": "all"}).json()

    assert [item["plan"] for item in by_rooms] == ["K-2", "L-2"]
    assert [item["plan"] for item in by_project] == ["K-2", "K-3"]
    assert len(all_projects) == 3


def test_listings_sorting(synced_client):
    by_price = synced_client.get("/api/listings", params={"sort_by": "price"}).json()
    by_area = synced_client.get(
        "/api/listings", params={"sort_by": "sq_meters", "sort_order": "desc"}
    ).json()

    assert [item["plan"] for item in by_price] == ["L-2", "K-2", "K-3"]
    assert [item["plan"] for item in by_area] == ["K-3", "K-2", "L-2"]


def test_listings_reject_unknown_sort(synced_client):
    response = synced_client.get("/api/listings", params={"sort_by": "floor"})

    assert response.status_code == 400


def test_projects(synced_client):
    assert synced_client.get("/api/projects").json() == ["Kalnciema", "Lucavsala"]


def test_stats(synced_client):
    body = synced_client.get("/api/stats").json()

    assert body["listings_count"] == 3
    assert body["projects_count"] == 2
    assert body["last_sync"] is None
    assert body["sync_running"] is False


def test_sync_endpoint_replaces_snapshot(client, scraped):
    scraped["result"] = [make_record(plan="N-1")]

    response = client.post("/api/actions/sync")

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "ok"
    assert body["records_saved"] == 1
    assert [item["plan"] for item in client.get("/api/listings").json()] == ["N-1"]
    assert client.get("/api/stats").json()["last_sync"]["success"] is True


def test_sync_endpoint_reports_failure(synced_client, scraped):
    scraped["result"] = CatalogUnavailableError("grid missing")

    body = synced_client.post("/api/actions/sync").json()

    assert body["status"] == "error"
    assert len(synced_client.get("/api/listings").json()) == 3


def test_sync_endpoint_conflict_while_running(client, pipeline, monkeypatch):
    monkeypatch.setattr(pipeline.sync._lock, "locked", lambda: True)

    response = client.post("/api/actions/sync")

    assert response.status_code == 409
