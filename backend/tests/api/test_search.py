from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from backend.app.api import deps
from backend.app.api.deps import get_catalog, get_search_service
from backend.app.api.main import app
from backend.app.parsers.url_builder import PicknPullCatalog
from backend.app.services.firecrawl_client import FirecrawlRequestError, FirecrawlResult
from backend.app.services.inventory_search import InventorySearchService

FIXTURE_DIR = Path(__file__).parents[1] / "parsers" / "fixtures" / "pick_n_pull"

CATALOG = PicknPullCatalog.from_dict(
    {
        "makes": [
            {"name": "Subaru", "id": 226, "models": [{"name": "Impreza Wagon", "id": 4154}, {"name": "Forester", "id": 4100}]},
            {"name": "Honda", "id": 120, "models": [{"name": "Civic", "id": 1000}]},
        ]
    },
    base_url="https://www.picknpull.com/check-inventory/vehicle-search",
)

SEARCH_BODY = {
    "make": "Subaru",
    "model": "Impreza Wagon",
    "year_min": 2000,
    "year_max": 2006,
    "zip_code": "84104",
}


class FakeFirecrawlClient:
    def __init__(self, outcome):
        self.outcome = outcome
        self.urls = []

    async def fetch(self, url: str) -> FirecrawlResult:
        self.urls.append(url)
        if isinstance(self.outcome, Exception):
            raise self.outcome
        return FirecrawlResult(url=url, markdown=self.outcome, status_code=200, metadata={})


@pytest.fixture
def client():
    app.dependency_overrides[get_catalog] = lambda: CATALOG
    yield TestClient(app)
    app.dependency_overrides.clear()


def _use_firecrawl(outcome) -> FakeFirecrawlClient:
    fake = FakeFirecrawlClient(outcome)
    service = InventorySearchService(firecrawl=fake, catalog=CATALOG)
    app.dependency_overrides[get_search_service] = lambda: service
    return fake


def test_post_search_returns_parsed_vehicles(client):
    _use_firecrawl((FIXTURE_DIR / "search_results.md").read_text(encoding="utf-8"))

    response = client.post("/search", json=SEARCH_BODY)
    assert response.status_code == 200
    data = response.json()
    assert data["success"] is True
    assert data["total_found"] == 3
    assert len(data["vehicles"]) == 3
    assert data["vehicles"][0]["id"] == "2005_subaru_impreza_wagon_132"
    assert data["search_params"]["zip_code"] == "84104"


def test_get_search_accepts_query_parameters(client):
    fake = _use_firecrawl("Latest: 2005 Subaru Impreza Wagon Row 132 Set: 04/02/2025")

    response = client.get("/search", params={**SEARCH_BODY, "distance": 25})
    assert response.status_code == 200
    data = response.json()
    assert data["total_found"] == 1
    assert data["vehicles"][0]["location"] == "Row 132, Unknown Location"
    assert "distance=25" in fake.urls[0]


@pytest.mark.parametrize(
    ("missing", "message"),
    [
        ("make", "Missing 'make' parameter"),
        ("model", "Missing 'model' parameter"),
        ("year_min", "Missing or invalid 'year_min' parameter"),
        ("year_max", "Missing or invalid 'year_max' parameter"),
        ("zip_code", "Missing 'zip_code' parameter"),
    ],
)
def test_get_search_missing_parameter_is_bad_request(client, missing, message):
    fake = _use_firecrawl("")
    params = {k: v for k, v in SEARCH_BODY.items() if k != missing}
    response = client.get("/search", params=params)
    assert response.status_code == 400
    assert response.json() == {"success": False, "error": message}
    assert fake.urls == []


@pytest.mark.parametrize("year_min", ["abc", "-5", "20.5"])
def test_get_search_invalid_year_is_bad_request(client, year_min):
    _use_firecrawl("")
    response = client.get("/search", params={**SEARCH_BODY, "year_min": year_min})
    assert response.status_code == 400
    assert response.json() == {"success": False, "error": "Missing or invalid 'year_min' parameter"}


def test_get_search_ignores_unreadable_distance(client):
    fake = _use_firecrawl("")
    response = client.get("/search", params={**SEARCH_BODY, "distance": "far"})
    assert response.status_code == 200
    assert response.json()["search_params"]["distance"] is None
    assert "distance=50" in fake.urls[0]


def test_post_search_invalid_body_is_bad_request(client):
    _use_firecrawl("")
    body = {k: v for k, v in SEARCH_BODY.items() if k != "zip_code"}
    response = client.post("/search", json=body)
    assert response.status_code == 400
    data = response.json()
    assert data["success"] is False
    assert "zip_code" in data["error"]


def test_inverted_year_range_is_bad_request(client):
    fake = _use_firecrawl("")
    response = client.post("/search", json={**SEARCH_BODY, "year_min": 2010})
    assert response.status_code == 400
    assert response.json() == {"success": False, "error": "year_min cannot be greater than year_max"}
    assert fake.urls == []


def test_unsupported_make_is_bad_request(client):
    _use_firecrawl("")
    response = client.post("/search", json={**SEARCH_BODY, "make": "Yugo"})
    assert response.status_code == 400
    assert response.json()["success"] is False
    assert "Unsupported make" in response.json()["error"]


def test_crawl_failure_is_server_error(client):
    _use_firecrawl(FirecrawlRequestError("Request failed: timed out"))
    response = client.post("/search", json=SEARCH_BODY)
    assert response.status_code == 500
    assert response.json() == {
        "success": False,
        "error": "Failed to crawl webpage: Request failed: timed out",
    }


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert data["service"] == "junkyard-tracker-api"
    assert data["timestamp"]


def test_supported_makes_and_models(client):
    response = client.get("/supported-makes")
    assert response.json() == {"success": True, "makes": ["Subaru", "Honda"]}

    response = client.get("/supported-models", params={"make": "Subaru"})
    assert response.json() == {"success": True, "make": "Subaru", "models": ["Impreza Wagon", "Forester"]}

    response = client.get("/supported-models", params={"make": "Yugo"})
    assert response.json() == {"success": True, "make": "Yugo", "models": []}


def test_supported_models_requires_make(client):
    response = client.get("/supported-models")
    assert response.status_code == 400
    assert response.json() == {"success": False, "error": "Missing 'make' parameter"}


def test_health_timestamp_is_utc_z(client):
    timestamp = client.get("/health").json()["timestamp"]
    assert timestamp.endswith("Z")
    assert "+00:00" not in timestamp


def test_shutdown_closes_shared_search_service(monkeypatch):
    closed = []

    class RecordingService:
        async def aclose(self):
            closed.append(True)

    monkeypatch.setattr(deps, "InventorySearchService", lambda catalog: RecordingService())
    get_search_service.cache_clear()
    get_search_service()

    with TestClient(app):
        pass

    assert closed == [True]
    assert get_search_service.cache_info().currsize == 0


def test_shutdown_without_shared_service_is_noop():
    get_search_service.cache_clear()
    with TestClient(app):
        pass
    assert get_search_service.cache_info().currsize == 0
