import pytest
from fastapi.testclient import TestClient

from detour.config import settings
from detour.main import create_app
from detour.models.domain import Point, RouteGeometry

PLACES = {
    "Kochi": Point(9.9312, 76.2673),
    "Thrissur": Point(10.5276, 76.2144),
    "Aluva": Point(10.1004, 76.3570),
}


class DummyGeocoder:
    async def geocode(self, address, country_codes=None):
        return PLACES.get(address)

    async def close(self):
        pass


class DummyOSRM:
    fail = False

    async def route(self, waypoints):
        if self.fail:
            return None
        return RouteGeometry(
            geometry={"type": "LineString", "coordinates": [[p.lon, p.lat] for p in waypoints]},
            duration_s=5400.0,
            distance_m=95_500.0,
        )

    async def close(self):
        pass


@pytest.fixture
def api_client(monkeypatch: pytest.MonkeyPatch) -> TestClient:
    from detour.api.routes import routes as routes_module

    DummyOSRM.fail = False
    monkeypatch.setattr(routes_module, "NominatimClient", lambda *args, **kwargs: DummyGeocoder())
    monkeypatch.setattr(routes_module, "OSRMClient", lambda *args, **kwargs: DummyOSRM())
    return TestClient(create_app())


def test_root_and_health(api_client: TestClient):
    assert api_client.get("/").json()["status"] == "running"
    assert api_client.get("/api/health").json() == {"status": "ok"}


def test_osrm_health(api_client: TestClient, monkeypatch: pytest.MonkeyPatch):
    from detour.services.routing import osrm_client as osrm_module

    monkeypatch.setattr(osrm_module, "check_health", lambda *args, **kwargs: True)

    response = api_client.get("/api/health/osrm")

    assert response.status_code == 200
    assert response.json() == {"service": "osrm", "healthy": True}


def test_osrm_health_reports_failure_when_check_raises(
    api_client: TestClient, monkeypatch: pytest.MonkeyPatch
):
    from detour.services.routing import osrm_client as osrm_module

    def broken_check(*args, **kwargs):
        raise RuntimeError("connection pool exhausted")

    monkeypatch.setattr(osrm_module, "check_health", broken_check)

    response = api_client.get("/api/health/osrm")

    assert response.status_code == 200
    assert response.json() == {
        "service": "osrm",
        "healthy": False,
        "error": "connection pool exhausted",
    }


def test_plot_endpoint_returns_route_and_overlays(api_client: TestClient):
    response = api_client.post(
        "/api/routes/plot",
        json={"start": "Kochi", "end": "Thrissur", "avoid": ["Aluva", "", "Atlantis"]},
    )

    assert response.status_code == 200
    payload = response.json()
    assert len(payload["waypoints"]) == 3
    assert payload["waypoints"][0] == {"lat": 9.9312, "lon": 76.2673}
    assert payload["zones"][0]["label"] == "Aluva"
    assert payload["zones"][0]["radius_m"] == settings.clearance_meters
    assert payload["dropped_avoids"] == ["Atlantis"]
    assert payload["summary"]["travel_time_min"] == 90
    assert payload["summary"]["peace_of_mind"] in settings.peace_of_mind_messages
    assert payload["overlays"]["type"] == "FeatureCollection"
    assert len(payload["overlays"]["features"]) == 4


def test_current_route_follows_session(api_client: TestClient):
    assert api_client.get("/api/routes/current").status_code == 404

    api_client.post(
        "/api/routes/plot",
        json={"start": "Kochi", "end": "Thrissur"},
        headers={"X-Session-Id": "alice"},
    )

    assert api_client.get("/api/routes/current", headers={"X-Session-Id": "alice"}).status_code == 200
    assert api_client.get("/api/routes/current", headers={"X-Session-Id": "bob"}).status_code == 404


def test_plot_endpoint_unknown_start(api_client: TestClient):
    response = api_client.post("/api/routes/plot", json={"start": "Atlantis", "end": "Thrissur"})

    assert response.status_code == 422
    assert "Could not find the start or destination" in response.json()["detail"]


def test_plot_endpoint_blank_start(api_client: TestClient):
    response = api_client.post("/api/routes/plot", json={"start": " ", "end": "Thrissur"})

    assert response.status_code == 400


def test_plot_endpoint_route_not_found_clears_display(api_client: TestClient):
    api_client.post("/api/routes/plot", json={"start": "Kochi", "end": "Thrissur"})
    assert api_client.get("/api/routes/current").status_code == 200

    DummyOSRM.fail = True
    response = api_client.post("/api/routes/plot", json={"start": "Kochi", "end": "Thrissur", "avoid": ["Aluva"]})

    assert response.status_code == 422
    assert "Could not find a route" in response.json()["detail"]
    assert api_client.get("/api/routes/current").status_code == 404


def test_plot_endpoint_rejects_negative_clearance(api_client: TestClient):
    response = api_client.post(
        "/api/routes/plot",
        json={"start": "Kochi", "end": "Thrissur", "clearance_meters": -5},
    )

    assert response.status_code == 422
