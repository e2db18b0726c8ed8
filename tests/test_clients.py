import asyncio

import httpx
import pytest

from detour.models.domain import Point
from detour.services.geocoding.nominatim_client import NominatimClient
from detour.services.routing.osrm_client import OSRMClient, format_coordinates

LINE = {"type": "LineString", "coordinates": [[76.2673, 9.9312], [76.2144, 10.5276]]}


def _mock_client(handler) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


def test_format_coordinates_puts_longitude_first():
    assert format_coordinates([Point(9.5, 76.25), Point(10.0, 76.5)]) == "76.25,9.5;76.5,10.0"


def test_osrm_route_parses_first_route():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["path"] = request.url.path
        seen["params"] = dict(request.url.params)
        return httpx.Response(
            200,
            json={
                "code": "Ok",
                "routes": [{"geometry": LINE, "duration": 4321.5, "distance": 81234.0}],
            },
        )

    async def run():
        async with _mock_client(handler) as http:
            osrm = OSRMClient(base_url="https://osrm.test/", profile="driving", client=http)
            return await osrm.route([Point(9.9312, 76.2673), Point(10.5276, 76.2144)])

    result = asyncio.run(run())

    assert result is not None
    assert result.geometry == LINE
    assert result.duration_s == 4321.5
    assert result.distance_m == 81234.0
    assert seen["path"].startswith("/route/v1/driving/")
    assert seen["params"]["overview"] == "full"
    assert seen["params"]["geometries"] == "geojson"


def test_osrm_no_route_returns_none():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(400, json={"code": "NoRoute", "message": "Impossible route between points"})

    async def run():
        async with _mock_client(handler) as http:
            osrm = OSRMClient(base_url="https://osrm.test", client=http)
            return await osrm.route([Point(0, 0), Point(0, 10)])

    assert asyncio.run(run()) is None


def test_osrm_transport_error_returns_none():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    async def run():
        async with _mock_client(handler) as http:
            osrm = OSRMClient(base_url="https://osrm.test", client=http)
            return await osrm.route([Point(0, 0), Point(0, 10)])

    assert asyncio.run(run()) is None


def test_osrm_requires_two_waypoints():
    async def run():
        osrm = OSRMClient(base_url="https://osrm.test")
        try:
            await osrm.route([Point(0, 0)])
        finally:
            await osrm.close()

    with pytest.raises(ValueError):
        asyncio.run(run())


def test_nominatim_geocode_returns_first_match():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["path"] = request.url.path
        seen["params"] = dict(request.url.params)
        seen["user_agent"] = request.headers.get("user-agent")
        return httpx.Response(200, json=[{"lat": "9.9312", "lon": "76.2673", "display_name": "Kochi"}])

    async def run():
        async with _mock_client(handler) as http:
            geocoder = NominatimClient(base_url="https://geo.test", user_agent="detour-tests", client=http)
            return await geocoder.geocode("Kochi", country_codes="in")

    point = asyncio.run(run())

    assert point == Point(9.9312, 76.2673)
    assert seen["path"] == "/search"
    assert seen["params"]["q"] == "Kochi"
    assert seen["params"]["format"] == "json"
    assert seen["params"]["countrycodes"] == "in"
    assert seen["user_agent"] == "detour-tests"


def test_nominatim_omits_country_codes_when_not_given():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["params"] = dict(request.url.params)
        return httpx.Response(200, json=[{"lat": "1", "lon": "2"}])

    async def run():
        async with _mock_client(handler) as http:
            return await NominatimClient(base_url="https://geo.test", client=http).geocode("Somewhere")

    assert asyncio.run(run()) == Point(1.0, 2.0)
    assert "countrycodes" not in seen["params"]


@pytest.mark.parametrize(
    "response",
    [
        httpx.Response(200, json=[]),
        httpx.Response(500, json={"error": "overloaded"}),
        httpx.Response(200, content=b"<html>not json</html>"),
        httpx.Response(200, json=[{"display_name": "no coordinates"}]),
    ],
)
def test_nominatim_failures_return_none(response):
    def handler(request: httpx.Request) -> httpx.Response:
        return response

    async def run():
        async with _mock_client(handler) as http:
            return await NominatimClient(base_url="https://geo.test", client=http).geocode("Atlantis")

    assert asyncio.run(run()) is None


def test_nominatim_transport_error_returns_none():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("timed out", request=request)

    async def run():
        async with _mock_client(handler) as http:
            return await NominatimClient(base_url="https://geo.test", client=http).geocode("Kochi")

    assert asyncio.run(run()) is None
