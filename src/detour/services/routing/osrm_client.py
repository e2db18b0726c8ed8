"""HTTP client for interacting with OSRM services."""

from __future__ import annotations

import logging
from typing import Sequence

import httpx

from ...config import settings
from ...models.domain import Point, RouteGeometry

logger = logging.getLogger(__name__)


def format_coordinates(waypoints: Sequence[Point]) -> str:
    """OSRM expects ``lon,lat;lon,lat;...``."""
    return ";".join(f"{point.lon},{point.lat}" for point in waypoints)


class OSRMClient:
    def __init__(
        self,
        base_url: str | None = None,
        profile: str | None = None,
        timeout: float | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.base_url = (base_url or settings.osrm_base_url).rstrip("/")
        if not self.base_url:
            raise ValueError("OSRM base URL is not configured.")
        self.profile = profile or settings.osrm_profile
        self.timeout = timeout if timeout is not None else settings.http_timeout_seconds
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=self.timeout)

    async def close(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> "OSRMClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    async def route(self, waypoints: Sequence[Point]) -> RouteGeometry | None:
        """Get a drivable route through ``waypoints`` in order.

        Returns ``None`` when OSRM finds no route or the request fails. There
        is no retry.
        """
        if len(waypoints) < 2:
            raise ValueError("At least two coordinates are required for OSRM route.")

        url = f"{self.base_url}/route/v1/{self.profile}/{format_coordinates(waypoints)}"
        params = {
            "overview": "full",
            "geometries": "geojson",
        }

        try:
            response = await self._client.get(url, params=params)
            data = response.json()
        except httpx.HTTPError as exc:
            logger.warning(f"OSRM route request failed: {exc}")
            return None
        except ValueError as exc:
            logger.warning(f"OSRM route response was not valid JSON: {exc}")
            return None

        if not isinstance(data, dict):
            logger.warning("OSRM route response was not a JSON object")
            return None
        # OSRM reports NoRoute and friends with a 400 and a JSON body.
        if data.get("code") != "Ok" or not data.get("routes"):
            logger.warning(
                f"OSRM returned no route for {len(waypoints)} waypoints: "
                f"{data.get('code', 'Unknown')} {data.get('message', '')}".rstrip()
            )
            return None

        route = data["routes"][0]
        geometry = route.get("geometry")
        if not geometry:
            logger.warning("OSRM route is missing geometry")
            return None

        return RouteGeometry(
            geometry=geometry,
            duration_s=float(route.get("duration", 0.0)),
            distance_m=float(route.get("distance", 0.0)),
        )


def check_health(base_url: str | None = None) -> bool:
    """Check OSRM service health by requesting a short route.

    Public OSRM endpoints may not have a /health endpoint, so connectivity is
    tested with a minimal two-point route.
    """
    base = (base_url or settings.osrm_base_url).rstrip("/")
    if not base:
        return False
    try:
        test_coords = "13.388860,52.517037;13.385983,52.496891"
        url = f"{base}/route/v1/{settings.osrm_profile}/{test_coords}"
        response = httpx.get(url, params={"overview": "false"}, timeout=5.0)
        response.raise_for_status()
        data = response.json()
        return data.get("code") == "Ok"
    except (httpx.HTTPError, ValueError):
        return False
