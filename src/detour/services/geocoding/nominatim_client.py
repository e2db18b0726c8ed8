"""Async HTTP client for the Nominatim geocoding service."""

from __future__ import annotations

import logging

import httpx

from ...config import settings
from ...models.domain import Point

logger = logging.getLogger(__name__)


class NominatimClient:
    """Resolve free-text addresses to coordinates.

    Failures of any kind (network, HTTP status, bad payload, no match) are
    logged and reported as ``None`` so sibling lookups are never aborted.
    """

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        user_agent: str | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.base_url = (base_url or settings.nominatim_base_url).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.http_timeout_seconds
        self.user_agent = user_agent or settings.user_agent
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=self.timeout)

    async def close(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> "NominatimClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    async def geocode(self, address: str, country_codes: str | None = None) -> Point | None:
        """Return the best match for ``address`` or ``None``."""
        params = {"format": "json", "q": address, "limit": 1}
        if country_codes:
            params["countrycodes"] = country_codes

        try:
            response = await self._client.get(
                f"{self.base_url}/search",
                params=params,
                headers={"User-Agent": self.user_agent},
            )
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPError as exc:
            logger.warning(f"Geocoding request for '{address}' failed: {exc}")
            return None
        except ValueError as exc:
            logger.warning(f"Geocoding response for '{address}' was not valid JSON: {exc}")
            return None

        if not isinstance(data, list) or not data:
            logger.info(f"No geocoding match for '{address}'")
            return None

        try:
            return Point(lat=float(data[0]["lat"]), lon=float(data[0]["lon"]))
        except (KeyError, TypeError, ValueError) as exc:
            logger.warning(f"Geocoding match for '{address}' had unusable coordinates: {exc}")
            return None
