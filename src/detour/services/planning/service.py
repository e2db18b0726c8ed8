"""Route plotting orchestration service."""

from __future__ import annotations

import asyncio
import logging
import random
from collections import OrderedDict
from dataclasses import dataclass, field
from typing import Optional, Protocol, Sequence

from ...config import Settings, settings
from ...errors import (
    AddressNotFoundError,
    MissingAddressError,
    RouteNotFoundError,
    RoutePlanningError,
    SessionBusyError,
)
from ...models.domain import AvoidZone, PlannedZone, Point, RouteGeometry, RouteResult
from ...schemas.routing import PlotRequest
from ..export.geojson import result_to_feature_collection
from ..geospatial import path_crosses_zone
from ..outputs.formatter import MessageChooser, RouteSummary, build_summary
from .planner import plan_detour_zones

logger = logging.getLogger(__name__)


class Geocoder(Protocol):
    async def geocode(self, address: str, country_codes: str | None = None) -> Point | None:
        ...


class Router(Protocol):
    async def route(self, waypoints: Sequence[Point]) -> RouteGeometry | None:
        ...


@dataclass
class PlotSession:
    """Display state owned by one user session.

    ``busy`` stands in for a disabled trigger control: a session only plans
    one route at a time.
    """

    session_id: str = "default"
    busy: bool = False
    result: Optional[RouteResult] = None
    summary: Optional[RouteSummary] = None
    overlays: Optional[dict] = None

    def clear(self) -> None:
        self.result = None
        self.summary = None
        self.overlays = None

    def show(self, result: RouteResult, summary: RouteSummary, overlays: dict) -> None:
        self.result = result
        self.summary = summary
        self.overlays = overlays


class SessionRegistry:
    """Sessions keyed by id, least recently used evicted past ``max_sessions``.

    Sessions with a request in flight are skipped during eviction.
    """

    def __init__(self, max_sessions: int | None = None) -> None:
        self.max_sessions = max_sessions if max_sessions is not None else settings.max_sessions
        if self.max_sessions < 1:
            raise ValueError("max_sessions must be at least 1.")
        self._sessions: OrderedDict[str, PlotSession] = OrderedDict()

    def get(self, session_id: str = "default") -> PlotSession:
        session = self._sessions.get(session_id)
        if session is not None:
            self._sessions.move_to_end(session_id)
            return session
        session = PlotSession(session_id=session_id)
        self._sessions[session_id] = session
        self._evict(keep=session_id)
        return session

    def _evict(self, keep: str) -> None:
        for key in list(self._sessions):
            if len(self._sessions) <= self.max_sessions:
                break
            if key != keep and not self._sessions[key].busy:
                del self._sessions[key]
                logger.debug(f"Evicted idle plot session '{key}'")

    def __contains__(self, session_id: str) -> bool:
        return session_id in self._sessions

    def __len__(self) -> int:
        return len(self._sessions)


@dataclass
class PlotOutcome:
    success: bool
    reason: Optional[str] = None
    error: Optional[RoutePlanningError] = None
    result: Optional[RouteResult] = None
    summary: Optional[RouteSummary] = None
    overlays: Optional[dict] = None

    @classmethod
    def failure(cls, error: RoutePlanningError) -> "PlotOutcome":
        return cls(success=False, reason=error.message, error=error)


@dataclass
class _Addresses:
    start: str
    end: str
    avoids: list[str] = field(default_factory=list)


def _normalize_addresses(payload: PlotRequest) -> _Addresses:
    start = payload.start.strip()
    end = payload.end.strip()
    if not start or not end:
        raise MissingAddressError()
    avoids = [value.strip() for value in payload.avoid if value and value.strip()]
    return _Addresses(start=start, end=end, avoids=avoids)


async def _geocode_all(
    geocoder: Geocoder, addresses: Sequence[str], country_codes: str | None
) -> list[Point | None]:
    """Geocode every address concurrently and wait for all of them."""
    logger.info(f"Geocoding {len(addresses)} addresses")
    results = await asyncio.gather(
        *(geocoder.geocode(address, country_codes) for address in addresses),
        return_exceptions=True,
    )
    points: list[Point | None] = []
    for address, result in zip(addresses, results):
        if isinstance(result, BaseException):
            logger.warning(f"Geocoder raised for '{address}': {result}")
            points.append(None)
        else:
            points.append(result)
    return points


def _zones_crossed(route: RouteGeometry, zones: Sequence[PlannedZone]) -> list[int]:
    if route.geometry.get("type") != "LineString":
        return []
    path = route.geometry.get("coordinates") or []
    return [zone.index for zone in zones if path_crosses_zone(path, zone.center, zone.radius_m)]


async def plan_route(
    payload: PlotRequest,
    *,
    geocoder: Geocoder,
    router: Router,
    config: Settings = settings,
) -> RouteResult:
    """Geocode, plan detours and route. Raises ``RoutePlanningError`` on failure."""
    addresses = _normalize_addresses(payload)
    clearance_m = payload.clearance_meters if payload.clearance_meters is not None else config.clearance_meters

    points = await _geocode_all(
        geocoder,
        [addresses.start, addresses.end, *addresses.avoids],
        config.geocode_country_codes or None,
    )
    start, end, avoid_points = points[0], points[1], points[2:]
    if start is None or end is None:
        raise AddressNotFoundError()

    zones: list[AvoidZone] = []
    dropped: list[str] = []
    for address, point in zip(addresses.avoids, avoid_points):
        if point is None:
            logger.warning(f"Dropping avoid address '{address}': could not geocode it")
            dropped.append(address)
        else:
            zones.append(AvoidZone(point=point, label=address))

    planned_zones: list[PlannedZone] = []
    if zones:
        planned = plan_detour_zones(start, end, zones, clearance_m)
        planned_zones = [
            PlannedZone(
                index=index,
                label=zone.label,
                center=zone.point,
                radius_m=zone.clearance(clearance_m),
                detour=detour,
            )
            for index, (zone, detour) in enumerate(planned, start=1)
        ]
        waypoints = [start, *(zone.detour for zone in planned_zones), end]
    else:
        waypoints = [start, end]

    logger.info(f"Requesting route through {len(waypoints)} waypoints ({len(planned_zones)} detours)")
    route = await router.route(waypoints)
    if route is None:
        raise RouteNotFoundError()

    crossed = _zones_crossed(route, planned_zones)
    if crossed:
        logger.info(f"Returned route still crosses no-go zones {crossed}")

    return RouteResult(
        start=start,
        end=end,
        waypoints=waypoints,
        zones=planned_zones,
        route=route,
        dropped_avoids=dropped,
        zones_crossed=crossed,
    )


async def plot_route(
    payload: PlotRequest,
    session: PlotSession,
    *,
    geocoder: Geocoder,
    router: Router,
    config: Settings = settings,
    chooser: MessageChooser = random.choice,
) -> PlotOutcome:
    """Plan a route for ``session`` and resolve every failure into an outcome.

    The session display is cleared up front and only repopulated on success,
    so a failed request never leaves a partial route on screen.
    """
    if session.busy:
        return PlotOutcome.failure(SessionBusyError())

    session.busy = True
    try:
        session.clear()
        result = await plan_route(payload, geocoder=geocoder, router=router, config=config)
        summary = build_summary(result, config.peace_of_mind_messages, chooser)
        overlays = result_to_feature_collection(result)
    except RoutePlanningError as exc:
        logger.warning(f"Route plotting failed for session '{session.session_id}': {exc.message}")
        session.clear()
        return PlotOutcome.failure(exc)
    finally:
        session.busy = False

    session.show(result, summary, overlays)
    logger.info(
        f"Plotted route for session '{session.session_id}': "
        f"{summary.travel_time_min} min, {len(result.zones)} zones avoided"
    )
    return PlotOutcome(success=True, result=result, summary=summary, overlays=overlays)
