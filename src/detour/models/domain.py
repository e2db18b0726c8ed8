"""Domain models for points, avoid zones and route results."""

from dataclasses import dataclass, field
from typing import Optional


@dataclass(frozen=True, slots=True)
class Point:
    """A WGS84 coordinate in degrees."""

    lat: float
    lon: float

    def as_lat_lon(self) -> tuple[float, float]:
        return (self.lat, self.lon)

    def as_lon_lat(self) -> tuple[float, float]:
        return (self.lon, self.lat)


@dataclass(frozen=True, slots=True)
class AvoidZone:
    """A no-go zone centred on a resolved avoid address.

    ``radius_m`` overrides the run-wide clearance when set.
    """

    point: Point
    label: str = ""
    radius_m: Optional[float] = None

    def clearance(self, default_m: float) -> float:
        return default_m if self.radius_m is None else self.radius_m


@dataclass(slots=True)
class RouteGeometry:
    """Path returned by the routing service."""

    geometry: dict
    duration_s: float
    distance_m: float


@dataclass(slots=True)
class PlannedZone:
    """An avoid zone as it was used in one planning run."""

    index: int  # 1-based, in order of distance from start; drives "No-Go Zone N" labels
    label: str
    center: Point
    radius_m: float
    detour: Point


@dataclass(slots=True)
class RouteResult:
    start: Point
    end: Point
    waypoints: list[Point]
    zones: list[PlannedZone]
    route: RouteGeometry
    dropped_avoids: list[str] = field(default_factory=list)
    zones_crossed: list[int] = field(default_factory=list)

    @property
    def duration_s(self) -> float:
        return self.route.duration_s

    @property
    def distance_m(self) -> float:
        return self.route.distance_m
