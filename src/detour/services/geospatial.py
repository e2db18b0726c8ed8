"""Geospatial helper functions.

All functions work on a spherical Earth of radius ``EARTH_RADIUS_M``; no
ellipsoidal correction is applied anywhere, so ``haversine_m`` and
``destination_point`` are exact inverses of each other up to float error.
"""

from __future__ import annotations

import math
from typing import Sequence

from shapely.geometry import LineString, Polygon

from ..models.domain import Point

EARTH_RADIUS_M = 6_371_000.0


def haversine_m(a: Point, b: Point) -> float:
    """Compute great-circle distance in metres using the Haversine formula."""

    phi1, phi2 = math.radians(a.lat), math.radians(b.lat)
    d_phi = math.radians(b.lat - a.lat)
    d_lambda = math.radians(b.lon - a.lon)

    h = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    c = 2 * math.atan2(math.sqrt(h), math.sqrt(1 - h))
    return EARTH_RADIUS_M * c


def haversine_km(a: Point, b: Point) -> float:
    return haversine_m(a, b) / 1000.0


def bearing_degrees(a: Point, b: Point) -> float:
    """Calculate the initial bearing from ``a`` to ``b``, in [0, 360).

    Coincident points have no bearing; 0.0 is returned for them.
    """

    if a == b:
        return 0.0
    phi1 = math.radians(a.lat)
    phi2 = math.radians(b.lat)
    delta_lambda = math.radians(b.lon - a.lon)
    y = math.sin(delta_lambda) * math.cos(phi2)
    x = math.cos(phi1) * math.sin(phi2) - math.sin(phi1) * math.cos(phi2) * math.cos(delta_lambda)
    bearing = math.degrees(math.atan2(y, x))
    return (bearing + 360) % 360


def destination_point(origin: Point, bearing_deg: float, distance_m: float) -> Point:
    """Point reached from ``origin`` after ``distance_m`` along ``bearing_deg``."""

    angular = distance_m / EARTH_RADIUS_M
    phi1 = math.radians(origin.lat)
    lambda1 = math.radians(origin.lon)
    theta = math.radians(bearing_deg)

    phi2 = math.asin(
        math.sin(phi1) * math.cos(angular) + math.cos(phi1) * math.sin(angular) * math.cos(theta)
    )
    lambda2 = lambda1 + math.atan2(
        math.sin(theta) * math.sin(angular) * math.cos(phi1),
        math.cos(angular) - math.sin(phi1) * math.sin(phi2),
    )
    lon = (math.degrees(lambda2) + 540) % 360 - 180
    return Point(lat=math.degrees(phi2), lon=lon)


def unwrap_lon(lon: float, reference: float) -> float:
    """Shift ``lon`` by whole turns so it lies within 180 degrees of ``reference``."""

    return reference + ((lon - reference + 540) % 360 - 180)


def zone_polygon(center: Point, radius_m: float, segments: int = 64) -> Polygon:
    """Approximate a clearance circle as a polygon in (lon, lat) order.

    Ring longitudes stay continuous around ``center.lon``, so a zone on the
    antimeridian may extend past +/-180.
    """

    if segments < 3:
        raise ValueError("A zone polygon needs at least 3 segments.")
    ring = []
    for step in range(segments):
        vertex = destination_point(center, 360.0 * step / segments, radius_m)
        ring.append((unwrap_lon(vertex.lon, center.lon), vertex.lat))
    return Polygon(ring)


def path_crosses_zone(path: Sequence[Sequence[float]], center: Point, radius_m: float) -> bool:
    """Return True if a (lon, lat) path enters the clearance circle around ``center``."""

    if len(path) < 2:
        return False
    line = LineString(
        [(unwrap_lon(float(coord[0]), center.lon), float(coord[1])) for coord in path]
    )
    return line.intersects(zone_polygon(center, radius_m))
