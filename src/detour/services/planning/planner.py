"""Greedy detour planner.

Avoid-points are visited in order of distance from the start. For each one, two
candidate detour waypoints are placed perpendicular to the current direction of
travel, ``clearance`` metres either side of the avoid-point, and the candidate
adding the least distance to the remaining trip is kept. Overlapping zones are
not merged, so a detour may still sit inside a neighbouring zone.
"""

from __future__ import annotations

from typing import Iterable, Sequence, Union

from ...models.domain import AvoidZone, Point
from ..geospatial import bearing_degrees, destination_point, haversine_m

AvoidLike = Union[Point, AvoidZone]


def _as_zone(avoid: AvoidLike) -> AvoidZone:
    if isinstance(avoid, AvoidZone):
        return avoid
    return AvoidZone(point=avoid)


def order_avoid_zones(start: Point, avoids: Iterable[AvoidLike]) -> list[AvoidZone]:
    """Sort avoid zones by distance from ``start``; ties keep input order."""

    zones = [_as_zone(avoid) for avoid in avoids]
    return sorted(zones, key=lambda zone: haversine_m(start, zone.point))


def detour_candidates(previous: Point, end: Point, avoid: Point, distance_m: float) -> tuple[Point, Point]:
    """Return the left and right detour points around ``avoid``.

    Both are ``distance_m`` from the avoid-point, perpendicular to the bearing
    from ``previous`` to ``end``.
    """

    main_bearing = bearing_degrees(previous, end)
    left = (main_bearing + 90) % 360
    right = (main_bearing - 90 + 360) % 360
    return destination_point(avoid, left, distance_m), destination_point(avoid, right, distance_m)


def choose_detour(previous: Point, end: Point, candidates: tuple[Point, Point]) -> Point:
    first, second = candidates
    cost_first = haversine_m(previous, first) + haversine_m(first, end)
    cost_second = haversine_m(previous, second) + haversine_m(second, end)
    return first if cost_first <= cost_second else second


def plan_detour_zones(
    start: Point,
    end: Point,
    avoids: Sequence[AvoidLike],
    clearance_m: float,
) -> list[tuple[AvoidZone, Point]]:
    """Plan detours and return each sorted zone paired with its detour waypoint."""

    planned: list[tuple[AvoidZone, Point]] = []
    previous = start
    for zone in order_avoid_zones(start, avoids):
        candidates = detour_candidates(previous, end, zone.point, zone.clearance(clearance_m))
        detour = choose_detour(previous, end, candidates)
        planned.append((zone, detour))
        previous = detour
    return planned


def plan_detour(
    start: Point,
    end: Point,
    avoids: Sequence[AvoidLike],
    clearance_m: float,
) -> list[Point]:
    """Build the full waypoint sequence ``[start, *detours, end]``.

    ``start`` and ``end`` must not coincide; if they do the bearing falls back
    to 0 degrees.
    """

    if not avoids:
        return [start, end]
    detours = [detour for _, detour in plan_detour_zones(start, end, avoids, clearance_m)]
    return [start, *detours, end]
