"""Serializers for planned route outputs."""

from __future__ import annotations

import math
import random
from dataclasses import asdict, dataclass
from typing import Callable, Sequence

from ...models.domain import Point, RouteResult

MessageChooser = Callable[[Sequence[str]], str]


@dataclass(slots=True)
class RouteSummary:
    travel_time_min: int
    travel_time_text: str
    peace_of_mind: str
    distance_km: float


def travel_minutes(duration_s: float) -> int:
    """Whole minutes, halves rounded up."""
    return int(math.floor(duration_s / 60 + 0.5))


def build_summary(
    result: RouteResult,
    messages: Sequence[str],
    chooser: MessageChooser = random.choice,
) -> RouteSummary:
    minutes = travel_minutes(result.duration_s)
    return RouteSummary(
        travel_time_min=minutes,
        travel_time_text=f"{minutes} minutes",
        peace_of_mind=chooser(messages) if messages else "",
        distance_km=round(result.distance_m / 1000.0, 2),
    )


def _point(point: Point) -> dict:
    return {"lat": point.lat, "lon": point.lon}


def route_result_to_json(result: RouteResult) -> dict:
    return {
        "start": _point(result.start),
        "end": _point(result.end),
        "waypoints": [_point(point) for point in result.waypoints],
        "zones": [
            {
                "index": zone.index,
                "label": zone.label,
                "center": _point(zone.center),
                "radius_m": zone.radius_m,
                "detour": _point(zone.detour),
            }
            for zone in result.zones
        ],
        "geometry": result.route.geometry,
        "duration_s": result.duration_s,
        "distance_m": result.distance_m,
        "dropped_avoids": list(result.dropped_avoids),
        "zones_crossed": list(result.zones_crossed),
    }


def summary_to_json(summary: RouteSummary) -> dict:
    return asdict(summary)
