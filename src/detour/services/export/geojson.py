"""GeoJSON overlay export for map front ends."""

from __future__ import annotations

from typing import Any, Dict, List

from shapely.geometry import mapping

from ...models.domain import Point, RouteResult
from ..geospatial import zone_polygon

ROUTE_STYLE = {"color": "#ff007f", "weight": 5}
ZONE_STYLE = {"color": "red", "fillColor": "#f03", "fillOpacity": 0.3}


def marker_feature(point: Point, label: str, role: str) -> Dict[str, Any]:
    return {
        "type": "Feature",
        "geometry": {"type": "Point", "coordinates": [point.lon, point.lat]},
        "properties": {"kind": "marker", "role": role, "popup": label},
    }


def zone_feature(center: Point, radius_m: float, index: int, label: str = "") -> Dict[str, Any]:
    """Circle around an avoid-point, drawn at the clearance radius.

    The circle is centred on the original avoid-point, not on its detour.
    """
    return {
        "type": "Feature",
        "geometry": mapping(zone_polygon(center, radius_m)),
        "properties": {
            "kind": "zone",
            "popup": f"No-Go Zone {index}",
            "label": label,
            "center": [center.lon, center.lat],
            "radius_m": radius_m,
            "style": dict(ZONE_STYLE),
        },
    }


def route_feature(result: RouteResult) -> Dict[str, Any]:
    return {
        "type": "Feature",
        "geometry": result.route.geometry,
        "properties": {
            "kind": "route",
            "duration_s": result.duration_s,
            "distance_m": result.distance_m,
            "style": dict(ROUTE_STYLE),
        },
    }


def result_to_feature_collection(result: RouteResult) -> Dict[str, Any]:
    """Markers for start and end, one circle per zone, then the route path."""
    features: List[Dict[str, Any]] = [
        marker_feature(result.start, "Starting Point", "start"),
        marker_feature(result.end, "Destination", "end"),
    ]
    for zone in result.zones:
        features.append(zone_feature(zone.center, zone.radius_m, zone.index, zone.label))
    features.append(route_feature(result))
    return {"type": "FeatureCollection", "features": features}
