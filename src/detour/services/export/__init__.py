"""Export services."""

from .geojson import result_to_feature_collection, zone_feature

__all__ = [
    "result_to_feature_collection",
    "zone_feature",
]
