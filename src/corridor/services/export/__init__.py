"""Export services."""

from .geojson import (
    linestring_to_wkt,
    segment_length_m,
    segments_to_feature_collection,
)

__all__ = [
    "segments_to_feature_collection",
    "segment_length_m",
    "linestring_to_wkt",
]
