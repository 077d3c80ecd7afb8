"""GeoJSON export utilities for corridor segments."""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Sequence

from shapely.geometry import mapping

from ...models.domain import BufferSegment
from ..geospatial import plane_distance_m


def segment_length_m(segment: BufferSegment) -> float:
    """Plane-projected length of a segment in meters."""

    coordinates = segment.coordinates
    return sum(
        plane_distance_m(a[0], a[1], b[0], b[1]) for a, b in zip(coordinates, coordinates[1:])
    )


def linestring_to_wkt(segment: BufferSegment) -> str:
    """Convert a segment to a WKT LINESTRING (lon lat order)."""

    if len(segment.coordinates) < 2:
        raise ValueError("LineString must have at least 2 coordinates")
    return segment.to_linestring().wkt


def segment_to_feature(segment: BufferSegment, index: int) -> Dict[str, Any]:
    geometry = mapping(segment.to_linestring())
    return {
        "type": "Feature",
        "geometry": {
            "type": geometry["type"],
            "coordinates": [list(coord) for coord in geometry["coordinates"]],
        },
        "properties": {
            "index": index,
            "length_m": round(segment_length_m(segment), 2),
        },
    }


def segments_to_feature_collection(
    segments: Sequence[BufferSegment],
    copyrights: Iterable[str] = (),
) -> Dict[str, Any]:
    """Wrap corridor segments in a GeoJSON FeatureCollection."""

    features: List[Dict[str, Any]] = [segment_to_feature(segment, idx) for idx, segment in enumerate(segments)]
    return {
        "type": "FeatureCollection",
        "copyrights": list(copyrights),
        "features": features,
    }
