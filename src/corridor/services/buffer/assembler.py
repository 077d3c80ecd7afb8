"""Stitching walked geometry into a single corridor segment."""

from __future__ import annotations

import logging
from typing import Optional, Sequence

from ...data.road_graph import RoadGraph, full_geometry
from ...models.domain import BufferFeature, BufferSegment, LatLon
from ..geospatial import plane_distance_m
from .errors import DegenerateGeometry
from .walker import walk_to_threshold

logger = logging.getLogger(__name__)


def clip_to_threshold(points: Sequence[LatLon], threshold: float, distance: float = 0.0) -> list[LatLon]:
    """Leading points of ``points`` whose running distance stays below ``threshold``.

    The running distance starts at ``distance`` and is measured from the
    first point.
    """

    clipped: list[LatLon] = []
    if not points:
        return clipped
    previous = points[0]
    for point in points:
        distance += plane_distance_m(point[0], point[1], previous[0], previous[1])
        if distance >= threshold:
            break
        clipped.append(point)
        previous = point
    return clipped


def starting_edge_geometry(
    graph: RoadGraph, start: BufferFeature, upstream_start: bool, threshold: float
) -> list[LatLon]:
    """Geometry of the start edge cut at the anchor, leading away from it."""

    geometry = full_geometry(graph, graph.edge(start.edge_id))
    if upstream_start:
        cut = geometry[: geometry.index(start.point) + 1] if start.point in geometry else geometry
        cut.reverse()
    else:
        cut = geometry[geometry.index(start.point):] if start.point in geometry else []
    return clip_to_threshold(cut, threshold)


def final_edge_geometry(graph: RoadGraph, start: BufferFeature, end: BufferFeature, threshold: float) -> list[LatLon]:
    """Pillar points of the edge the threshold falls on, clipped at the threshold.

    Empty when the walk never left the start edge.
    """

    edge = graph.edge(end.edge_id)
    pillars = list(edge.pillars)
    if not pillars or start.edge_id == end.edge_id:
        return []
    if edge.adj_node == end.node_id:
        pillars.reverse()
    return clip_to_threshold(pillars, threshold, end.distance)


def build_segment(
    graph: RoadGraph,
    start: BufferFeature,
    key: str,
    threshold: float,
    upstream_path: bool,
    upstream_start: bool,
    max_steps: Optional[int] = None,
) -> BufferSegment:
    """Walk from ``start`` and assemble the corridor half in along-route order."""

    end = walk_to_threshold(graph, start, threshold, key, upstream_path, upstream_start, max_steps=max_steps)
    coordinates = [
        *starting_edge_geometry(graph, start, upstream_start, threshold),
        *end.path,
        *final_edge_geometry(graph, start, end, threshold),
    ]
    if upstream_path:
        coordinates.reverse()

    if len(coordinates) < 2:
        raise DegenerateGeometry()
    logger.debug(f"Assembled {len(coordinates)} coordinates from edge {start.edge_id} to edge {end.edge_id}")
    return BufferSegment(tuple(coordinates))
