"""Expanding bounding-box search for the edge a corridor starts on."""

from __future__ import annotations

import logging
from typing import Callable, Sequence

from ...data.road_graph import RoadGraph
from ...models.domain import BBox, BufferFeature, RoadEdge
from ..geospatial import plane_distance_m
from .errors import NoMatchingRoad
from .naming import edge_matches

logger = logging.getLogger(__name__)

SEARCH_PULSES = (1, 2, 3)


def query_matching_edges(graph: RoadGraph, bbox: BBox, key: str) -> list[int]:
    """Ids of edges inside ``bbox`` whose name or ref matches ``key``."""

    matches: list[int] = []

    def _visit(edge_id: int) -> None:
        if edge_matches(graph.edge(edge_id), key):
            matches.append(edge_id)

    graph.query(bbox, _visit)
    return matches


def nearest_start_feature(graph: RoadGraph, edge_ids: Sequence[int], lat: float, lon: float) -> BufferFeature | None:
    """Pillar point closest to (lat, lon) across ``edge_ids``; first seen wins ties."""

    lowest_distance = float("inf")
    nearest: BufferFeature | None = None
    for edge_id in edge_ids:
        for point in graph.edge(edge_id).pillars:
            distance = plane_distance_m(lat, lon, point[0], point[1])
            if distance < lowest_distance:
                lowest_distance = distance
                nearest = BufferFeature(edge_id=edge_id, point=point, distance=0.0)
    return nearest


def _expanding_search(
    graph: RoadGraph,
    lat: float,
    lon: float,
    key: str,
    base_box_size: float,
    keep: Callable[[RoadEdge], bool],
) -> BufferFeature:
    for pulse in SEARCH_PULSES:
        bbox = BBox.around(lat, lon, base_box_size * pulse)
        candidates = [
            edge_id for edge_id in query_matching_edges(graph, bbox, key) if keep(graph.edge(edge_id))
        ]
        if not candidates:
            logger.debug(f"No '{key}' edges within {base_box_size * pulse:.4f} deg of ({lat}, {lon})")
            continue
        feature = nearest_start_feature(graph, candidates, lat, lon)
        if feature is not None:
            return feature
    raise NoMatchingRoad()


def find_primary_start(graph: RoadGraph, lat: float, lon: float, key: str, base_box_size: float) -> BufferFeature:
    """Start feature on the ``key`` road nearest to the requested point."""

    feature = _expanding_search(graph, lat, lon, key, base_box_size, keep=lambda edge: True)
    logger.debug(f"Primary start on edge {feature.edge_id} at {feature.point}")
    return feature


def find_secondary_start(
    graph: RoadGraph, primary: BufferFeature, key: str, base_box_size: float
) -> BufferFeature:
    """Start feature on the opposite carriageway of a one-way primary edge.

    Skips the primary edge, bidirectional edges and edges that continue or
    feed the primary edge head to tail.
    """

    primary_edge = graph.edge(primary.edge_id)

    def _is_sister(edge: RoadEdge) -> bool:
        return (
            edge.base_node != primary_edge.adj_node
            and edge.adj_node != primary_edge.base_node
            and not edge.bidirectional
            and edge.edge_id != primary_edge.edge_id
        )

    lat, lon = primary.point
    feature = _expanding_search(graph, lat, lon, key, base_box_size, keep=_is_sister)
    logger.debug(f"Secondary start on edge {feature.edge_id} at {feature.point}")
    return feature
