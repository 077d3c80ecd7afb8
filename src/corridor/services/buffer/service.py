"""Corridor buffer orchestration service."""

from __future__ import annotations

import logging
import time
from typing import Optional, Sequence

from ...config import settings
from ...data.graph_repository import load_road_graph
from ...data.road_graph import RoadGraph
from ...models.domain import BufferSegment, Direction
from ...schemas.buffer import BufferRequest, BufferResponse
from ..export.geojson import segments_to_feature_collection
from . import direction as direction_filter
from .assembler import build_segment
from .errors import InvalidParameter
from .naming import road_key
from .search import find_primary_start, find_secondary_start

logger = logging.getLogger(__name__)


def _validate_query_multiplier(query_multiplier: float) -> None:
    if query_multiplier > 1:
        raise InvalidParameter("Query multiplier is too high.")
    if query_multiplier <= 0:
        raise InvalidParameter("Query multiplier cannot be zero or negative.")


def compute_corridor(
    graph: RoadGraph,
    lat: float,
    lon: float,
    road_name: str,
    threshold: float,
    query_multiplier: float | None = None,
    build_upstream: bool = False,
    *,
    secondary_query_multiplier: float | None = None,
    max_steps: int | None = None,
) -> list[BufferSegment]:
    """Both directional halves of the corridor along ``road_name`` from (lat, lon).

    A bidirectional start edge is walked both ways from the anchor. A one-way
    start edge is paired with the nearest one-way edge of the opposite
    carriageway and both are walked in the requested flow direction.
    """

    query_multiplier = settings.default_query_multiplier if query_multiplier is None else query_multiplier
    _validate_query_multiplier(query_multiplier)
    key = road_key(road_name)
    if key is None:
        raise InvalidParameter("Road name must contain at least one letter or digit.")
    secondary_box = (
        settings.secondary_query_multiplier if secondary_query_multiplier is None else secondary_query_multiplier
    )
    _validate_query_multiplier(secondary_box)
    max_steps = settings.max_walk_steps if max_steps is None else max_steps

    primary = find_primary_start(graph, lat, lon, key, query_multiplier)
    if graph.edge(primary.edge_id).bidirectional:
        return [
            build_segment(graph, primary, key, threshold, build_upstream, True, max_steps=max_steps),
            build_segment(graph, primary, key, threshold, build_upstream, False, max_steps=max_steps),
        ]

    secondary = find_secondary_start(graph, primary, key, secondary_box)
    return [
        build_segment(graph, primary, key, threshold, build_upstream, build_upstream, max_steps=max_steps),
        build_segment(graph, secondary, key, threshold, build_upstream, build_upstream, max_steps=max_steps),
    ]


def filter_by_direction(
    segments: Sequence[BufferSegment],
    build_upstream: bool,
    direction: Direction | str | None,
    min_axis_share: float = direction_filter.MIN_AXIS_SHARE,
) -> list[BufferSegment]:
    return direction_filter.select(segments, build_upstream, Direction.parse(direction), min_axis_share)


def build_buffer(payload: BufferRequest, graph: Optional[RoadGraph] = None) -> BufferResponse:
    """Compute, filter and serialise a corridor buffer for an API request."""

    started = time.perf_counter()
    if graph is None:
        graph = load_road_graph()
    segments = compute_corridor(
        graph,
        payload.latitude,
        payload.longitude,
        payload.road_name,
        payload.threshold_distance,
        payload.query_multiplier,
        payload.build_upstream,
    )
    segments = filter_by_direction(segments, payload.build_upstream, payload.direction)
    took_ms = (time.perf_counter() - started) * 1000.0

    logger.info(
        f"Built {len(segments)} corridor segment(s) along '{payload.road_name}' "
        f"from ({payload.latitude}, {payload.longitude}) in {took_ms:.1f} ms"
    )
    collection = segments_to_feature_collection(segments, copyrights=settings.copyrights)
    return BufferResponse(**collection, took_ms=took_ms)
