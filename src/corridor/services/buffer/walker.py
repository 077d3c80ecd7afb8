"""Directed walk along a named road until a distance budget is spent."""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from enum import IntEnum
from typing import Optional, Sequence

from ...data.road_graph import RoadGraph
from ...models.domain import BufferFeature, LatLon, RoadEdge
from ..geospatial import manhattan_degrees, plane_distance_m
from .errors import DeadEnd, WalkLimitExceeded
from .naming import edge_matches

logger = logging.getLogger(__name__)


class CandidateRank(IntEnum):
    """Preference of an edge leaving the current node; lower wins."""

    NAMED_BIDIRECTIONAL = 0
    NAMED_ONEWAY = 1
    NAMED_ROUNDABOUT = 2
    UNNAMED_ROUNDABOUT = 3


@dataclass(frozen=True, slots=True)
class WalkState:
    edge: RoadEdge
    node_id: int
    distance: float
    path: tuple[LatLon, ...]
    used: frozenset[int]
    steps: int = 0


def has_proper_flow(current: RoadEdge, candidate: RoadEdge, build_upstream: bool) -> bool:
    """Whether ``candidate`` continues the flow of ``current`` in the walk direction.

    Entering a bidirectional edge is always allowed. Leaving a bidirectional
    edge, either of its nodes may be shared; leaving a one-way edge, the
    candidate must attach head to tail.
    """

    if candidate.bidirectional:
        return True
    if current.bidirectional:
        if build_upstream:
            return candidate.adj_node in (current.base_node, current.adj_node)
        return candidate.base_node in (current.base_node, current.adj_node)
    if build_upstream:
        return candidate.adj_node == current.base_node
    return candidate.base_node == current.adj_node


def classify(edge: RoadEdge, key: str) -> Optional[CandidateRank]:
    named = edge_matches(edge, key)
    if named and not edge.roundabout:
        return CandidateRank.NAMED_BIDIRECTIONAL if edge.bidirectional else CandidateRank.NAMED_ONEWAY
    if named:
        return CandidateRank.NAMED_ROUNDABOUT
    if edge.roundabout:
        return CandidateRank.UNNAMED_ROUNDABOUT
    return None


def endpoint_displacement(graph: RoadGraph, edge: RoadEdge) -> float:
    base = graph.node(edge.base_node)
    adj = graph.node(edge.adj_node)
    return manhattan_degrees(base.latitude, base.longitude, adj.latitude, adj.longitude)


def resolve_multiway(graph: RoadGraph, candidates: Sequence[RoadEdge]) -> RoadEdge:
    """Pick the through edge at a Michigan-left style junction.

    Compares the first and last same-named one-way candidates and keeps the
    one whose endpoints lie further apart; turn lanes are usually the shorter
    edge. Not infallible.
    """

    first, last = candidates[0], candidates[-1]
    if len(candidates) == 1:
        return first
    if endpoint_displacement(graph, first) > endpoint_displacement(graph, last):
        return first
    return last


def select_next_edge(graph: RoadGraph, state: WalkState, key: str, build_upstream: bool) -> RoadEdge:
    """Best viable edge leaving ``state.node_id``; raises DeadEnd when there is none."""

    ranked: dict[CandidateRank, list[RoadEdge]] = {}
    for candidate in graph.edges_at(state.node_id):
        if candidate.edge_id in state.used or not has_proper_flow(state.edge, candidate, build_upstream):
            continue
        rank = classify(candidate, key)
        if rank is None:
            continue
        if rank is CandidateRank.NAMED_BIDIRECTIONAL:
            return candidate
        ranked.setdefault(rank, []).append(candidate)

    if not ranked:
        raise DeadEnd()
    rank = min(ranked)
    if rank is CandidateRank.NAMED_ONEWAY:
        return resolve_multiway(graph, ranked[rank])
    return ranked[rank][0]


def _advance(graph: RoadGraph, state: WalkState, edge: RoadEdge, distance: float) -> WalkState:
    pillars = list(edge.pillars)
    # Stored geometry runs base -> adj
    if edge.adj_node == state.node_id:
        pillars.reverse()
    node_point = graph.node(state.node_id).point
    return WalkState(
        edge=edge,
        node_id=edge.other_node(state.node_id),
        distance=distance,
        path=state.path + (node_point, *pillars),
        used=state.used,
        steps=state.steps,
    )


def walk_to_threshold(
    graph: RoadGraph,
    start: BufferFeature,
    threshold: float,
    key: str,
    build_upstream: bool,
    upstream_start: bool,
    max_steps: Optional[int] = None,
) -> BufferFeature:
    """Follow the ``key`` road from ``start`` until ``threshold`` meters are covered.

    Returns the edge on which the threshold is crossed, the node it is
    entered from, the distance covered up to that node and the points
    collected on the way. When the threshold is already met at the first
    node, ``start`` is returned unchanged.
    """

    start_edge = graph.edge(start.edge_id)
    node_id = start_edge.base_node if upstream_start else start_edge.adj_node
    node = graph.node(node_id)
    distance = plane_distance_m(start.point[0], start.point[1], node.latitude, node.longitude)
    if distance >= threshold:
        return start

    state = WalkState(
        edge=start_edge,
        node_id=node_id,
        distance=distance,
        path=(),
        used=frozenset({start_edge.edge_id}),
    )
    while True:
        if max_steps is not None and state.steps >= max_steps:
            raise WalkLimitExceeded(f"Walk exceeded {max_steps} steps along '{key}'.")
        try:
            edge = select_next_edge(graph, state, key, build_upstream)
        except DeadEnd:
            logger.info(f"Dead end at node {state.node_id} after {state.distance:.1f} m along '{key}'")
            raise
        state = replace(state, used=state.used | {edge.edge_id}, steps=state.steps + 1)

        here = graph.node(state.node_id)
        there = graph.node(edge.other_node(state.node_id))
        total = state.distance + plane_distance_m(here.latitude, here.longitude, there.latitude, there.longitude)
        logger.debug(f"Step {state.steps}: node {state.node_id} -> edge {edge.edge_id}, {total:.1f} m")
        if total >= threshold:
            return BufferFeature(
                edge_id=edge.edge_id,
                point=here.point,
                distance=state.distance,
                node_id=state.node_id,
                path=state.path,
            )
        state = _advance(graph, state, edge, total)
