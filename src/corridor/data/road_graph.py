"""Read-only routing graph with a spatial index over its edges."""

from __future__ import annotations

import logging
from typing import Callable, Iterable, Protocol, Sequence

from shapely.geometry import LineString, box
from shapely.strtree import STRtree

from ..models.domain import BBox, LatLon, Node, RoadEdge

logger = logging.getLogger(__name__)


class RoadGraph(Protocol):
    """What the corridor engine needs from a routing graph."""

    def query(self, bbox: BBox, visit: Callable[[int], None]) -> None:
        ...

    def edge(self, edge_id: int) -> RoadEdge:
        ...

    def edges_at(self, node_id: int) -> Sequence[RoadEdge]:
        ...

    def node(self, node_id: int) -> Node:
        ...


class InMemoryRoadGraph:
    """Routing graph held in dictionaries and indexed with a shapely STRtree.

    Edges at a node are returned in insertion order and bounding box queries
    visit edges in insertion order, so walks over the same graph are
    reproducible.
    """

    def __init__(self, nodes: Iterable[Node], edges: Iterable[RoadEdge]) -> None:
        self._nodes: dict[int, Node] = {}
        for node in nodes:
            if node.node_id in self._nodes:
                raise ValueError(f"Duplicate node id {node.node_id}.")
            self._nodes[node.node_id] = node

        self._edges: dict[int, RoadEdge] = {}
        self._adjacency: dict[int, list[RoadEdge]] = {node_id: [] for node_id in self._nodes}
        for edge in edges:
            if edge.edge_id in self._edges:
                raise ValueError(f"Duplicate edge id {edge.edge_id}.")
            for endpoint in (edge.base_node, edge.adj_node):
                if endpoint not in self._nodes:
                    raise ValueError(f"Edge {edge.edge_id} references unknown node {endpoint}.")
            self._edges[edge.edge_id] = edge
            self._adjacency[edge.base_node].append(edge)
            if edge.adj_node != edge.base_node:
                self._adjacency[edge.adj_node].append(edge)

        self._edge_order: list[int] = list(self._edges)
        self._index = STRtree([self._edge_line(edge) for edge in self._edges.values()])
        logger.info(f"Indexed road graph with {len(self._nodes)} nodes and {len(self._edges)} edges")

    def __len__(self) -> int:
        return len(self._edges)

    def _edge_line(self, edge: RoadEdge) -> LineString:
        return LineString([(lon, lat) for lat, lon in self.full_geometry(edge)])

    def query(self, bbox: BBox, visit: Callable[[int], None]) -> None:
        """Invoke ``visit`` with the id of every edge whose envelope meets ``bbox``."""
        if not self._edges:
            return
        hits = self._index.query(box(bbox.min_lon, bbox.min_lat, bbox.max_lon, bbox.max_lat))
        for position in sorted(int(hit) for hit in hits):
            visit(self._edge_order[position])

    def edge(self, edge_id: int) -> RoadEdge:
        try:
            return self._edges[edge_id]
        except KeyError as exc:
            raise KeyError(f"Unknown edge {edge_id}") from exc

    def edges_at(self, node_id: int) -> Sequence[RoadEdge]:
        return tuple(self._adjacency.get(node_id, ()))

    def node(self, node_id: int) -> Node:
        try:
            return self._nodes[node_id]
        except KeyError as exc:
            raise KeyError(f"Unknown node {node_id}") from exc

    def full_geometry(self, edge: RoadEdge) -> list[LatLon]:
        return full_geometry(self, edge)


def full_geometry(graph: RoadGraph, edge: RoadEdge) -> list[LatLon]:
    """Base tower, pillars and adjacent tower of ``edge`` in stored order."""

    return [graph.node(edge.base_node).point, *edge.pillars, graph.node(edge.adj_node).point]
