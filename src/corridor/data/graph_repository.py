"""Data access helpers for loading the routing graph from GeoJSON."""

from __future__ import annotations

import functools
import json
import logging
from pathlib import Path
from typing import Any, Iterable, Optional

from ..config import settings
from ..models.domain import Node, RoadEdge
from .road_graph import InMemoryRoadGraph

logger = logging.getLogger(__name__)


def _coerce_bool(value: Any, default: bool) -> bool:
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return bool(value)
    normalized = str(value).strip().lower()
    if normalized in {"true", "yes", "1"}:
        return True
    if normalized in {"false", "no", "0"}:
        return False
    raise ValueError(f"Unable to parse boolean from value '{value}'")


def _coerce_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _register_node(nodes: dict[int, Node], node_id: int, lon: float, lat: float) -> None:
    existing = nodes.get(node_id)
    if existing is None:
        nodes[node_id] = Node(node_id=node_id, latitude=lat, longitude=lon)
    elif (existing.latitude, existing.longitude) != (lat, lon):
        raise ValueError(
            f"Node {node_id} has conflicting coordinates "
            f"({existing.latitude}, {existing.longitude}) and ({lat}, {lon})."
        )


def build_graph_from_features(features: Iterable[dict]) -> InMemoryRoadGraph:
    """Turn GeoJSON LineString features into an indexed road graph.

    The first and last coordinates of each feature are its tower nodes; the
    interior coordinates become pillar points. Features that are not
    LineStrings are skipped.
    """

    nodes: dict[int, Node] = {}
    edges: list[RoadEdge] = []
    for position, feature in enumerate(features):
        geometry = feature.get("geometry") or {}
        if geometry.get("type") != "LineString":
            logger.warning(f"Skipping feature {position}: expected LineString, got {geometry.get('type')}")
            continue
        coordinates = geometry.get("coordinates") or []
        if len(coordinates) < 2:
            raise ValueError(f"Feature {position} needs at least two coordinates.")
        properties = feature.get("properties") or {}
        try:
            edge_id = int(properties.get("id", feature.get("id", position)))
            base_node = int(properties["base_node"])
            adj_node = int(properties["adj_node"])
        except (KeyError, TypeError, ValueError) as exc:
            raise ValueError(f"Feature {position} is missing edge or node identifiers: {exc}") from exc

        points = [(float(coord[1]), float(coord[0])) for coord in coordinates]
        _register_node(nodes, base_node, lon=points[0][1], lat=points[0][0])
        _register_node(nodes, adj_node, lon=points[-1][1], lat=points[-1][0])

        edges.append(
            RoadEdge(
                edge_id=edge_id,
                base_node=base_node,
                adj_node=adj_node,
                pillars=tuple(points[1:-1]),
                forward=_coerce_bool(properties.get("forward"), True),
                backward=_coerce_bool(properties.get("backward"), True),
                roundabout=_coerce_bool(properties.get("roundabout"), False),
                name=_coerce_text(properties.get("name")),
                street_ref=_coerce_text(properties.get("street_ref")),
            )
        )
    return InMemoryRoadGraph(nodes.values(), edges)


@functools.lru_cache(maxsize=1)
def load_road_graph(source: Optional[Path] = None) -> InMemoryRoadGraph:
    """Load the routing graph from the configured GeoJSON file."""

    graph_path = source or settings.graph_file
    if not graph_path.exists():
        raise FileNotFoundError(f"Road graph file not found: {graph_path}")

    with graph_path.open(mode="r", encoding="utf-8") as handle:
        payload = json.load(handle)
    if payload.get("type") != "FeatureCollection":
        raise ValueError(f"Road graph file '{graph_path}' is not a GeoJSON FeatureCollection.")

    graph = build_graph_from_features(payload.get("features") or [])
    logger.info(f"Loaded road graph from {graph_path}")
    return graph
