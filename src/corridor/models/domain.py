"""Domain models for road graph records and corridor buffers."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from shapely.geometry import LineString

LatLon = tuple[float, float]


@dataclass(frozen=True, slots=True)
class Node:
    """A tower node shared by the edges meeting at it."""

    node_id: int
    latitude: float
    longitude: float

    @property
    def point(self) -> LatLon:
        return (self.latitude, self.longitude)


@dataclass(frozen=True, slots=True)
class RoadEdge:
    """Read-only view of a routing graph edge.

    ``pillars`` holds the intermediate shape points ordered from the base node
    towards the adjacent node; the tower coordinates live on the nodes.
    """

    edge_id: int
    base_node: int
    adj_node: int
    pillars: tuple[LatLon, ...] = ()
    forward: bool = True
    backward: bool = True
    roundabout: bool = False
    name: Optional[str] = None
    street_ref: Optional[str] = None

    @property
    def bidirectional(self) -> bool:
        return self.forward and self.backward

    def other_node(self, node_id: int) -> int:
        if node_id == self.base_node:
            return self.adj_node
        if node_id == self.adj_node:
            return self.base_node
        raise ValueError(f"Node {node_id} is not an endpoint of edge {self.edge_id}.")


@dataclass(frozen=True, slots=True)
class BufferFeature:
    """Position of a walk along the graph.

    A fresh start feature only carries the anchor point on its edge; a walk
    result additionally records the node it stopped at, the distance covered
    before the final edge and the points collected on the way.
    """

    edge_id: int
    point: LatLon
    distance: float = 0.0
    node_id: Optional[int] = None
    path: tuple[LatLon, ...] = field(default_factory=tuple)


@dataclass(frozen=True, slots=True)
class BufferSegment:
    """One directional half of a corridor buffer as (lat, lon) coordinates."""

    coordinates: tuple[LatLon, ...]

    @property
    def start(self) -> LatLon:
        return self.coordinates[0]

    @property
    def end(self) -> LatLon:
        return self.coordinates[-1]

    def terminal_point(self, build_upstream: bool) -> LatLon:
        return self.start if build_upstream else self.end

    def to_linestring(self) -> LineString:
        return LineString([(lon, lat) for lat, lon in self.coordinates])


class Direction(str, Enum):
    UNKNOWN = "UNKNOWN"
    NORTH = "NORTH"
    SOUTH = "SOUTH"
    EAST = "EAST"
    WEST = "WEST"
    NORTHWEST = "NORTHWEST"
    NORTHEAST = "NORTHEAST"
    SOUTHWEST = "SOUTHWEST"
    SOUTHEAST = "SOUTHEAST"
    BOTH = "BOTH"

    @classmethod
    def parse(cls, value: str | "Direction" | None) -> "Direction":
        """Resolve a user supplied direction, falling back to UNKNOWN."""
        if isinstance(value, Direction):
            return value
        if not isinstance(value, str) or not value:
            return cls.UNKNOWN
        try:
            return cls(value.strip().upper())
        except ValueError:
            return cls.UNKNOWN

    @property
    def is_cardinal(self) -> bool:
        return self in _CARDINAL_DIRECTIONS

    @property
    def filters(self) -> bool:
        return self not in (Direction.BOTH, Direction.UNKNOWN)


_CARDINAL_DIRECTIONS = frozenset({Direction.NORTH, Direction.SOUTH, Direction.EAST, Direction.WEST})


@dataclass(frozen=True, slots=True)
class BBox:
    min_lon: float
    max_lon: float
    min_lat: float
    max_lat: float

    @classmethod
    def around(cls, latitude: float, longitude: float, half_size: float) -> "BBox":
        """Square box centred on a point, ``half_size`` degrees in each direction."""
        return cls(
            min_lon=longitude - half_size,
            max_lon=longitude + half_size,
            min_lat=latitude - half_size,
            max_lat=latitude + half_size,
        )
