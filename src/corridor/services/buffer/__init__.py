"""Corridor buffer services."""

from .errors import CorridorError, DeadEnd, DegenerateGeometry, InvalidParameter, NoMatchingRoad
from .service import build_buffer, compute_corridor, filter_by_direction

__all__ = [
    "compute_corridor",
    "filter_by_direction",
    "build_buffer",
    "CorridorError",
    "InvalidParameter",
    "NoMatchingRoad",
    "DeadEnd",
    "DegenerateGeometry",
]
