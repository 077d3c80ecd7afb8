"""Narrowing a pair of corridor segments to one compass side."""

from __future__ import annotations

import math
from typing import Optional, Sequence

from ...models.domain import BufferSegment, Direction, LatLon
from ..geospatial import azimuth_degrees, euclidean_degrees

BEARING_DUE_NORTHEAST = 45
BEARING_DUE_SOUTHEAST = 135
BEARING_DUE_SOUTHWEST = 225
BEARING_DUE_NORTHWEST = 315

# Share of the terminal separation the judged axis must carry.
MIN_AXIS_SHARE = 0.5
MAX_BEARING_DIFF = 120

# (upstream, downstream) target bearings.
_TARGET_BEARINGS = {
    Direction.NORTHEAST: (BEARING_DUE_NORTHEAST, BEARING_DUE_SOUTHWEST),
    Direction.SOUTHEAST: (BEARING_DUE_SOUTHEAST, BEARING_DUE_NORTHWEST),
    Direction.SOUTHWEST: (BEARING_DUE_SOUTHWEST, BEARING_DUE_NORTHEAST),
    Direction.NORTHWEST: (BEARING_DUE_NORTHWEST, BEARING_DUE_SOUTHEAST),
}


def _java_round(value: float) -> int:
    return math.floor(value + 0.5)


def compare_coordinates(first: float, second: float, positive_direction: bool, build_upstream: bool) -> bool:
    """True to keep the first segment.

    ``positive_direction`` is set for NORTH and EAST. Upstream segments are
    judged from their far end, which flips the comparison.
    """

    if positive_direction:
        return first < second if build_upstream else first > second
    return first > second if build_upstream else first < second


def _select_cardinal(
    first: LatLon, second: LatLon, direction: Direction, build_upstream: bool, min_axis_share: float
) -> bool:
    min_axis_diff = euclidean_degrees(first[0], first[1], second[0], second[1]) * min_axis_share
    if direction in (Direction.NORTH, Direction.SOUTH):
        axis = 0
        positive = direction is Direction.NORTH
    else:
        axis = 1
        positive = direction is Direction.EAST
    # Too perpendicular to the requested axis to judge
    if abs(first[axis] - second[axis]) < min_axis_diff:
        return True
    return compare_coordinates(first[axis], second[axis], positive, build_upstream)


def _select_intercardinal(first: LatLon, second: LatLon, direction: Direction, build_upstream: bool) -> bool:
    bearing = _java_round(azimuth_degrees(first[0], first[1], second[0], second[1]))
    upstream_target, downstream_target = _TARGET_BEARINGS[direction]
    target = upstream_target if build_upstream else downstream_target
    diff = abs(bearing - target)
    if diff > 180:
        diff = 360 - diff
    return diff <= MAX_BEARING_DIFF


def select(
    segments: Optional[Sequence[BufferSegment]],
    build_upstream: bool,
    direction: Direction,
    min_axis_share: float = MIN_AXIS_SHARE,
) -> list[BufferSegment]:
    """Keep the segment of the first/last pair lying on the ``direction`` side.

    BOTH and UNKNOWN, as well as fewer than two segments, pass through
    unchanged. For cardinal directions the first segment is kept whenever the
    terminal points differ along the judged axis by less than ``min_axis_share``
    of their total separation.
    """

    if not segments:
        return []
    if len(segments) < 2 or not direction.filters:
        return list(segments)

    first_segment, second_segment = segments[0], segments[-1]
    first = first_segment.terminal_point(build_upstream)
    second = second_segment.terminal_point(build_upstream)

    if direction.is_cardinal:
        keep_first = _select_cardinal(first, second, direction, build_upstream, min_axis_share)
    else:
        keep_first = _select_intercardinal(first, second, direction, build_upstream)
    return [first_segment if keep_first else second_segment]
