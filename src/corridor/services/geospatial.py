"""Geospatial helper functions."""

from __future__ import annotations

import math

EARTH_RADIUS_M = 6_371_000.0


def plane_distance_m(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Distance in meters on a flat projection, shrinking longitude by the mean latitude."""

    d_lat = math.radians(lat2 - lat1)
    d_lon = math.radians(lon2 - lon1)
    shrunk = math.cos(math.radians((lat1 + lat2) / 2)) * d_lon
    return EARTH_RADIUS_M * math.sqrt(d_lat * d_lat + shrunk * shrunk)


def azimuth_degrees(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Compass azimuth from (lat1, lon1) to (lat2, lon2) using the flat orientation."""

    shrink_factor = math.cos(math.radians((lat1 + lat2) / 2))
    orientation = math.atan2(lat2 - lat1, shrink_factor * (lon2 - lon1))
    azimuth = math.pi / 2 - orientation
    if azimuth < 0:
        azimuth += 2 * math.pi
    return math.degrees(round(azimuth, 4)) % 360


def manhattan_degrees(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Sum of absolute latitude and longitude differences."""

    return abs(lat2 - lat1) + abs(lon2 - lon1)


def euclidean_degrees(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Straight-line separation in raw degree space."""

    return math.hypot(lat2 - lat1, lon2 - lon1)
