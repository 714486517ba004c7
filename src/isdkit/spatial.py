"""Spatial distance utilities for station search."""

from __future__ import annotations

import math

EARTH_RADIUS_KM = 6371.0


def great_circle_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance between two points in kilometres.

    Uses the spherical law of cosines on a sphere of radius 6371 km. All
    arguments are in decimal degrees.

    Args:
        lat1: Latitude of point 1 (decimal degrees, north positive).
        lon1: Longitude of point 1 (decimal degrees, east positive).
        lat2: Latitude of point 2.
        lon2: Longitude of point 2.

    Returns:
        Distance in kilometres.
    """
    lat1_r = math.radians(lat1)
    lat2_r = math.radians(lat2)
    dlon = math.radians(lon2) - math.radians(lon1)
    cos_angle = math.sin(lat1_r) * math.sin(lat2_r) + math.cos(lat1_r) * math.cos(lat2_r) * math.cos(dlon)
    # Rounding can push the cosine just outside [-1, 1] for coincident or
    # antipodal points.
    cos_angle = max(-1.0, min(1.0, cos_angle))
    return math.acos(cos_angle) * EARTH_RADIUS_KM
