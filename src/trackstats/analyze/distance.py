# trackstats/analyze/distance.py
"""
Great-circle distance between track samples.
"""

from __future__ import annotations

from haversine import haversine, Unit

from trackstats.models import Point

EARTH_RADIUS_M = 6_371_000.0  # mean Earth radius in meters


def distance_m(
        lat1: float, lon1: float, lat2: float, lon2: float, *,
        earth_radius_m: float = EARTH_RADIUS_M,
) -> float:
    """
    Haversine distance in meters between two lat/lon points (decimal degrees).

    The central angle comes from `haversine` on the unit sphere and is scaled
    by `earth_radius_m`, so the sphere radius is exactly the configured one.
    Spherical model, roughly 0.3% off an ellipsoid: fine for activities,
    not for surveying.

    Raises:
      ValueError if a latitude or longitude is out of range.
    """
    return earth_radius_m * haversine((lat1, lon1), (lat2, lon2), unit=Unit.RADIANS)


def segment_distance_m(p0: Point, p1: Point, *, earth_radius_m: float = EARTH_RADIUS_M) -> float:
    """Distance in meters between two consecutive track points."""
    return distance_m(
        p0.latitude, p0.longitude, p1.latitude, p1.longitude,
        earth_radius_m=earth_radius_m,
    )
