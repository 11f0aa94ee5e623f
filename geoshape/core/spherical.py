"""
Spherical Math Utilities.

Provides great-circle calculations between geographic coordinates on a
spherical earth model. Used by the insertion policy to rank neighbouring
vertices, so only consistency matters, not geodetic precision.
"""

import math

from geoshape.core.geo_point import GeoPoint

# Mean earth radius in meters
EARTH_RADIUS = 6371009.0


def great_circle_distance(a: GeoPoint, b: GeoPoint) -> float:
    """
    Calculates the great-circle distance between two points.

    Uses the haversine formula, which stays well conditioned for the short
    distances between neighbouring vertices.

    Args:
        a: First point.
        b: Second point.

    Returns:
        float: Distance in meters. Symmetric, non-negative, zero for equal points.
    """
    return EARTH_RADIUS * central_angle(a, b)


def central_angle(a: GeoPoint, b: GeoPoint) -> float:
    """
    Returns the angle between two points as seen from the earth's center.

    Args:
        a: First point.
        b: Second point.

    Returns:
        float: Angle in radians, in [0, pi].
    """
    lat1 = math.radians(a.latitude)
    lat2 = math.radians(b.latitude)
    d_lat = lat2 - lat1
    d_lon = math.radians(b.longitude - a.longitude)

    h = (
        math.sin(d_lat / 2) ** 2
        + math.cos(lat1) * math.cos(lat2) * math.sin(d_lon / 2) ** 2
    )
    # Rounding can push h just past 1 for antipodal points
    h = min(1.0, max(0.0, h))
    return 2 * math.asin(math.sqrt(h))