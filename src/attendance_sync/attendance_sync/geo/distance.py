"""Great-circle distance helpers.

All functions are pure: identical inputs always give identical outputs.
"""

from __future__ import annotations

from math import asin, cos, radians, sin, sqrt
from typing import Iterable, Optional, Tuple

from ..core.constants import EARTH_RADIUS_METERS
from .model import Coordinates, GeofenceSite


def haversine_distance_meters(a: Coordinates, b: Coordinates) -> float:
    """Haversine distance in meters on a sphere of the Earth's mean radius."""
    phi1, phi2 = radians(a.latitude), radians(b.latitude)
    d_phi = radians(b.latitude - a.latitude)
    d_lambda = radians(b.longitude - a.longitude)

    h = sin(d_phi / 2) ** 2 + cos(phi1) * cos(phi2) * sin(d_lambda / 2) ** 2
    # Rounding can push h a hair above 1 for antipodal points.
    h = min(1.0, h)
    return 2 * EARTH_RADIUS_METERS * asin(sqrt(h))


def is_within_radius(point: Coordinates, center: Coordinates, radius_meters: float) -> bool:
    """Inclusive boundary: a point exactly on the circle counts as inside."""
    return haversine_distance_meters(point, center) <= radius_meters


def nearest_site(point: Coordinates, sites: Iterable[GeofenceSite]) -> Optional[Tuple[GeofenceSite, float]]:
    best: Optional[Tuple[GeofenceSite, float]] = None
    for site in sites:
        distance = haversine_distance_meters(point, site.center)
        if best is None or distance < best[1]:
            best = (site, distance)
    return best
