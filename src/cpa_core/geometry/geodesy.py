"""
Spherical-earth distance and local tangent-plane offsets

Coordinates are (latitude, longitude) in degrees. Every function returns None
instead of raising when a coordinate is missing or non-finite, so callers can
treat "cannot compute" as data rather than as a failure.
"""
import numpy as np
from typing import Optional, Tuple

from ..utils import is_finite_number, wrap_to_range

# Mean Earth radius (IUGG), slightly larger than the common 6371 km
EARTH_MEAN_RADIUS_M = 6371008.8


def extract_lat_lon(point) -> Optional[Tuple[float, float]]:
    """
    Pull (latitude, longitude) out of a Position-like object

    Args:
        point: anything with ``latitude``/``longitude`` attributes, or None

    Returns:
        (lat, lon) as Python floats, or None if missing or non-finite
    """
    if point is None:
        return None
    lat = getattr(point, "latitude", None)
    lon = getattr(point, "longitude", None)
    if not (is_finite_number(lat) and is_finite_number(lon)):
        return None
    return float(lat), float(lon)


def haversine_distance(origin, destination) -> Optional[float]:
    """
    Great-circle distance between two positions

    Args:
        origin: Position (degrees)
        destination: Position (degrees)

    Returns:
        distance in meters, or None when either position is unusable
    """
    a = extract_lat_lon(origin)
    b = extract_lat_lon(destination)
    if a is None or b is None:
        return None

    lat1, lon1 = np.radians(a)
    lat2, lon2 = np.radians(b)
    dlat = lat2 - lat1
    dlon = lon2 - lon1

    h = np.sin(dlat / 2) ** 2 + np.cos(lat1) * np.cos(lat2) * np.sin(dlon / 2) ** 2
    # Guard against h drifting a hair above 1 for antipodal points
    h = min(max(float(h), 0.0), 1.0)
    angular = 2 * np.arctan2(np.sqrt(h), np.sqrt(1 - h))

    return float(EARTH_MEAN_RADIUS_M * angular)


def local_offset_m(origin, destination) -> Optional[Tuple[float, float]]:
    """
    Offset of destination from origin on a local tangent plane

    East component is the longitude delta, wrapped to [-180, 180), scaled by
    the cosine of the mean latitude; north component is the latitude delta;
    both times the Earth radius. Valid over the short ranges collision
    detection works at.

    Returns:
        (east_m, north_m), or None when either position is unusable
    """
    a = extract_lat_lon(origin)
    b = extract_lat_lon(destination)
    if a is None or b is None:
        return None

    dlat = np.radians(b[0] - a[0])
    # Shortest way round the antimeridian
    dlon = np.radians(wrap_to_range(b[1] - a[1], -180.0, 180.0))
    mean_lat = np.radians((a[0] + b[0]) / 2)

    east = dlon * np.cos(mean_lat) * EARTH_MEAN_RADIUS_M
    north = dlat * EARTH_MEAN_RADIUS_M
    return float(east), float(north)
