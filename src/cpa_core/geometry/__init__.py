"""
Geodetic utilities for collision detection
"""

from .geodesy import (
    EARTH_MEAN_RADIUS_M,
    extract_lat_lon,
    haversine_distance,
    local_offset_m,
)

from .bearings import (
    forward_azimuth,
    course_speed_to_velocity,
    calculate_relative_velocity,
)

__all__ = [
    # geodesy
    'EARTH_MEAN_RADIUS_M',
    'extract_lat_lon',
    'haversine_distance',
    'local_offset_m',
    # bearings
    'forward_azimuth',
    'course_speed_to_velocity',
    'calculate_relative_velocity',
]
