"""
Bearing and velocity helpers (0=North, clockwise)
"""
import numpy as np
from typing import Optional, Tuple

from ..utils import WrapTo360
from .geodesy import extract_lat_lon


def forward_azimuth(origin, destination) -> Optional[float]:
    """
    Initial great-circle bearing from origin toward destination

    Args:
        origin: Position (degrees)
        destination: Position (degrees)

    Returns:
        Bearing (degrees, [0, 360), 0=North, clockwise), or None when either
        position is unusable
    """
    a = extract_lat_lon(origin)
    b = extract_lat_lon(destination)
    if a is None or b is None:
        return None

    lat1, lon1 = np.radians(a)
    lat2, lon2 = np.radians(b)
    dlon = lon2 - lon1

    east = np.sin(dlon) * np.cos(lat2)
    north = np.cos(lat1) * np.sin(lat2) - np.sin(lat1) * np.cos(lat2) * np.cos(dlon)

    # atan2(East, North) gives angle from North, clockwise
    return float(WrapTo360(np.degrees(np.arctan2(east, north))))


def course_speed_to_velocity(course_rad: float, speed: float) -> Tuple[float, float]:
    """
    Course and speed to a local velocity vector

    Args:
        course_rad: course (radians, 0=North, clockwise)
        speed: speed (m/s)

    Returns:
        (vx, vy) with vx=East, vy=North
    """
    # course=0 (North) -> vx=0, vy=speed
    # course=pi/2 (East) -> vx=speed, vy=0
    vx = speed * np.sin(course_rad)
    vy = speed * np.cos(course_rad)
    return float(vx), float(vy)


def calculate_relative_velocity(
    own_velocity: Tuple[float, float],
    target_velocity: Tuple[float, float]
) -> Tuple[float, float]:
    """
    Relative velocity vector (target relative to own vessel)

    Args:
        own_velocity: (vx, vy) in m/s
        target_velocity: (vx, vy) in m/s

    Returns:
        (vx, vy)
    """
    return (
        target_velocity[0] - own_velocity[0],
        target_velocity[1] - own_velocity[1]
    )
