import math
from numbers import Real
from typing import Any, Optional

import numpy as np

# Unit conversions
KNOTS_TO_MPS = 0.5144
NM_TO_METERS = 1852.0


def wrap_to_range(angle, min_val, max_val):
    """
    Wraps an angle to a given range [min_val, max_val).

    The length of the range (max_val - min_val) is assumed to be a full circle (2*pi or 360).

    Args:
        angle (float): The angle value to wrap.
        min_val (float): The minimum value of the range (inclusive).
        max_val (float): The maximum value of the range (exclusive).

    Returns:
        float: The wrapped angle.
    """
    span = max_val - min_val
    if span <= 0:
        raise ValueError("max_val must be greater than min_val.")

    wrapped = (angle - min_val) % span + min_val

    # Snap to min_val if the result is very close to max_val (due to float inaccuracies)
    if np.isclose(wrapped, max_val):
        return min_val

    return wrapped


def WrapTo360(deg):
    """
    Transform an angle in degrees to the range [0, 360).
    """
    return wrap_to_range(deg, 0.0, 360.0)


def is_finite_number(value: Any) -> bool:
    """
    True for real, finite numbers (numpy scalars included).

    ``bool`` is rejected even though it is an ``int`` subclass; a course or
    coordinate of ``True`` is a data error, not the number 1.
    """
    if value is None or isinstance(value, (bool, np.bool_)):
        return False
    if not isinstance(value, (Real, np.number)):
        return False
    return bool(np.isfinite(value))


def rad_to_deg(rad: Optional[float]) -> Optional[float]:
    """Radians to degrees, passing ``None`` through."""
    if rad is None:
        return None
    return float(np.degrees(rad))


def knots_to_mps(knots: float) -> float:
    return knots * KNOTS_TO_MPS


def mps_to_knots(mps: float) -> float:
    return mps / KNOTS_TO_MPS


def nm_to_meters(nm: float) -> float:
    return nm * NM_TO_METERS


def meters_to_nm(meters: float) -> float:
    return meters / NM_TO_METERS


# ========================================
# Log-line formatters
# ========================================

def format_distance(meters: Optional[float]) -> str:
    """Meters below 1 km, nautical miles above."""
    if meters is None:
        return "?"
    if math.isinf(meters):
        return "inf"
    if meters < 1000:
        return f"{meters:.0f}m"
    return f"{meters_to_nm(meters):.2f}nm"


def format_duration(seconds: Optional[float]) -> str:
    if seconds is None:
        return "?"
    if math.isinf(seconds):
        return "inf"
    if seconds < 60:
        return f"{seconds:.0f}s"
    return f"{seconds / 60:.1f}min"


def format_speed(speed_mps: Optional[float]) -> str:
    if speed_mps is None:
        return "?kn"
    return f"{mps_to_knots(speed_mps):.1f}kn"
