"""
Snapshot bounds checks, freshness and position-jump detection
"""
import logging
from typing import List, Optional

import numpy as np

from ..geometry import haversine_distance
from ..types import VesselSnapshot
from ..utils import is_finite_number

logger = logging.getLogger(__name__)

LAT_BOUND = 90.0
LON_BOUND = 180.0
COURSE_LIMIT_RAD = 2 * np.pi
# Reports up to this far in the future are accepted (clock skew)
CLOCK_SKEW_TOLERANCE_S = 60.0


class InputValidator:
    """
    Gatekeeper for snapshots before they reach CPA geometry

    Args:
        max_vessel_speed_mps: fastest plausible vessel speed (m/s)
        jump_speed_multiplier: slack on that speed before a move counts as a jump
    """

    def __init__(
        self,
        max_vessel_speed_mps: float = 30.0,
        jump_speed_multiplier: float = 1.5
    ):
        self.max_vessel_speed_mps = max_vessel_speed_mps
        self.jump_speed_multiplier = jump_speed_multiplier

    @property
    def max_implied_speed_mps(self) -> float:
        return self.max_vessel_speed_mps * self.jump_speed_multiplier

    def validate(self, snapshot: Optional[VesselSnapshot]) -> List[str]:
        """
        Bounds-check a snapshot

        Returns:
            one message per violation; empty list means valid
        """
        if snapshot is None or snapshot.position is None:
            return ["Missing position"]

        errors = []
        lat = snapshot.position.latitude
        lon = snapshot.position.longitude

        if not is_finite_number(lat):
            errors.append(f"Invalid latitude: {lat}")
        elif abs(lat) > LAT_BOUND:
            errors.append(f"Latitude out of bounds: {lat}")

        if not is_finite_number(lon):
            errors.append(f"Invalid longitude: {lon}")
        elif abs(lon) > LON_BOUND:
            errors.append(f"Longitude out of bounds: {lon}")

        speed = snapshot.speed_mps
        if speed is not None:
            if not is_finite_number(speed):
                errors.append(f"Invalid speed: {speed}")
            elif speed < 0:
                errors.append(f"Negative speed: {speed}")

        course = snapshot.course_rad
        if course is not None:
            if not is_finite_number(course):
                errors.append(f"Invalid course: {course}")
            elif course < 0 or course >= COURSE_LIMIT_RAD:
                errors.append(f"Course out of range: {course} radians")

        return errors

    def is_valid(self, snapshot: Optional[VesselSnapshot]) -> bool:
        return not self.validate(snapshot)

    def detect_jump(self, current, previous) -> bool:
        """
        Implausible move between two fixes

        Args:
            current: VesselSnapshot or TrackedPosition (needs position, timestamp_ms)
            previous: the prior fix, or None

        Returns:
            True when the implied speed exceeds max_implied_speed_mps. Missing
            data or non-positive elapsed time is not an anomaly and yields False.
        """
        if current is None or previous is None:
            return False
        if current.position is None or previous.position is None:
            return False
        if current.timestamp_ms is None or previous.timestamp_ms is None:
            return False

        elapsed_s = (current.timestamp_ms - previous.timestamp_ms) / 1000.0
        if elapsed_s <= 0:
            return False

        distance = haversine_distance(previous.position, current.position)
        if distance is None:
            return False

        implied_speed = distance / elapsed_s
        if implied_speed > self.max_implied_speed_mps:
            logger.debug(
                "Implied speed %.1f m/s over %.0f m in %.1f s exceeds %.1f m/s",
                implied_speed, distance, elapsed_s, self.max_implied_speed_mps,
            )
            return True
        return False


def is_fresh(
    snapshot: Optional[VesselSnapshot],
    now_ms: float,
    max_age_s: float
) -> bool:
    """
    Snapshot age within [-CLOCK_SKEW_TOLERANCE_S, max_age_s]
    """
    if snapshot is None or snapshot.timestamp_ms is None:
        return False
    age_s = (now_ms - snapshot.timestamp_ms) / 1000.0
    return -CLOCK_SKEW_TOLERANCE_S <= age_s <= max_age_s


def snapshot_age_s(snapshot: Optional[VesselSnapshot], now_ms: float) -> Optional[float]:
    if snapshot is None or snapshot.timestamp_ms is None:
        return None
    return (now_ms - snapshot.timestamp_ms) / 1000.0
