"""
Vessel snapshots, CPA results and threat records
"""
import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, NamedTuple, Optional


class DetectionMethod(Enum):
    """
    How a threat was classified
    """
    CPA = "CPA"                  # CPA/TCPA from course and speed of both vessels
    GEOMETRIC = "GEOMETRIC"      # proximity only, one vessel lacks COG/SOG


class EvaluationOutcome(Enum):
    """
    Terminal result of one triggered evaluation
    """
    NO_DATA = "no_data"          # snapshot missing or provider failed
    STALE = "stale"              # outside the freshness window
    INVALID = "invalid"          # out-of-bounds coordinates, speed or course
    JUMPED = "jumped"            # implausible implied speed, update skipped
    OUT_OF_RANGE = "out_of_range"
    THREAT = "threat"
    SAFE = "safe"


class AlarmState(Enum):
    INACTIVE = "inactive"
    ACTIVE = "active"


class Position(NamedTuple):
    latitude: float   # degrees, [-90, 90]
    longitude: float  # degrees, [-180, 180]


@dataclass(frozen=True)
class VesselSnapshot:
    """
    Normalized position/course/speed report for one vessel

    Attributes:
        position: last fix, None when the source has no fix
        course_rad: course over ground (radians, 0=North, clockwise, [0, 2*pi))
        speed_mps: speed over ground (m/s)
        timestamp_ms: capture time (epoch milliseconds)
        length_m, beam_m: carried for adapters, unused by detection
    """
    position: Optional[Position]
    course_rad: Optional[float] = None
    speed_mps: Optional[float] = None
    timestamp_ms: Optional[float] = None
    length_m: Optional[float] = None
    beam_m: Optional[float] = None

    @property
    def has_motion(self) -> bool:
        """Course and speed both reported"""
        return self.course_rad is not None and self.speed_mps is not None


class TrackedPosition(NamedTuple):
    """Last accepted fix of a vessel, kept for jump detection"""
    position: Position
    timestamp_ms: float


class CPAResult(NamedTuple):
    """
    Closest point of approach between two vessels
    """
    cpa_distance_m: float      # inf when diverging
    tcpa_s: float              # 0 when diverging, inf on parallel course
    diverging: bool
    relative_speed_mps: float
    parallel_course: bool

    @property
    def tcpa_min(self) -> float:
        return self.tcpa_s / 60.0


def _json_number(value: Optional[float]) -> Optional[float]:
    if value is None or math.isinf(value) or math.isnan(value):
        return None
    return float(value)


@dataclass(frozen=True)
class ThreatRecord:
    """
    One currently threatening vessel, as published with the alarm
    """
    vessel_id: str
    method: DetectionMethod
    bearing_deg: Optional[float]           # [0, 360) from own vessel
    distance_m: float                      # current separation
    position: Position                     # target position
    cpa_distance_m: Optional[float] = None
    tcpa_min: Optional[float] = None
    relative_speed_mps: Optional[float] = None
    target_course_deg: Optional[float] = None
    target_speed_mps: Optional[float] = None
    parallel_course: bool = False
    reason: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Notification-friendly view; non-finite values become None"""
        return {
            "vessel_id": self.vessel_id,
            "method": self.method.value,
            "cpa_distance_m": _json_number(self.cpa_distance_m),
            "tcpa_min": _json_number(self.tcpa_min),
            "relative_speed_mps": _json_number(self.relative_speed_mps),
            "bearing_deg": _json_number(self.bearing_deg),
            "distance_m": _json_number(self.distance_m),
            "target_course_deg": _json_number(self.target_course_deg),
            "target_speed_mps": _json_number(self.target_speed_mps),
            "position": {
                "latitude": self.position.latitude,
                "longitude": self.position.longitude,
            },
            "parallel_course": self.parallel_course,
            "reason": self.reason,
        }


class EvaluationResult(NamedTuple):
    outcome: EvaluationOutcome
    vessel_id: str
    threat: Optional[ThreatRecord] = None

    @property
    def is_threat(self) -> bool:
        return self.outcome is EvaluationOutcome.THREAT
