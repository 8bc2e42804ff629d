"""
CPA Core - CPA/TCPA Collision Risk Detection

Classifies nearby tracked vessels as collision threats from periodic
position/course/speed reports and raises or clears one debounced alarm.
"""

from .config import EngineConfig
from .exceptions import CpaCoreError, ConfigurationError
from .types import (
    AlarmState,
    CPAResult,
    DetectionMethod,
    EvaluationOutcome,
    EvaluationResult,
    Position,
    ThreatRecord,
    VesselSnapshot,
)
from .geometry import haversine_distance, forward_azimuth
from .risk import calculate_cpa
from .detection import (
    AlarmStateMachine,
    CollisionEngine,
    InputValidator,
    NotificationSink,
    SnapshotProvider,
    TrackStore,
    build_notification_payload,
)


__version__ = "0.1.0"
__author__ = "Maritime Robotics Lab"

__all__ = [
    # Main classes
    "CollisionEngine",
    "EngineConfig",
    "InputValidator",
    "TrackStore",
    "AlarmStateMachine",

    # Interfaces
    "SnapshotProvider",
    "NotificationSink",
    "build_notification_payload",

    # Functions
    "haversine_distance",
    "forward_azimuth",
    "calculate_cpa",

    # Types and enums
    "AlarmState",
    "CPAResult",
    "DetectionMethod",
    "EvaluationOutcome",
    "EvaluationResult",
    "Position",
    "ThreatRecord",
    "VesselSnapshot",

    # Errors
    "CpaCoreError",
    "ConfigurationError",
]
