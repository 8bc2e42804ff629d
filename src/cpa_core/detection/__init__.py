"""
Collision detection: validation, tracking, classification and alarm
"""

from .validator import InputValidator, is_fresh, CLOCK_SKEW_TOLERANCE_S
from .track_store import TrackStore
from .alarm import AlarmStateMachine
from .interfaces import (
    SnapshotProvider,
    NotificationSink,
    build_notification_payload,
)
from .engine import CollisionEngine, EngineStats

__all__ = [
    'InputValidator',
    'is_fresh',
    'CLOCK_SKEW_TOLERANCE_S',
    'TrackStore',
    'AlarmStateMachine',
    'SnapshotProvider',
    'NotificationSink',
    'build_notification_payload',
    'CollisionEngine',
    'EngineStats',
]
