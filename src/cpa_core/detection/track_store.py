"""
Per-vessel state: last accepted fix (jump detection) and current threats
"""
import logging
from typing import Callable, Dict, Optional

from ..types import Position, ThreatRecord, TrackedPosition, VesselSnapshot

logger = logging.getLogger(__name__)


class TrackStore:
    """
    Bounded per-vessel memory of one engine

    ``previous_positions`` never holds more than ``tracking_limit`` entries.
    ``threats`` is not capped here; range filtering upstream keeps it small.

    Args:
        tracking_limit: max vessels remembered for jump detection
        retention_s: age after which a remembered fix is dropped by a sweep
    """

    def __init__(self, tracking_limit: int = 1000, retention_s: float = 1200.0):
        self.tracking_limit = tracking_limit
        self.retention_s = retention_s
        self._positions: Dict[str, TrackedPosition] = {}
        self._threats: Dict[str, ThreatRecord] = {}

    # ------------------------------------------------------------------
    # Previous positions
    # ------------------------------------------------------------------

    def previous_position(self, vessel_id: str) -> Optional[TrackedPosition]:
        return self._positions.get(vessel_id)

    @property
    def tracked_count(self) -> int:
        return len(self._positions)

    def record_position(
        self,
        vessel_id: str,
        position: Position,
        timestamp_ms: float,
        now_ms: float
    ) -> bool:
        """
        Remember a vessel's latest accepted fix

        A new vessel arriving at capacity triggers a sweep first; if the store
        is still full the fix is not recorded and jump detection is unavailable
        for that vessel until room frees up.

        Returns:
            True if recorded
        """
        if vessel_id not in self._positions and len(self._positions) >= self.tracking_limit:
            self.sweep_positions(now_ms)
            if len(self._positions) >= self.tracking_limit:
                logger.warning(
                    "Tracking limit reached (%d vessels), not tracking %s",
                    self.tracking_limit, vessel_id,
                )
                return False

        self._positions[vessel_id] = TrackedPosition(position, timestamp_ms)
        return True

    def sweep_positions(self, now_ms: float) -> int:
        """
        Drop fixes older than retention_s

        Returns:
            number of entries removed
        """
        max_age_ms = self.retention_s * 1000.0
        stale = [
            vessel_id for vessel_id, entry in self._positions.items()
            if entry.timestamp_ms is not None and (now_ms - entry.timestamp_ms) > max_age_ms
        ]
        for vessel_id in stale:
            del self._positions[vessel_id]

        if stale:
            logger.debug("Cleaned up %d stale position entries", len(stale))
        return len(stale)

    # ------------------------------------------------------------------
    # Threats
    # ------------------------------------------------------------------

    @property
    def threats(self) -> Dict[str, ThreatRecord]:
        """Copy of the current threat mapping"""
        return dict(self._threats)

    @property
    def has_threats(self) -> bool:
        return bool(self._threats)

    def get_threat(self, vessel_id: str) -> Optional[ThreatRecord]:
        return self._threats.get(vessel_id)

    def set_threat(self, vessel_id: str, record: ThreatRecord) -> bool:
        """
        Insert or refresh a threat

        Returns:
            True if the threat set went from empty to non-empty
        """
        was_empty = not self._threats
        if vessel_id not in self._threats:
            logger.debug("%s: added to collision tracking", vessel_id)
        self._threats[vessel_id] = record
        return was_empty

    def clear_threat(self, vessel_id: str) -> bool:
        """
        Remove a threat if present

        Returns:
            True if the threat set went from non-empty to empty
        """
        if self._threats.pop(vessel_id, None) is None:
            return False
        logger.debug("%s: removed from collision tracking", vessel_id)
        return not self._threats

    def sweep_threats(
        self,
        fetch: Callable[[str], Optional[VesselSnapshot]],
        is_fresh: Callable[[VesselSnapshot], bool]
    ) -> bool:
        """
        Re-fetch every threatening vessel and drop those gone or stale

        Args:
            fetch: vessel id -> snapshot or None
            is_fresh: freshness predicate on a snapshot

        Returns:
            True if the threat set went from non-empty to empty
        """
        if not self._threats:
            return False

        removed = 0
        for vessel_id in list(self._threats):
            snapshot = fetch(vessel_id)
            if snapshot is None or not is_fresh(snapshot):
                del self._threats[vessel_id]
                removed += 1

        if removed:
            logger.debug("Cleaned up %d stale collision entries", removed)
        return removed > 0 and not self._threats

    def reset(self) -> None:
        self._positions.clear()
        self._threats.clear()
