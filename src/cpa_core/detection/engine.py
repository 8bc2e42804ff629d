"""
CPA/TCPA collision detection for one own vessel against reported targets
"""
import logging
import threading
import time
from dataclasses import asdict, dataclass
from typing import Any, Callable, Dict, Optional

from ..config import EngineConfig
from ..geometry import forward_azimuth, haversine_distance
from ..risk import calculate_cpa
from ..types import (
    AlarmState,
    CPAResult,
    DetectionMethod,
    EvaluationOutcome,
    EvaluationResult,
    ThreatRecord,
    VesselSnapshot,
)
from ..utils import format_distance, format_duration, format_speed, rad_to_deg
from .alarm import AlarmStateMachine
from .interfaces import NotificationSink, SnapshotProvider
from .track_store import TrackStore
from .validator import InputValidator, is_fresh, snapshot_age_s

logger = logging.getLogger(__name__)


def _epoch_ms() -> float:
    return time.time() * 1000.0


@dataclass
class EngineStats:
    checks_performed: int = 0
    cpa_calculations: int = 0
    geometric_fallbacks: int = 0
    position_jumps_detected: int = 0
    skipped_stale_data: int = 0
    skipped_out_of_range: int = 0
    alarms_triggered: int = 0
    last_cleanup_ms: Optional[float] = None


class CollisionEngine:
    """
    Threat classifier and alarm owner for one own vessel

    Each triggered evaluation pulls both snapshots, runs them through a fixed
    sequence of gates (data, freshness, validity, jump, range) and classifies
    the target by CPA/TCPA, or by proximity alone when either vessel lacks
    course or speed. The threat set drives a single binary alarm.

    All state mutation is serialized by one lock per engine. Notifications are
    delivered after that lock is released, so a sink may query the engine.

    Args:
        provider: snapshot source for own and target vessels
        sink: receives alarm transitions, outside the engine lock
        config: thresholds and limits (defaults when omitted)
        self_id: own vessel identifier as known to the provider
        clock: epoch milliseconds, injectable for tests
    """

    SELF_ALIAS = "self"

    def __init__(
        self,
        provider: SnapshotProvider,
        sink: Optional[NotificationSink] = None,
        config: Optional[EngineConfig] = None,
        self_id: str = SELF_ALIAS,
        clock: Callable[[], float] = _epoch_ms
    ):
        self.config = config or EngineConfig()
        self.provider = provider
        self.self_id = self_id
        self._clock = clock
        self._lock = threading.Lock()
        self._call_count = 0

        self.validator = InputValidator(
            max_vessel_speed_mps=self.config.max_vessel_speed_mps,
            jump_speed_multiplier=self.config.jump_speed_multiplier,
        )
        self.store = TrackStore(
            tracking_limit=self.config.tracking_limit,
            retention_s=self.config.position_retention_s,
        )
        self.alarm = AlarmStateMachine(sink, deferred=True)
        self.stats = EngineStats()

        for warning in self.config.warnings():
            logger.warning("Config warning: %s", warning)

        logger.info(
            "CPA/TCPA detector initialized. Own vessel: %s. CPA threshold=%.0fm, "
            "hysteresis=%.0fm, TCPA window=%.0fmin, range=%s",
            self.self_id,
            self.config.safe_passing_distance_m,
            self.config.hysteresis_m,
            self.config.time_window_min,
            format_distance(self.config.max_range_m),
        )

    # ------------------------------------------------------------------
    # Entry points
    # ------------------------------------------------------------------

    def is_self(self, vessel_id: str) -> bool:
        return vessel_id == self.self_id or vessel_id == self.SELF_ALIAS

    def handle_position_change(self, vessel_id: str) -> Optional[EvaluationResult]:
        """Trigger hook: evaluate any vessel other than our own."""
        if not vessel_id or self.is_self(vessel_id):
            return None
        return self.evaluate(vessel_id)

    def evaluate(self, target_id: str, now_ms: Optional[float] = None) -> EvaluationResult:
        """
        Classify one target vessel and update the alarm

        Args:
            target_id: vessel whose position changed
            now_ms: evaluation time (epoch ms), clock when omitted

        Returns:
            EvaluationResult; never raises for bad or missing data
        """
        with self._lock:
            if now_ms is None:
                now_ms = self._clock()
            result = self._evaluate(target_id, now_ms)
        self.alarm.flush()
        return result

    def sweep(self, now_ms: Optional[float] = None) -> None:
        """Run the periodic cleanup immediately."""
        with self._lock:
            if now_ms is None:
                now_ms = self._clock()
            self._sweep(now_ms)
        self.alarm.flush()

    # ------------------------------------------------------------------
    # Gates
    # ------------------------------------------------------------------

    def _evaluate(self, target_id: str, now_ms: float) -> EvaluationResult:
        self._call_count += 1
        self.stats.checks_performed += 1

        if self._call_count % self.config.cleanup_every == 0:
            self._sweep(now_ms)
            logger.debug("Cleanup triggered at check #%d", self._call_count)

        own = self._fetch(self.self_id)
        target = self._fetch(target_id)
        if own is None or target is None:
            missing = self.self_id if own is None else target_id
            logger.debug("%s: snapshot not available", missing)
            return self._conclude(target_id, EvaluationOutcome.NO_DATA)

        freshness = self.config.freshness_limit_s
        for vessel_id, snapshot in ((self.self_id, own), (target_id, target)):
            if not is_fresh(snapshot, now_ms, freshness):
                self.stats.skipped_stale_data += 1
                age = snapshot_age_s(snapshot, now_ms)
                logger.debug(
                    "%s: data stale (age=%s, max=%.0fs)",
                    vessel_id, format_duration(age), freshness,
                )
                return self._conclude(target_id, EvaluationOutcome.STALE)

        for vessel_id, snapshot in ((self.self_id, own), (target_id, target)):
            errors = self.validator.validate(snapshot)
            if errors:
                logger.debug("%s: data validation failed: %s", vessel_id, ", ".join(errors))
                return self._conclude(target_id, EvaluationOutcome.INVALID)

        # Own vessel is trusted; only targets are checked for jumps
        if self.validator.detect_jump(target, self.store.previous_position(target_id)):
            self.stats.position_jumps_detected += 1
            logger.warning("Position jump detected for %s, update skipped", target_id)
            # Prior classification is left standing
            return EvaluationResult(EvaluationOutcome.JUMPED, target_id)

        distance = haversine_distance(own.position, target.position)
        if distance is None or distance > self.config.max_range_m:
            self.stats.skipped_out_of_range += 1
            logger.debug(
                "%s: out of range (dist=%s, max=%s)",
                target_id, format_distance(distance), format_distance(self.config.max_range_m),
            )
            return self._conclude(target_id, EvaluationOutcome.OUT_OF_RANGE)

        self.store.record_position(target_id, target.position, target.timestamp_ms, now_ms)

        logger.debug("%s: processing, dist=%s", target_id, format_distance(distance))

        cpa = calculate_cpa(own, target)
        if cpa is not None:
            self.stats.cpa_calculations += 1
            record = self._check_cpa(own, target, target_id, distance, cpa)
        else:
            self.stats.geometric_fallbacks += 1
            record = self._check_geometric(own, target, target_id, distance)

        if record is None:
            return self._conclude(target_id, EvaluationOutcome.SAFE)
        return self._conclude(target_id, EvaluationOutcome.THREAT, record)

    def _check_cpa(
        self,
        own: VesselSnapshot,
        target: VesselSnapshot,
        target_id: str,
        distance: float,
        cpa: CPAResult
    ) -> Optional[ThreatRecord]:
        """
        Primary classification

        A threat needs CPA within the active threshold and, unless the
        courses are parallel, TCPA within the time window.
        """
        if cpa.diverging:
            logger.debug("%s: diverging, relSpeed=%s", target_id, format_speed(cpa.relative_speed_mps))
            return None

        threshold = self.config.active_threshold_m(self.alarm.active)
        logger.debug(
            "%s: CPA=%s, TCPA=%s, relSpeed=%s, threshold=%s, parallel=%s",
            target_id,
            format_distance(cpa.cpa_distance_m),
            format_duration(cpa.tcpa_s),
            format_speed(cpa.relative_speed_mps),
            format_distance(threshold),
            cpa.parallel_course,
        )

        if cpa.cpa_distance_m > threshold:
            return None

        # Parallel tracks never separate; distance alone decides
        if not cpa.parallel_course and cpa.tcpa_min > self.config.time_window_min:
            logger.debug(
                "%s: TCPA beyond window (%.1fmin > %.0fmin)",
                target_id, cpa.tcpa_min, self.config.time_window_min,
            )
            return None

        logger.debug(
            "%s: *** COLLISION RISK *** CPA=%s, TCPA=%s",
            target_id, format_distance(cpa.cpa_distance_m), format_duration(cpa.tcpa_s),
        )
        return ThreatRecord(
            vessel_id=target_id,
            method=DetectionMethod.CPA,
            bearing_deg=forward_azimuth(own.position, target.position),
            distance_m=distance,
            position=target.position,
            cpa_distance_m=cpa.cpa_distance_m,
            tcpa_min=cpa.tcpa_min,
            relative_speed_mps=cpa.relative_speed_mps,
            target_course_deg=rad_to_deg(target.course_rad),
            target_speed_mps=target.speed_mps,
            parallel_course=cpa.parallel_course,
        )

    def _check_geometric(
        self,
        own: VesselSnapshot,
        target: VesselSnapshot,
        target_id: str,
        distance: float
    ) -> Optional[ThreatRecord]:
        """Fallback for vessels with unknown motion: conservative proximity check"""
        threshold = self.config.geometric_threshold_m(self.alarm.active)
        missing = "own vessel missing COG/SOG" if not own.has_motion else "target missing COG/SOG"
        logger.debug(
            "%s: geometric fallback (%s), dist=%s, threshold=%s",
            target_id, missing, format_distance(distance), format_distance(threshold),
        )

        if distance >= threshold:
            return None

        logger.debug("%s: *** GEOMETRIC PROXIMITY ALERT *** dist=%s", target_id, format_distance(distance))
        return ThreatRecord(
            vessel_id=target_id,
            method=DetectionMethod.GEOMETRIC,
            bearing_deg=forward_azimuth(own.position, target.position),
            distance_m=distance,
            position=target.position,
            target_course_deg=rad_to_deg(target.course_rad),
            target_speed_mps=target.speed_mps,
            reason=f"Missing course/speed data ({missing}) - using conservative proximity check",
        )

    # ------------------------------------------------------------------
    # State helpers
    # ------------------------------------------------------------------

    def _fetch(self, vessel_id: str) -> Optional[VesselSnapshot]:
        try:
            return self.provider.get(vessel_id)
        except Exception as e:
            logger.warning("Error getting vessel data for %s: %s", vessel_id, e)
            return None

    def _conclude(
        self,
        target_id: str,
        outcome: EvaluationOutcome,
        record: Optional[ThreatRecord] = None
    ) -> EvaluationResult:
        if record is not None:
            self.store.set_threat(target_id, record)
        else:
            self.store.clear_threat(target_id)
        self._update_alarm()
        return EvaluationResult(outcome, target_id, record)

    def _update_alarm(self) -> None:
        if self.alarm.update(self.store.threats) is AlarmState.ACTIVE:
            self.stats.alarms_triggered += 1

    def _sweep(self, now_ms: float) -> None:
        freshness = self.config.freshness_limit_s
        self.store.sweep_positions(now_ms)
        self.store.sweep_threats(
            self._fetch,
            lambda snapshot: is_fresh(snapshot, now_ms, freshness),
        )
        self.stats.last_cleanup_ms = now_ms
        self._update_alarm()

    # ------------------------------------------------------------------
    # Monitoring / lifecycle
    # ------------------------------------------------------------------

    def status(self) -> Dict[str, Any]:
        with self._lock:
            threats = self.store.threats
            return {
                "alarm_active": self.alarm.active,
                "active_threats": len(threats),
                "tracked_vessels": self.store.tracked_count,
                "stats": asdict(self.stats),
                "threats": threats,
            }

    def status_message(self) -> str:
        status = self.status()
        if status["alarm_active"]:
            return f"ALARM: {status['active_threats']} collision(s) detected"
        return (
            f"Monitoring {status['tracked_vessels']} vessel(s), "
            f"{status['stats']['checks_performed']} checks performed"
        )

    def reset(self) -> None:
        """Forget all vessels, threats and counters without notifying."""
        with self._lock:
            self._reset()

    def _reset(self) -> None:
        self.store.reset()
        self.alarm.reset()
        self.stats = EngineStats()
        self._call_count = 0
        logger.debug("Collision detector state reset")

    def shutdown(self) -> None:
        """Clear an active alarm, log final stats and reset."""
        with self._lock:
            s = self.stats
            logger.info(
                "Shutdown stats: %d checks, %d CPA calcs, %d fallbacks, %d alarms, "
                "%d jumps, %d stale, %d out-of-range",
                s.checks_performed, s.cpa_calculations, s.geometric_fallbacks,
                s.alarms_triggered, s.position_jumps_detected, s.skipped_stale_data,
                s.skipped_out_of_range,
            )
            if self.alarm.force_clear():
                logger.info("Cleared active collision notification on shutdown")
            self._reset()
        self.alarm.flush()
