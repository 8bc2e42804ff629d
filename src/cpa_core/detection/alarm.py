"""
Binary collision alarm driven by threat-set emptiness
"""
import logging
import threading
from collections import deque
from typing import Mapping, Optional

from ..types import AlarmState, ThreatRecord
from .interfaces import NotificationSink

logger = logging.getLogger(__name__)


class AlarmStateMachine:
    """
    INACTIVE <-> ACTIVE, one notification per transition

    The machine holds no timers. Debounce comes from the engine widening its
    distance thresholds while the alarm is active.

    Transitions queue a notification. In immediate mode the queue is drained
    right away; with ``deferred=True`` it is drained only by ``flush()``, so an
    owner can publish after releasing its own locks.

    Args:
        sink: receives publish(active, threats) on each transition
        deferred: hold notifications until flush()
    """

    def __init__(self, sink: Optional[NotificationSink] = None, deferred: bool = False):
        self.sink = sink
        self.deferred = deferred
        self.state = AlarmState.INACTIVE
        self._outbox = deque()
        # Reentrant: a sink may trigger another evaluation from publish()
        self._delivery_lock = threading.RLock()

    @property
    def active(self) -> bool:
        return self.state is AlarmState.ACTIVE

    @property
    def pending(self) -> int:
        """Notifications queued but not yet delivered"""
        return len(self._outbox)

    def update(self, threats: Mapping[str, ThreatRecord]) -> Optional[AlarmState]:
        """
        Re-derive the alarm from the current threat mapping

        Returns:
            the new state if a transition happened, else None
        """
        should_be_active = len(threats) > 0

        if should_be_active and not self.active:
            self.state = AlarmState.ACTIVE
            logger.info("Collision alarm ACTIVATED - tracking %d vessel(s)", len(threats))
            self._notify(True, dict(threats))
            return self.state

        if not should_be_active and self.active:
            self.state = AlarmState.INACTIVE
            logger.info("Collision alarm CLEARED")
            self._notify(False, {})
            return self.state

        return None

    def force_clear(self) -> bool:
        """
        Drop to INACTIVE, queueing a clearing notification if it was active

        Returns:
            True if a clearing notification was queued
        """
        if not self.active:
            return False
        self.state = AlarmState.INACTIVE
        self._notify(False, {})
        return True

    def reset(self) -> None:
        """Back to INACTIVE without publishing; queued notifications are kept"""
        self.state = AlarmState.INACTIVE

    def flush(self) -> int:
        """
        Deliver queued notifications in transition order

        Returns:
            number of notifications handed to the sink
        """
        delivered = 0
        with self._delivery_lock:
            while self._outbox:
                active, threats = self._outbox.popleft()
                self._publish(active, threats)
                delivered += 1
        return delivered

    def _notify(self, active: bool, threats: Mapping[str, ThreatRecord]) -> None:
        self._outbox.append((active, threats))
        if not self.deferred:
            self.flush()

    def _publish(self, active: bool, threats: Mapping[str, ThreatRecord]) -> None:
        if self.sink is None:
            return
        try:
            self.sink.publish(active, threats)
        except Exception as e:
            logger.error("Failed to publish collision notification: %s", e)
