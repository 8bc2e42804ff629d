"""Interfaces the engine consumes (snapshots) and produces (notifications)."""
from __future__ import annotations

import abc
from typing import Any, Dict, Mapping, Optional

from ..types import ThreatRecord, VesselSnapshot

DEFAULT_SOURCE = "cpa-core"


class SnapshotProvider(abc.ABC):
    """Synchronous pull of the latest normalized snapshot for a vessel."""

    @abc.abstractmethod
    def get(self, vessel_id: str) -> Optional[VesselSnapshot]:
        """Return the vessel's snapshot, or None when nothing is known.

        May raise; the engine maps any failure to a NO_DATA outcome.
        """


class NotificationSink(abc.ABC):
    """Receives one call per alarm transition."""

    @abc.abstractmethod
    def publish(self, active: bool, threats: Mapping[str, ThreatRecord]) -> None:
        """``threats`` is the full mapping on activation and empty on clearing."""


def build_notification_payload(
    active: bool,
    threats: Mapping[str, ThreatRecord],
    source: str = DEFAULT_SOURCE,
    message: str | None = None,
) -> Dict[str, Any]:
    """Render an alarm transition as a host notification value."""
    if active:
        return {
            "state": "alarm",
            "method": ["visual", "sound"],
            "message": message or f"CPA/TCPA collision warning - {len(threats)} threat(s)",
            "source": source,
            "threats": {vessel_id: record.to_dict() for vessel_id, record in threats.items()},
        }
    return {
        "state": "normal",
        "message": message or "No collision threats",
        "source": source,
    }
