"""
CPA Core - Quick Start Example

One own vessel, a handful of targets, and the alarm notifications they cause
"""
import logging
import time

from cpa_core import (
    CollisionEngine,
    EngineConfig,
    NotificationSink,
    Position,
    SnapshotProvider,
    VesselSnapshot,
    build_notification_payload,
)
from cpa_core.utils import format_distance, knots_to_mps

import numpy as np


class DictProvider(SnapshotProvider):
    def __init__(self):
        self.vessels = {}

    def get(self, vessel_id):
        return self.vessels.get(vessel_id)


class PrintSink(NotificationSink):
    def publish(self, active, threats):
        payload = build_notification_payload(active, threats)
        print(f"  >> notification: {payload['state'].upper()} - {payload['message']}")


def report(lat, lon, course_deg=None, speed_kn=None, now_ms=None):
    return VesselSnapshot(
        position=Position(lat, lon),
        course_rad=np.radians(course_deg) if course_deg is not None else None,
        speed_mps=knots_to_mps(speed_kn) if speed_kn is not None else None,
        timestamp_ms=now_ms,
    )


def main():
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    print("=" * 60)
    print("CPA Core - Quick Start")
    print("=" * 60)

    now_ms = time.time() * 1000.0
    provider = DictProvider()
    config = EngineConfig(safe_passing_distance_m=500, hysteresis_m=200, time_window_min=10)
    engine = CollisionEngine(provider, PrintSink(), config=config, self_id="own")

    # 1. Own vessel: heading North at 10 kn
    provider.vessels["own"] = report(60.0, 24.0, course_deg=0, speed_kn=10, now_ms=now_ms)
    print("\n[Own Vessel] 60.000N 024.000E, COG 000, SOG 10 kn")

    # 2. Targets
    scenarios = [
        ("ferry", report(60.0167, 24.0, course_deg=180, speed_kn=10, now_ms=now_ms), "head-on, 1 nm"),
        ("tanker", report(60.0167, 24.04, course_deg=180, speed_kn=12, now_ms=now_ms), "reciprocal, 2.2 km abeam"),
        ("buoy", report(60.006, 24.0, now_ms=now_ms), "no COG/SOG, 670 m"),
        ("trawler", report(60.3, 24.0, course_deg=90, speed_kn=4, now_ms=now_ms), "33 km, out of range"),
    ]

    print("\n[Evaluations]")
    for vessel_id, snapshot, description in scenarios:
        provider.vessels[vessel_id] = snapshot
        result = engine.handle_position_change(vessel_id)
        print(f"{vessel_id:8s} ({description}): {result.outcome.value.upper()}")
        if result.threat is not None:
            threat = result.threat
            print(
                f"  method={threat.method.value}, distance={format_distance(threat.distance_m)}, "
                f"bearing={threat.bearing_deg:.0f}°"
            )

    # 3. Ferry alters course; buoy report goes away
    print("\n[Situation Update]")
    provider.vessels["ferry"] = report(60.0167, 24.0, course_deg=90, speed_kn=10, now_ms=now_ms)
    del provider.vessels["buoy"]
    for vessel_id in ("ferry", "buoy"):
        result = engine.handle_position_change(vessel_id)
        print(f"{vessel_id:8s}: {result.outcome.value.upper()}")

    print(f"\n[Status] {engine.status_message()}")

    engine.shutdown()
    print("\n" + "=" * 60)


if __name__ == "__main__":
    main()
