"""
Closest Point of Approach (CPA) and Time to CPA (TCPA) between two vessels
"""
import numpy as np
from typing import Optional

from ..geometry import (
    calculate_relative_velocity,
    course_speed_to_velocity,
    local_offset_m,
)
from ..types import CPAResult, VesselSnapshot
from ..utils import is_finite_number

# Below this relative speed (m/s) both vessels are treated as sharing one velocity
RELATIVE_VELOCITY_FLOOR = 0.01


def calculate_cpa(
    own: VesselSnapshot,
    target: VesselSnapshot
) -> Optional[CPAResult]:
    """
    CPA and TCPA under constant-velocity extrapolation

    Formulas:
    - TCPA = -(P · V) / ||V||²
    - CPA  = ||P + V · TCPA||

    where:
    - P: position of target relative to own vessel (local tangent plane, m)
    - V: velocity of target relative to own vessel (m/s)

    Args:
        own: own vessel snapshot
        target: target vessel snapshot

    Returns:
        CPAResult, or None unless both vessels report a finite course, speed
        and position

    Notes:
        - ||V|| < RELATIVE_VELOCITY_FLOOR: parallel course, TCPA = inf,
          CPA = current separation
        - TCPA < 0: closest approach already passed (diverging), reported as
          CPA = inf, TCPA = 0
    """
    for vessel in (own, target):
        if not (is_finite_number(vessel.course_rad) and is_finite_number(vessel.speed_mps)):
            return None

    offset = local_offset_m(own.position, target.position)
    if offset is None:
        return None

    own_velocity = course_speed_to_velocity(own.course_rad, own.speed_mps)
    target_velocity = course_speed_to_velocity(target.course_rad, target.speed_mps)

    rel_pos = np.array(offset)
    rel_vel = np.array(calculate_relative_velocity(own_velocity, target_velocity))
    rel_speed = float(np.linalg.norm(rel_vel))

    if rel_speed < RELATIVE_VELOCITY_FLOOR:
        return CPAResult(
            cpa_distance_m=float(np.linalg.norm(rel_pos)),
            tcpa_s=float("inf"),
            diverging=False,
            relative_speed_mps=0.0,
            parallel_course=True,
        )

    tcpa = -float(np.dot(rel_pos, rel_vel)) / float(np.dot(rel_vel, rel_vel))

    if tcpa < 0:
        return CPAResult(
            cpa_distance_m=float("inf"),
            tcpa_s=0.0,
            diverging=True,
            relative_speed_mps=rel_speed,
            parallel_course=False,
        )

    cpa_vec = rel_pos + rel_vel * tcpa
    return CPAResult(
        cpa_distance_m=float(np.linalg.norm(cpa_vec)),
        tcpa_s=tcpa,
        diverging=False,
        relative_speed_mps=rel_speed,
        parallel_course=False,
    )
