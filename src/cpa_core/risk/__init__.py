"""
Risk Assessment Module

CPA/TCPA over spherical-earth coordinates
"""

from .cpa_tcpa import (
    RELATIVE_VELOCITY_FLOOR,
    calculate_cpa,
)

__all__ = [
    'RELATIVE_VELOCITY_FLOOR',
    'calculate_cpa',
]
