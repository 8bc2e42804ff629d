from .utils import (
    KNOTS_TO_MPS,
    NM_TO_METERS,
    WrapTo360,
    wrap_to_range,
    is_finite_number,
    rad_to_deg,
    knots_to_mps,
    mps_to_knots,
    nm_to_meters,
    meters_to_nm,
    format_distance,
    format_duration,
    format_speed,
)

__all__ = [
    'KNOTS_TO_MPS',
    'NM_TO_METERS',
    'WrapTo360',
    'wrap_to_range',
    'is_finite_number',
    'rad_to_deg',
    'knots_to_mps',
    'mps_to_knots',
    'nm_to_meters',
    'meters_to_nm',
    'format_distance',
    'format_duration',
    'format_speed',
]
