"""Bounds checks, freshness window and jump detection."""
from __future__ import annotations

import math

import pytest

from cpa_core import Position, VesselSnapshot
from cpa_core.detection import CLOCK_SKEW_TOLERANCE_S, InputValidator, is_fresh
from cpa_core.types import TrackedPosition
from tests.fakes import NOW_MS, OWN_POS, north_of, snapshot


@pytest.fixture()
def validator() -> InputValidator:
    return InputValidator(max_vessel_speed_mps=30.0, jump_speed_multiplier=1.5)


class TestValidate:
    def test_valid_snapshot(self, validator):
        assert validator.validate(snapshot(OWN_POS, course_deg=45, speed_kn=12)) == []
        assert validator.is_valid(snapshot(OWN_POS))

    def test_missing_position(self, validator):
        assert validator.validate(snapshot(None)) == ["Missing position"]
        assert validator.validate(None) == ["Missing position"]

    @pytest.mark.parametrize(
        "position, expected",
        [
            (Position(90.5, 0.0), "Latitude out of bounds"),
            (Position(-91.0, 0.0), "Latitude out of bounds"),
            (Position(float("nan"), 0.0), "Invalid latitude"),
            (Position(0.0, 180.5), "Longitude out of bounds"),
            (Position(0.0, float("inf")), "Invalid longitude"),
        ],
    )
    def test_coordinate_bounds(self, validator, position, expected):
        errors = validator.validate(snapshot(position))
        assert len(errors) == 1
        assert errors[0].startswith(expected)

    def test_bounds_are_inclusive(self, validator):
        assert validator.is_valid(snapshot(Position(90.0, -180.0)))
        assert validator.is_valid(snapshot(Position(-90.0, 180.0)))

    def test_negative_speed(self, validator):
        snap = VesselSnapshot(OWN_POS, course_rad=0.0, speed_mps=-0.1)
        assert validator.validate(snap)[0].startswith("Negative speed")

    def test_non_finite_speed(self, validator):
        snap = VesselSnapshot(OWN_POS, course_rad=0.0, speed_mps=float("nan"))
        assert validator.validate(snap)[0].startswith("Invalid speed")

    @pytest.mark.parametrize("course", [-0.01, 2 * math.pi, 7.0])
    def test_course_out_of_range(self, validator, course):
        snap = VesselSnapshot(OWN_POS, course_rad=course, speed_mps=5.0)
        errors = validator.validate(snap)
        assert len(errors) == 1
        assert errors[0].startswith("Course out of range")

    def test_course_just_below_full_turn(self, validator):
        snap = VesselSnapshot(OWN_POS, course_rad=2 * math.pi - 1e-9, speed_mps=5.0)
        assert validator.is_valid(snap)

    def test_all_violations_reported(self, validator):
        snap = VesselSnapshot(Position(95.0, 200.0), course_rad=-1.0, speed_mps=-1.0)
        assert len(validator.validate(snap)) == 4


class TestFreshness:
    def test_current(self):
        assert is_fresh(snapshot(OWN_POS, timestamp_ms=NOW_MS), NOW_MS, 600)

    def test_at_max_age(self):
        assert is_fresh(snapshot(OWN_POS, timestamp_ms=NOW_MS - 600_000), NOW_MS, 600)

    def test_older_than_max_age(self):
        assert not is_fresh(snapshot(OWN_POS, timestamp_ms=NOW_MS - 600_001), NOW_MS, 600)

    def test_clock_skew_tolerated(self):
        future = NOW_MS + CLOCK_SKEW_TOLERANCE_S * 1000
        assert is_fresh(snapshot(OWN_POS, timestamp_ms=future), NOW_MS, 600)

    def test_too_far_in_future(self):
        future = NOW_MS + (CLOCK_SKEW_TOLERANCE_S + 1) * 1000
        assert not is_fresh(snapshot(OWN_POS, timestamp_ms=future), NOW_MS, 600)

    def test_missing_timestamp(self):
        assert not is_fresh(snapshot(OWN_POS, timestamp_ms=None), NOW_MS, 600)
        assert not is_fresh(None, NOW_MS, 600)


class TestJumpDetection:
    def test_threshold(self, validator):
        assert validator.max_implied_speed_mps == pytest.approx(45.0)

    def test_plausible_move(self, validator):
        previous = TrackedPosition(OWN_POS, NOW_MS - 10_000)
        current = snapshot(north_of(OWN_POS, 200.0), timestamp_ms=NOW_MS)
        assert not validator.detect_jump(current, previous)

    def test_implausible_move(self, validator):
        previous = TrackedPosition(OWN_POS, NOW_MS - 10_000)
        current = snapshot(north_of(OWN_POS, 5000.0), timestamp_ms=NOW_MS)
        assert validator.detect_jump(current, previous)

    def test_no_previous_fix(self, validator):
        assert not validator.detect_jump(snapshot(OWN_POS), None)

    @pytest.mark.parametrize("elapsed_ms", [0, -5_000])
    def test_non_positive_elapsed_time(self, validator, elapsed_ms):
        previous = TrackedPosition(OWN_POS, NOW_MS - elapsed_ms)
        current = snapshot(north_of(OWN_POS, 50_000.0), timestamp_ms=NOW_MS)
        assert not validator.detect_jump(current, previous)

    def test_missing_timestamp(self, validator):
        previous = TrackedPosition(OWN_POS, NOW_MS - 10_000)
        current = snapshot(north_of(OWN_POS, 50_000.0), timestamp_ms=None)
        assert not validator.detect_jump(current, previous)
