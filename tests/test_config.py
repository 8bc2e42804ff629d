"""Engine configuration validation and loading."""
from __future__ import annotations

import pytest
from pydantic import ValidationError

from cpa_core import ConfigurationError, CpaCoreError, EngineConfig


class TestDefaults:
    def test_values(self):
        config = EngineConfig()
        assert config.safe_passing_distance_m == 500.0
        assert config.hysteresis_m == 200.0
        assert config.time_window_min == 10.0
        assert config.max_range_m == pytest.approx(18520.0)
        assert config.freshness_limit_s == 600.0
        assert config.max_vessel_speed_mps == 30.0
        assert config.jump_speed_multiplier == 1.5
        assert config.tracking_limit == 1000
        assert config.cleanup_every == 100
        assert config.warnings() == []

    def test_derived_values(self):
        config = EngineConfig()
        assert config.time_window_s == 600.0
        assert config.position_retention_s == 1200.0
        assert config.active_threshold_m(False) == 500.0
        assert config.active_threshold_m(True) == 700.0
        assert config.geometric_threshold_m(False) == 1000.0
        assert config.geometric_threshold_m(True) == 1200.0

    def test_frozen(self):
        config = EngineConfig()
        with pytest.raises(ValidationError):
            config.hysteresis_m = 0.0


class TestValidation:
    def test_errors_are_aggregated(self):
        with pytest.raises(ConfigurationError) as exc_info:
            EngineConfig(safe_passing_distance_m=-1, hysteresis_m=-5, time_window_min=0)

        errors = exc_info.value.errors
        assert len(errors) == 3
        assert any(e.startswith("safe_passing_distance_m") for e in errors)
        assert any(e.startswith("hysteresis_m") for e in errors)
        assert any(e.startswith("time_window_min") for e in errors)
        assert str(exc_info.value).startswith("Configuration errors: ")

    def test_error_hierarchy(self):
        with pytest.raises(CpaCoreError):
            EngineConfig(max_range_m=0)
        with pytest.raises(ValueError):
            EngineConfig(max_range_m=0)

    @pytest.mark.parametrize("value", [float("nan"), float("inf"), "far"])
    def test_non_finite_or_non_numeric(self, value):
        with pytest.raises(ConfigurationError) as exc_info:
            EngineConfig(safe_passing_distance_m=value)
        assert exc_info.value.errors[0].startswith("safe_passing_distance_m")

    def test_unknown_field(self):
        with pytest.raises(ConfigurationError):
            EngineConfig(safe_distance=500)

    def test_zero_hysteresis_allowed(self):
        config = EngineConfig(hysteresis_m=0)
        assert config.active_threshold_m(True) == config.active_threshold_m(False)

    @pytest.mark.parametrize("field", ["tracking_limit", "cleanup_every"])
    def test_counts_must_be_positive(self, field):
        with pytest.raises(ConfigurationError):
            EngineConfig(**{field: 0})


class TestWarnings:
    def test_aggressive_settings(self):
        config = EngineConfig(safe_passing_distance_m=20, time_window_min=90, max_range_m=200_000)
        notes = config.warnings()
        assert len(notes) == 3
        assert any("safe_passing_distance_m" in note for note in notes)
        assert any("time_window_min" in note for note in notes)
        assert any("max_range_m" in note for note in notes)


class TestFromOptions:
    def test_plugin_names(self):
        config = EngineConfig.from_options({
            "safePassingDistanceMeters": 800,
            "alarmHysteresisMeters": 150,
            "timeWindowMinutes": 15,
            "rangeNauticalMiles": 5,
            "timeouts": {"PosFreshBefore": 300},
        })
        assert config.safe_passing_distance_m == 800.0
        assert config.hysteresis_m == 150.0
        assert config.time_window_min == 15.0
        assert config.max_range_m == pytest.approx(9260.0)
        assert config.freshness_limit_s == 300.0

    def test_missing_options_use_defaults(self):
        assert EngineConfig.from_options({}) == EngineConfig()

    def test_invalid_range(self):
        with pytest.raises(ConfigurationError) as exc_info:
            EngineConfig.from_options({"rangeNauticalMiles": "ten"})
        assert exc_info.value.errors[0].startswith("max_range_m")

    def test_negative_range(self):
        with pytest.raises(ConfigurationError):
            EngineConfig.from_options({"rangeNauticalMiles": -1})


class TestFromEnv:
    def test_reads_prefixed_variables(self, monkeypatch):
        monkeypatch.setenv("CPA_SAFE_PASSING_DISTANCE_M", "750")
        monkeypatch.setenv("CPA_TRACKING_LIMIT", "50")
        monkeypatch.setenv("CPA_HYSTERESIS_M", "  ")

        config = EngineConfig.from_env()

        assert config.safe_passing_distance_m == 750.0
        assert config.tracking_limit == 50
        assert config.hysteresis_m == 200.0

    def test_custom_prefix(self, monkeypatch):
        monkeypatch.setenv("SHIP_TIME_WINDOW_MIN", "20")
        assert EngineConfig.from_env(prefix="SHIP_").time_window_min == 20.0

    def test_invalid_value(self, monkeypatch):
        monkeypatch.setenv("CPA_CLEANUP_EVERY", "0")
        with pytest.raises(ConfigurationError):
            EngineConfig.from_env()
