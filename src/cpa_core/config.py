"""
Engine configuration.

Values are validated once, at construction; this is the only place a
configuration error can surface.
"""
from __future__ import annotations

import os
from typing import Any, Mapping

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .exceptions import ConfigurationError
from .utils import meters_to_nm, nm_to_meters

DEFAULT_RANGE_NM = 10.0


class EngineConfig(BaseModel):
    """Immutable runtime configuration for one CollisionEngine."""

    model_config = ConfigDict(frozen=True, extra="forbid", allow_inf_nan=False)

    safe_passing_distance_m: float = Field(500.0, gt=0)
    hysteresis_m: float = Field(200.0, ge=0)
    time_window_min: float = Field(10.0, gt=0)
    max_range_m: float = Field(nm_to_meters(DEFAULT_RANGE_NM), gt=0)
    freshness_limit_s: float = Field(600.0, gt=0)
    max_vessel_speed_mps: float = Field(30.0, gt=0)  # ~58 kn
    jump_speed_multiplier: float = Field(1.5, gt=0)
    tracking_limit: int = Field(1000, ge=1)
    cleanup_every: int = Field(100, ge=1)

    def __init__(self, **data: Any):
        try:
            super().__init__(**data)
        except ValidationError as exc:
            raise ConfigurationError(_describe(exc)) from None

    @classmethod
    def from_options(cls, options: Mapping[str, Any]) -> "EngineConfig":
        """Build from host plugin options (camelCase names, range in nautical miles)."""
        data: dict[str, Any] = {}
        if options.get("safePassingDistanceMeters") is not None:
            data["safe_passing_distance_m"] = options["safePassingDistanceMeters"]
        if options.get("alarmHysteresisMeters") is not None:
            data["hysteresis_m"] = options["alarmHysteresisMeters"]
        if options.get("timeWindowMinutes") is not None:
            data["time_window_min"] = options["timeWindowMinutes"]
        range_nm = options.get("rangeNauticalMiles")
        if range_nm is not None:
            # Non-numbers pass through untouched so validation reports them
            data["max_range_m"] = (
                nm_to_meters(range_nm)
                if isinstance(range_nm, (int, float)) and not isinstance(range_nm, bool)
                else range_nm
            )
        fresh_before = (options.get("timeouts") or {}).get("PosFreshBefore")
        if fresh_before is not None:
            data["freshness_limit_s"] = fresh_before
        return cls(**data)

    @classmethod
    def from_env(cls, prefix: str = "CPA_") -> "EngineConfig":
        """Build from ``<PREFIX><FIELD>`` environment variables (``.env`` honoured)."""
        load_dotenv()
        data: dict[str, Any] = {}
        for name in cls.model_fields:
            raw = os.getenv(f"{prefix}{name.upper()}")
            if raw is not None and raw.strip():
                data[name] = raw.strip()
        return cls(**data)

    @property
    def time_window_s(self) -> float:
        return self.time_window_min * 60.0

    @property
    def position_retention_s(self) -> float:
        """Age after which a remembered position is swept."""
        return self.freshness_limit_s * 2

    def active_threshold_m(self, alarm_active: bool) -> float:
        """CPA threshold; widened by the hysteresis margin while the alarm is on."""
        if alarm_active:
            return self.safe_passing_distance_m + self.hysteresis_m
        return self.safe_passing_distance_m

    def geometric_threshold_m(self, alarm_active: bool) -> float:
        """Proximity threshold for vessels without course/speed."""
        if alarm_active:
            return self.safe_passing_distance_m * 2 + self.hysteresis_m
        return self.safe_passing_distance_m * 2

    def warnings(self) -> list[str]:
        notes = []
        if self.safe_passing_distance_m < 50:
            notes.append("safe_passing_distance_m < 50m is very aggressive")
        if self.time_window_min > 60:
            notes.append("time_window_min > 60 may cause excessive alerts")
        if meters_to_nm(self.max_range_m) > 50:
            notes.append("max_range_m > 50nm may impact performance with many AIS targets")
        return notes


def _describe(exc: ValidationError) -> list[str]:
    errors = []
    for err in exc.errors():
        loc = ".".join(str(part) for part in err["loc"]) or "config"
        errors.append(f"{loc}: {err['msg']}")
    return errors
