"""Telemetry summary and GPS track models."""

from __future__ import annotations

from typing import Any

from pydantic import AliasChoices, Field, field_validator, model_validator

from fleetview.ingestion.normalize import safe_float, safe_int
from fleetview.models._base import FleetBaseModel, FleetTimestamp


class TrackPoint(FleetBaseModel):
    """One point of a GPS track.

    The backend stores coordinates GeoJSON-style as ``[longitude, latitude]``
    under ``coordinates``; explicit ``latitude``/``longitude`` keys are
    accepted as well.
    """

    longitude: float
    latitude: float
    time: FleetTimestamp = Field(default=None, validation_alias=AliasChoices("time", "timestamp", "recordedAt"))
    speed: float | None = None

    @model_validator(mode="before")
    @classmethod
    def _unpack_coordinates(cls, values: Any) -> Any:
        if isinstance(values, (list, tuple)) and len(values) >= 2:
            return {"longitude": values[0], "latitude": values[1], "raw": {"coordinates": list(values)}}
        if not isinstance(values, dict):
            return values
        coordinates = values.get("coordinates")
        if isinstance(coordinates, (list, tuple)) and len(coordinates) >= 2:
            merged = dict(values)
            merged.setdefault("longitude", coordinates[0])
            merged.setdefault("latitude", coordinates[1])
            merged.setdefault("raw", values)
            return merged
        return values

    @field_validator("longitude", "latitude", "speed", mode="before")
    @classmethod
    def _coerce_floats(cls, value: Any) -> float | None:
        return safe_float(value)

    def to_lat_lng(self) -> tuple[float, float]:
        """Coordinates in map order ``(latitude, longitude)``."""
        return (self.latitude, self.longitude)


class SummaryStatistics(FleetBaseModel):
    """Aggregates over a time window.

    Parameters
    ----------
    distance_traveled : float or None
        Distance in meters.
    max_speed, avg_speed : float or None
        Speeds in km/h.
    ignition_on_samples : int or None
        Number of samples recorded with ignition on. This is a raw count
        of records, not a duration; the sampling interval is unknown.
    """

    distance_traveled: float | None = None
    max_speed: float | None = None
    avg_speed: float | None = None
    ignition_on_samples: int | None = Field(
        default=None,
        validation_alias=AliasChoices("ignitionOnTime", "ignition_on_time", "ignitionOnSamples", "ignition_on_samples"),
    )

    @field_validator("distance_traveled", "max_speed", "avg_speed", mode="before")
    @classmethod
    def _coerce_floats(cls, value: Any) -> float | None:
        return safe_float(value)

    @field_validator("ignition_on_samples", mode="before")
    @classmethod
    def _coerce_count(cls, value: Any) -> int | None:
        return safe_int(value)
