"""Historical telemetry log models."""

from __future__ import annotations

from typing import Any

from pydantic import AliasChoices, ConfigDict, Field, computed_field, field_validator

from fleetview.ingestion.normalize import safe_float, safe_int
from fleetview.models._base import FleetBaseModel, FleetTimestamp
from fleetview.models.device import IoElementMap


class GpsFix(FleetBaseModel):
    """GPS part of a history row."""

    latitude: float | None = Field(default=None, validation_alias=AliasChoices("latitude", "lat"))
    longitude: float | None = Field(default=None, validation_alias=AliasChoices("longitude", "lng", "lon"))
    altitude: float | None = None
    heading: float | None = Field(default=None, validation_alias=AliasChoices("heading", "angle", "course"))
    satellites: int | None = None

    @field_validator("latitude", "longitude", "altitude", "heading", mode="before")
    @classmethod
    def _coerce_floats(cls, value: Any) -> float | None:
        return safe_float(value)

    @field_validator("satellites", mode="before")
    @classmethod
    def _coerce_int(cls, value: Any) -> int | None:
        return safe_int(value)


class TelemetryReading(FleetBaseModel):
    """Telemetry scalars of a history row.

    Only ``speed`` is interpreted; other scalars the backend sends are
    kept as model extras for detail views.
    """

    model_config = ConfigDict(extra="allow")

    speed: float | None = None

    @field_validator("speed", mode="before")
    @classmethod
    def _coerce_speed(cls, value: Any) -> float | None:
        return safe_float(value)


class HistoryRow(FleetBaseModel):
    """One historical sample.

    ``gps``, ``telemetry`` and ``elements`` are independently optional.
    ``elements`` may key the same signal by friendly alias or numeric
    code; see :func:`fleetview.ingestion.elements.decode_elements`.
    """

    time: FleetTimestamp = Field(default=None, validation_alias=AliasChoices("time", "timestamp", "recordedAt"))
    gps: GpsFix | None = None
    telemetry: TelemetryReading | None = None
    elements: IoElementMap = Field(
        default_factory=dict,
        validation_alias=AliasChoices("elements", "io_elements", "ioElements"),
    )

    @property
    def speed(self) -> float:
        """Speed in km/h, ``0`` when the row carries no telemetry."""
        if self.telemetry is None or self.telemetry.speed is None:
            return 0.0
        return self.telemetry.speed


class HistoryPage(FleetBaseModel):
    """One page of the history log.

    ``has_next`` is a heuristic: a page is assumed to have a successor
    when it came back full. A last page of exactly ``limit`` rows
    therefore still reports ``has_next``; the backend does not expose
    a remaining count.
    """

    rows: tuple[HistoryRow, ...] = ()
    page: int = 1
    limit: int
    returned_records: int = 0

    @computed_field  # type: ignore[prop-decorator]
    @property
    def has_next(self) -> bool:
        return self.returned_records == self.limit
