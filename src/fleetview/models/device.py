"""Device snapshot models.

A snapshot is the backend's ``GET /devices/{id}`` record: identity,
linked vehicle/SIM and the optional real-time status block with its
sparse IO element map.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Annotated, Any

from pydantic import AliasChoices, BaseModel, BeforeValidator, ConfigDict, Field, field_validator

from fleetview.ingestion.normalize import safe_float, safe_int, safe_str
from fleetview.models._base import FleetBaseModel, FleetEnum, FleetTimestamp


class ConnectionState(FleetEnum):
    """Tracker connection state as reported by the backend."""

    UNKNOWN = "unknown"
    ONLINE = "online"
    OFFLINE = "offline"


class IoElement(BaseModel):
    """A single IO element value with its optional unit."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    value: Any = None
    unit: str | None = None


def parse_io_elements(value: Any) -> dict[str, IoElement]:
    """Normalize an IO element payload to ``{key: IoElement}``.

    Keys are stringified so numeric codes from JSON (``"239"``) and
    Python ints (``239``) address the same element. Entries may be
    ``{"value": ..., "unit": ...}`` objects or bare scalars.
    """
    if not isinstance(value, Mapping):
        return {}
    elements: dict[str, IoElement] = {}
    for key, item in value.items():
        if isinstance(item, IoElement):
            elements[str(key)] = item
        elif isinstance(item, Mapping):
            elements[str(key)] = IoElement.model_validate(item)
        else:
            elements[str(key)] = IoElement(value=item)
    return elements


IoElementMap = Annotated[dict[str, IoElement], BeforeValidator(parse_io_elements)]


def _coerce_bool(value: Any) -> bool | None:
    if value is None or isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"1", "true", "on", "yes"}:
            return True
        if lowered in {"0", "false", "off", "no"}:
            return False
        return None
    number = safe_float(value)
    return None if number is None else number != 0


class RealTimeStatus(FleetBaseModel):
    """Live status block of a device snapshot.

    Parameters
    ----------
    connection_status : ConnectionState
        ``online`` / ``offline`` (``unknown`` when absent).
    last_seen : datetime or None
        Instant of the last packet received from the tracker.
    ignition : bool or None
        Ignition state as reported in the status block.
    satellites : int or None
        Satellites in view for the last fix.
    latitude, longitude : float or None
        Last fix position in degrees.
    speed : float or None
        Speed in km/h.
    heading : float or None
        Heading in degrees.
    io_elements : dict
        Sparse IO element map keyed by alias or numeric code.
    """

    connection_status: ConnectionState = ConnectionState.UNKNOWN
    last_seen: FleetTimestamp = None
    ignition: bool | None = None
    satellites: int | None = None
    latitude: float | None = Field(default=None, validation_alias=AliasChoices("latitude", "lat"))
    longitude: float | None = Field(default=None, validation_alias=AliasChoices("longitude", "lng", "lon"))
    speed: float | None = None
    heading: float | None = Field(default=None, validation_alias=AliasChoices("heading", "angle", "course"))
    io_elements: IoElementMap = Field(
        default_factory=dict,
        validation_alias=AliasChoices("io_elements", "ioElements", "elements"),
    )

    @field_validator("latitude", "longitude", "speed", "heading", mode="before")
    @classmethod
    def _coerce_floats(cls, value: Any) -> float | None:
        return safe_float(value)

    @field_validator("satellites", mode="before")
    @classmethod
    def _coerce_int(cls, value: Any) -> int | None:
        return safe_int(value)

    @field_validator("ignition", mode="before")
    @classmethod
    def _coerce_ignition(cls, value: Any) -> bool | None:
        return _coerce_bool(value)

    @property
    def is_online(self) -> bool:
        return self.connection_status == ConnectionState.ONLINE

    @property
    def position(self) -> tuple[float, float] | None:
        """``(latitude, longitude)`` when both coordinates are known."""
        if self.latitude is None or self.longitude is None:
            return None
        return (self.latitude, self.longitude)


class LinkedVehicle(FleetBaseModel):
    """Vehicle the device is installed in."""

    id: str | None = None
    plate_number: str | None = None

    @field_validator("id", "plate_number", mode="before")
    @classmethod
    def _coerce_str(cls, value: Any) -> str | None:
        return safe_str(value)


class LinkedSimCard(FleetBaseModel):
    """SIM card fitted to the device."""

    id: str | None = None
    sim_number: str | None = None

    @field_validator("id", "sim_number", mode="before")
    @classmethod
    def _coerce_str(cls, value: Any) -> str | None:
        return safe_str(value)


class DeviceSnapshot(FleetBaseModel):
    """Device record including its latest live status.

    Snapshots are replaced wholesale on every fetch; they are never
    patched field by field.
    """

    id: str
    imei: str | None = None
    device_model: str | None = None
    firmware_version: str | None = None
    status: str | None = None
    last_seen: FleetTimestamp = None
    vehicle: LinkedVehicle | None = None
    sim_card: LinkedSimCard | None = None
    real_time_status: RealTimeStatus | None = None

    @field_validator("id", "imei", "device_model", "firmware_version", "status", mode="before")
    @classmethod
    def _coerce_str(cls, value: Any) -> str | None:
        return safe_str(value)

    @property
    def current_position(self) -> RealTimeStatus | None:
        """The live status block when it carries a usable fix."""
        status = self.real_time_status
        if status is None or status.position is None:
            return None
        return status
