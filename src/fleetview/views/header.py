"""Device header panel."""

from __future__ import annotations

from datetime import datetime, tzinfo

from pydantic import BaseModel, ConfigDict

from fleetview.ingestion.elements import decode_elements, decode_power_voltage
from fleetview.models.device import DeviceSnapshot


def format_timestamp(value: datetime | None, tz: tzinfo | None = None, *, default: str = "Never") -> str:
    if value is None:
        return default
    local = value.astimezone(tz) if tz is not None else value.astimezone()
    return local.strftime("%Y-%m-%d %H:%M:%S")


class HeaderView(BaseModel):
    model_config = ConfigDict(frozen=True)

    title: str
    online: bool
    connection_label: str
    imei: str
    model: str
    sim: str
    last_seen: str
    ignition_on: bool
    ignition_label: str
    power_voltage: str | None = None
    satellites_label: str

    @property
    def power_badge(self) -> str | None:
        """Battery badge text; ``None`` hides the badge entirely."""
        if self.power_voltage is None:
            return None
        return f"🔋 {self.power_voltage}"


def render_header(snapshot: DeviceSnapshot, *, tz: tzinfo | None = None) -> HeaderView:
    """Build the header from the device snapshot's own status block.

    The power badge is only produced when the snapshot carries IO element
    ``67``; a missing element is not shown as ``0.0V``.
    """
    status = snapshot.real_time_status
    online = status is not None and status.is_online

    ignition = status.ignition if status is not None else None
    if ignition is None and status is not None:
        ignition = decode_elements(status.io_elements).ignition
    ignition_on = ignition is True

    voltage = decode_power_voltage(status.io_elements) if status is not None else None
    last_seen = (status.last_seen if status is not None else None) or snapshot.last_seen

    return HeaderView(
        title=(snapshot.vehicle.plate_number if snapshot.vehicle else None) or "Unassigned Vehicle",
        online=online,
        connection_label="🟢 Online" if online else "🟡 Offline",
        imei=snapshot.imei or "",
        model=snapshot.device_model or "",
        sim=(snapshot.sim_card.sim_number if snapshot.sim_card else None) or "N/A",
        last_seen=format_timestamp(last_seen, tz),
        ignition_on=ignition_on,
        ignition_label=f"Ignition: {'ON' if ignition_on else 'OFF'}",
        power_voltage=f"{voltage:.1f}V" if voltage is not None else None,
        satellites_label=f"📡 {(status.satellites if status is not None else None) or 0} Sats",
    )
