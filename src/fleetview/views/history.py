"""History log table."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import tzinfo
from typing import Any

from pydantic import BaseModel, ConfigDict

from fleetview._constants import OVERSPEED_KMH
from fleetview.ingestion.elements import decode_elements
from fleetview.ingestion.status import MovementStatus, classify_movement
from fleetview.models.history import HistoryRow
from fleetview.state.view import PaginationCursor

EMPTY_MESSAGE = "No telemetry data found for this period."

STATUS_COLORS: dict[MovementStatus, str] = {
    MovementStatus.MOVING: "#22c55e",
    MovementStatus.IDLE: "#eab308",
    MovementStatus.STOPPED: "#ef4444",
}


class HistoryRowView(BaseModel):
    model_config = ConfigDict(frozen=True)

    time: str
    status: MovementStatus
    status_color: str
    speed: str
    overspeed: bool
    fuel: str
    location: str
    map_url: str | None = None
    attributes: str = ""
    elements: dict[str, str] = {}


class PaginationView(BaseModel):
    model_config = ConfigDict(frozen=True)

    page: int
    label: str
    can_previous: bool
    can_next: bool


class HistoryTable(BaseModel):
    model_config = ConfigDict(frozen=True)

    rows: tuple[HistoryRowView, ...] = ()
    pagination: PaginationView
    empty_message: str | None = None


def _number(value: float) -> str:
    return f"{value:g}"


def _element_text(value: Any, unit: str | None) -> str:
    return f"{value} {unit}" if unit else f"{value}"


def render_row(row: HistoryRow, *, tz: tzinfo | None = None) -> HistoryRowView:
    """Decode and classify one history row for display."""
    signals = decode_elements(row.elements)
    speed = row.speed
    status = classify_movement(speed, signals.ignition_on)

    latitude = row.gps.latitude if row.gps is not None else None
    longitude = row.gps.longitude if row.gps is not None else None
    if latitude and longitude:
        location = f"{latitude:.5f}, {longitude:.5f}"
        map_url: str | None = f"https://www.google.com/maps?q={latitude},{longitude}"
    else:
        location = "No GPS"
        map_url = None

    if row.time is not None:
        local = row.time.astimezone(tz) if tz is not None else row.time.astimezone()
        time_label = local.strftime("%H:%M:%S")
    else:
        time_label = "—"

    return HistoryRowView(
        time=time_label,
        status=status,
        status_color=STATUS_COLORS[status],
        speed=f"{_number(speed)} km/h",
        overspeed=speed > OVERSPEED_KMH,
        fuel="—" if signals.fuel_percent is None else f"{_number(signals.fuel_percent)}%",
        location=location,
        map_url=map_url,
        attributes="" if signals.odometer is None else f"ODO: {_number(signals.odometer)} km",
        elements={key: _element_text(element.value, element.unit) for key, element in row.elements.items()},
    )


def render_pagination(cursor: PaginationCursor) -> PaginationView:
    return PaginationView(
        page=cursor.page,
        label=f"Page {cursor.page}",
        can_previous=cursor.has_previous,
        can_next=cursor.has_next,
    )


def render_history(
    rows: Sequence[HistoryRow],
    cursor: PaginationCursor,
    *,
    tz: tzinfo | None = None,
) -> HistoryTable:
    return HistoryTable(
        rows=tuple(render_row(row, tz=tz) for row in rows),
        pagination=render_pagination(cursor),
        empty_message=None if rows else EMPTY_MESSAGE,
    )
