"""Movement status classification."""

from __future__ import annotations

from enum import StrEnum

from fleetview.ingestion.elements import decode_elements
from fleetview.models.history import HistoryRow


class MovementStatus(StrEnum):
    MOVING = "Moving"
    IDLE = "Idle"
    STOPPED = "Stopped"


def classify_movement(speed_kmh: float | None, ignition_on: bool) -> MovementStatus:
    """Classify a sample as moving, idling or stopped.

    Any positive speed wins over the ignition reading: a moving vehicle
    with ignition off is taken as sensor lag, not an error.
    """
    if speed_kmh is not None and speed_kmh > 0:
        return MovementStatus.MOVING
    if ignition_on:
        return MovementStatus.IDLE
    return MovementStatus.STOPPED


def classify_row(row: HistoryRow) -> MovementStatus:
    return classify_movement(row.speed, decode_elements(row.elements).ignition_on)
