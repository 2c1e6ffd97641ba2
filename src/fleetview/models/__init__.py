"""Data models for fleet backend responses."""

from fleetview.models._base import FleetBaseModel, FleetEnum, FleetTimestamp
from fleetview.models.device import (
    ConnectionState,
    DeviceSnapshot,
    IoElement,
    LinkedSimCard,
    LinkedVehicle,
    RealTimeStatus,
    parse_io_elements,
)
from fleetview.models.history import GpsFix, HistoryPage, HistoryRow, TelemetryReading
from fleetview.models.telemetry import SummaryStatistics, TrackPoint

__all__ = [
    "ConnectionState",
    "DeviceSnapshot",
    "FleetBaseModel",
    "FleetEnum",
    "FleetTimestamp",
    "GpsFix",
    "HistoryPage",
    "HistoryRow",
    "IoElement",
    "LinkedSimCard",
    "LinkedVehicle",
    "RealTimeStatus",
    "SummaryStatistics",
    "TelemetryReading",
    "TrackPoint",
    "parse_io_elements",
]
