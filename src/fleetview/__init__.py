"""fleetview - Async view engine for fleet tracking device telemetry."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("fleetview")
except PackageNotFoundError:
    __version__ = "0+local"
from fleetview.client import FleetClient
from fleetview.config import FleetConfig
from fleetview.device_view import DeviceView
from fleetview.exceptions import (
    FleetApiError,
    FleetAuthenticationError,
    FleetConfigError,
    FleetError,
    FleetNotFoundError,
    FleetTransportError,
)
from fleetview.ingestion.elements import DecodedSignals, decode_elements
from fleetview.ingestion.status import MovementStatus, classify_movement
from fleetview.models import (
    ConnectionState,
    DeviceSnapshot,
    HistoryPage,
    HistoryRow,
    IoElement,
    RealTimeStatus,
    SummaryStatistics,
    TrackPoint,
)
from fleetview.pager import HistoryPager
from fleetview.rendering import RenderPlan, TrackRenderer
from fleetview.state.view import DeviceViewState, PaginationCursor, ViewPhase
from fleetview.window import TimePreset, TimeWindow, resolve_window

__all__ = [
    "__version__",
    "ConnectionState",
    "DecodedSignals",
    "DeviceSnapshot",
    "DeviceView",
    "DeviceViewState",
    "FleetApiError",
    "FleetAuthenticationError",
    "FleetClient",
    "FleetConfig",
    "FleetConfigError",
    "FleetError",
    "FleetNotFoundError",
    "FleetTransportError",
    "HistoryPage",
    "HistoryPager",
    "HistoryRow",
    "IoElement",
    "MovementStatus",
    "PaginationCursor",
    "RealTimeStatus",
    "RenderPlan",
    "SummaryStatistics",
    "TimePreset",
    "TimeWindow",
    "TrackPoint",
    "TrackRenderer",
    "ViewPhase",
    "classify_movement",
    "decode_elements",
    "resolve_window",
]
