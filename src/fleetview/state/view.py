"""Device view state models."""

from __future__ import annotations

from datetime import datetime
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field

from fleetview._constants import HISTORY_PAGE_SIZE
from fleetview.models.device import DeviceSnapshot
from fleetview.models.history import HistoryRow
from fleetview.models.telemetry import SummaryStatistics, TrackPoint
from fleetview.rendering.track import RenderPlan
from fleetview.window import TimePreset, TimeWindow


class ViewPhase(StrEnum):
    IDLE = "idle"
    LOADING = "loading"
    READY = "ready"
    REFRESHING = "refreshing"
    FAILED = "failed"


class PaginationCursor(BaseModel):
    """Current history page and whether another one is likely."""

    model_config = ConfigDict(frozen=True)

    page: int = Field(default=1, ge=1)
    limit: int = HISTORY_PAGE_SIZE
    has_next: bool = False

    @property
    def has_previous(self) -> bool:
        return self.page > 1


class DeviceViewState(BaseModel):
    """Everything the device screen displays, as one immutable value.

    Parameters
    ----------
    phase : ViewPhase
        Lifecycle phase of the screen.
    device_id : str or None
        Device being shown.
    preset : TimePreset
        Selected time window preset.
    window : TimeWindow or None
        Window the current summary/track/history were loaded for.
    snapshot : DeviceSnapshot or None
        Latest device snapshot (replaced wholesale by live refresh).
    track : tuple of TrackPoint
        GPS track over *window*.
    summary : SummaryStatistics or None
        Aggregates over *window*; ``None`` when unavailable.
    history : tuple of HistoryRow
        Rows of the current history page.
    cursor : PaginationCursor
        Current history page.
    map_plan : RenderPlan or None
        Last drawing instructions produced for the map.
    error : str or None
        Fatal error message (``FAILED`` phase only).
    back_path : str or None
        Where the user can navigate back to after a fatal error.
    refreshed_at : datetime or None
        When the snapshot was last replaced.
    """

    model_config = ConfigDict(frozen=True)

    phase: ViewPhase = ViewPhase.IDLE
    device_id: str | None = None
    preset: TimePreset = TimePreset.TODAY
    window: TimeWindow | None = None
    snapshot: DeviceSnapshot | None = None
    track: tuple[TrackPoint, ...] = ()
    summary: SummaryStatistics | None = None
    history: tuple[HistoryRow, ...] = ()
    cursor: PaginationCursor = Field(default_factory=PaginationCursor)
    map_plan: RenderPlan | None = None
    error: str | None = None
    back_path: str | None = None
    refreshed_at: datetime | None = None

    @property
    def is_live(self) -> bool:
        """Whether the screen is showing a loaded device."""
        return self.phase in (ViewPhase.READY, ViewPhase.REFRESHING)
