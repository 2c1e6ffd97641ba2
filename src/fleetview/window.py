"""Time window presets.

A window is never stored: it is derived from a preset and the current
instant every time a query needs it.
"""

from __future__ import annotations

import logging
from datetime import date, datetime, time, timedelta, tzinfo
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, model_validator

from fleetview.ingestion.normalize import format_instant

_logger = logging.getLogger(__name__)

_END_OF_DAY = time(23, 59, 59, 999000)


class TimePreset(StrEnum):
    TODAY = "today"
    YESTERDAY = "yesterday"
    WEEK = "week"


class TimeWindow(BaseModel):
    """Half-open instant interval ``[start, end)``."""

    model_config = ConfigDict(frozen=True)

    preset: TimePreset
    start: datetime
    end: datetime

    @model_validator(mode="after")
    def _check_order(self) -> TimeWindow:
        if self.start > self.end:
            raise ValueError(f"window start {self.start} is after end {self.end}")
        return self

    @property
    def start_iso(self) -> str:
        return format_instant(self.start)

    @property
    def end_iso(self) -> str:
        return format_instant(self.end)

    def contains(self, instant: datetime) -> bool:
        return self.start <= instant < self.end


def coerce_preset(preset: TimePreset | str) -> TimePreset:
    """Map *preset* to a known preset, falling back to ``today``."""
    if isinstance(preset, TimePreset):
        return preset
    try:
        return TimePreset(str(preset).strip().lower())
    except ValueError:
        _logger.debug("Unknown time preset %r; using %s", preset, TimePreset.TODAY)
        return TimePreset.TODAY


def _at(day: date, clock: time, tz: tzinfo | None) -> datetime:
    # tz=None means the process-local zone, including its DST rules.
    if tz is None:
        return datetime.combine(day, clock).astimezone()
    return datetime.combine(day, clock, tzinfo=tz)


def resolve_window(preset: TimePreset | str, now: datetime | None = None) -> TimeWindow:
    """Resolve *preset* to a concrete window relative to *now*.

    ``today`` and ``week`` are open-ended up to *now*; ``yesterday`` is the
    closed previous calendar day ending at 23:59:59.999. Calendar days are
    taken in the zone of *now*; a naive or missing *now* uses the local zone.
    """
    resolved = coerce_preset(preset)
    tz = None
    if now is None:
        now = datetime.now().astimezone()
    elif now.tzinfo is None:
        now = now.astimezone()
    else:
        tz = now.tzinfo

    today = now.date()

    if resolved == TimePreset.YESTERDAY:
        day = today - timedelta(days=1)
        return TimeWindow(preset=resolved, start=_at(day, time.min, tz), end=_at(day, _END_OF_DAY, tz))

    if resolved == TimePreset.WEEK:
        if tz is None:
            start = (now.replace(tzinfo=None) - timedelta(days=7)).astimezone()
        else:
            start = now - timedelta(days=7)
        return TimeWindow(preset=resolved, start=start, end=now)

    return TimeWindow(preset=resolved, start=_at(today, time.min, tz), end=now)
