from __future__ import annotations

from datetime import UTC, datetime, timedelta, timezone
from zoneinfo import ZoneInfo

import pytest

from fleetview.window import TimePreset, TimeWindow, coerce_preset, resolve_window

JAKARTA = ZoneInfo("Asia/Jakarta")
NOW = datetime(2026, 10, 18, 14, 5, 30, tzinfo=JAKARTA)


def test_today_runs_from_local_midnight_to_now() -> None:
    window = resolve_window(TimePreset.TODAY, NOW)
    assert window.start == datetime(2026, 10, 18, tzinfo=JAKARTA)
    assert window.end == NOW
    assert window.start_iso == "2026-10-17T17:00:00.000Z"


def test_yesterday_is_the_previous_calendar_day() -> None:
    window = resolve_window("yesterday", NOW)
    assert window.start == datetime(2026, 10, 17, tzinfo=JAKARTA)
    assert window.end == datetime(2026, 10, 17, 23, 59, 59, 999000, tzinfo=JAKARTA)
    assert window.end_iso == "2026-10-17T16:59:59.999Z"


def test_week_is_seven_days_back_from_now() -> None:
    window = resolve_window(TimePreset.WEEK, NOW)
    assert window.start == NOW - timedelta(days=7)
    assert window.end == NOW


def test_week_across_dst_keeps_wall_clock() -> None:
    berlin = ZoneInfo("Europe/Berlin")
    # DST ends on 2026-10-25.
    now = datetime(2026, 10, 28, 12, 0, tzinfo=berlin)
    window = resolve_window(TimePreset.WEEK, now)
    assert window.start == datetime(2026, 10, 21, 12, 0, tzinfo=berlin)
    assert window.start.utcoffset() == timedelta(hours=2)
    assert window.end.utcoffset() == timedelta(hours=1)


def test_today_at_midnight_is_empty_but_valid() -> None:
    midnight = datetime(2026, 10, 18, tzinfo=UTC)
    window = resolve_window(TimePreset.TODAY, midnight)
    assert window.start == window.end


def test_unknown_preset_falls_back_to_today() -> None:
    assert coerce_preset("fortnight") == TimePreset.TODAY
    assert coerce_preset(" WEEK ") == TimePreset.WEEK
    assert resolve_window("fortnight", NOW).preset == TimePreset.TODAY


def test_naive_now_uses_local_zone() -> None:
    window = resolve_window(TimePreset.TODAY, datetime(2026, 10, 18, 9, 0))
    assert window.start.tzinfo is not None
    assert window.start.hour == 0
    assert window.end.hour == 9


def test_window_rejects_reversed_bounds() -> None:
    start = datetime(2026, 10, 18, tzinfo=UTC)
    with pytest.raises(ValueError):
        TimeWindow(preset=TimePreset.TODAY, start=start, end=start - timedelta(seconds=1))


def test_window_contains_is_half_open() -> None:
    window = resolve_window(TimePreset.YESTERDAY, datetime(2026, 10, 18, 8, 0, tzinfo=timezone.utc))
    assert window.contains(window.start)
    assert not window.contains(window.end)
