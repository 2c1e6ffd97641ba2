"""Summary statistic cards."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from fleetview.models.telemetry import SummaryStatistics


class SummaryCard(BaseModel):
    model_config = ConfigDict(frozen=True)

    label: str
    value: str
    icon: str
    sub_label: str | None = None


def _speed(value: float | None) -> str:
    return "—" if value is None else f"{value:g} km/h"


def render_summary(stats: SummaryStatistics | None) -> tuple[SummaryCard, ...]:
    """Cards for the summary panel; no statistics means no cards."""
    if stats is None:
        return ()

    distance = "—" if stats.distance_traveled is None else f"{stats.distance_traveled / 1000:.2f} km"
    # A count of ignition-on samples. Without a known sampling interval it
    # cannot be turned into a duration.
    samples = f"{stats.ignition_on_samples:,}" if stats.ignition_on_samples else "0"

    return (
        SummaryCard(label="Distance Traveled", value=distance, icon="🛣️"),
        SummaryCard(label="Max Speed", value=_speed(stats.max_speed), icon="🚀"),
        SummaryCard(label="Avg Speed", value=_speed(stats.avg_speed), icon="⚡"),
        SummaryCard(label="Engine On Time", value=samples, icon="⏱️", sub_label="Active Points"),
    )
