"""Telemetry summary and track endpoints.

Endpoints:
  - GET /telemetry/{id}/summary?start=&end=
  - GET /telemetry/{id}/track?start=&end=&maxPoints=
"""

from __future__ import annotations

import logging
from urllib.parse import quote

from pydantic import ValidationError

from fleetview._api._common import unwrap_data, validate_model, window_params
from fleetview._transport import Transport
from fleetview.exceptions import FleetApiError
from fleetview.models.telemetry import SummaryStatistics, TrackPoint
from fleetview.window import TimeWindow

_logger = logging.getLogger(__name__)


async def fetch_summary(transport: Transport, device_id: str, window: TimeWindow) -> SummaryStatistics | None:
    """Fetch aggregate statistics over *window*.

    Returns ``None`` when the backend has no statistics for the window.
    """
    endpoint = f"/telemetry/{quote(str(device_id), safe='')}/summary"
    response = await transport.request_json("GET", endpoint, params=window_params(window))
    data = unwrap_data(endpoint, response)
    statistics = data.get("statistics") if isinstance(data, dict) else None
    if not isinstance(statistics, dict):
        return None
    return validate_model(SummaryStatistics, statistics, endpoint=endpoint)


async def fetch_track(
    transport: Transport,
    device_id: str,
    window: TimeWindow,
    *,
    max_points: int,
) -> tuple[TrackPoint, ...]:
    """Fetch the GPS track over *window*, downsampled server-side to *max_points*.

    Points without usable coordinates are dropped; the order of the
    remaining points is preserved.
    """
    endpoint = f"/telemetry/{quote(str(device_id), safe='')}/track"
    params = {**window_params(window), "maxPoints": str(max_points)}
    response = await transport.request_json("GET", endpoint, params=params)
    data = unwrap_data(endpoint, response)

    raw_track = data.get("track") if isinstance(data, dict) else data
    if raw_track is None:
        return ()
    if not isinstance(raw_track, list):
        raise FleetApiError(f"{endpoint} track is not a list", endpoint=endpoint)

    points: list[TrackPoint] = []
    skipped = 0
    for item in raw_track:
        try:
            points.append(TrackPoint.model_validate(item))
        except ValidationError:
            skipped += 1
    if skipped:
        _logger.debug("Dropped %d track point(s) without coordinates from %s", skipped, endpoint)
    return tuple(points)
