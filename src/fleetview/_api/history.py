"""History log endpoint.

Endpoint:
  - POST /history/{id}
"""

from __future__ import annotations

import logging
from typing import Any
from urllib.parse import quote

from pydantic import ValidationError

from fleetview._api._common import unwrap_data
from fleetview._transport import Transport
from fleetview.exceptions import FleetApiError
from fleetview.ingestion.normalize import safe_int
from fleetview.models.history import HistoryPage, HistoryRow
from fleetview.window import TimeWindow

_logger = logging.getLogger(__name__)


def build_history_request(window: TimeWindow, *, page: int, limit: int) -> dict[str, Any]:
    """Request body for a window-bounded page of the history log."""
    return {
        "timePreset": "custom",
        "timeParams": {
            "startTime": window.start_iso,
            "endTime": window.end_iso,
        },
        "pagination": {
            "enabled": True,
            "page": page,
            "limit": limit,
        },
    }


async def fetch_history_page(
    transport: Transport,
    device_id: str,
    window: TimeWindow,
    *,
    page: int,
    limit: int,
) -> HistoryPage:
    """Fetch one page of the history log for *window*."""
    endpoint = f"/history/{quote(str(device_id), safe='')}"
    body = build_history_request(window, page=page, limit=limit)
    response = await transport.request_json("POST", endpoint, json_body=body)

    data = unwrap_data(endpoint, response)
    if data is None:
        data = []
    if not isinstance(data, list):
        raise FleetApiError(f"{endpoint} rows are not a list", endpoint=endpoint)

    try:
        rows = tuple(HistoryRow.model_validate(item) for item in data)
    except ValidationError as exc:
        raise FleetApiError(f"{endpoint} returned invalid history rows", endpoint=endpoint) from exc

    meta = response.get("meta")
    returned = safe_int(meta.get("returnedRecords")) if isinstance(meta, dict) else None
    if returned is None:
        returned = len(rows)

    _logger.debug("History %s page=%d returned=%d", device_id, page, returned)
    return HistoryPage(rows=rows, page=page, limit=limit, returned_records=returned)
