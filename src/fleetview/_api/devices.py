"""Device snapshot endpoint.

Endpoint:
  - GET /devices/{id}
"""

from __future__ import annotations

import logging
from urllib.parse import quote

from fleetview._api._common import unwrap_data, validate_model
from fleetview._transport import Transport
from fleetview.exceptions import FleetApiError
from fleetview.models.device import DeviceSnapshot

_logger = logging.getLogger(__name__)


async def fetch_device(transport: Transport, device_id: str) -> DeviceSnapshot:
    """Fetch a device record including its real-time status.

    Raises
    ------
    FleetNotFoundError
        If the device does not exist.
    FleetApiError
        If the backend answers with an error or an unusable payload.
    FleetTransportError
        If the backend is unreachable.
    """
    endpoint = f"/devices/{quote(str(device_id), safe='')}"
    response = await transport.request_json("GET", endpoint)
    data = unwrap_data(endpoint, response)
    if not isinstance(data, dict):
        raise FleetApiError(f"{endpoint} returned no device record", endpoint=endpoint)

    snapshot = validate_model(DeviceSnapshot, data, endpoint=endpoint)
    _logger.debug(
        "Device %s: online=%s position=%s io_keys=%s",
        snapshot.id,
        snapshot.real_time_status.is_online if snapshot.real_time_status else None,
        snapshot.real_time_status.position if snapshot.real_time_status else None,
        sorted(snapshot.real_time_status.io_elements) if snapshot.real_time_status else [],
    )
    return snapshot
