"""High-level async client for the fleet backend API."""

from __future__ import annotations

import logging
from typing import Any

import aiohttp

from fleetview._api import devices as _devices_api
from fleetview._api import history as _history_api
from fleetview._api import telemetry as _telemetry_api
from fleetview._transport import HttpTransport, TokenProvider, Transport
from fleetview.config import FleetConfig
from fleetview.exceptions import FleetError
from fleetview.models.device import DeviceSnapshot
from fleetview.models.history import HistoryPage
from fleetview.models.telemetry import SummaryStatistics, TrackPoint
from fleetview.window import TimeWindow

_logger = logging.getLogger(__name__)


class FleetClient:
    """Async client for the device telemetry endpoints.

    Usage::

        async with FleetClient(FleetConfig.from_env()) as client:
            device = await client.get_device("42")
    """

    def __init__(
        self,
        config: FleetConfig,
        *,
        session: aiohttp.ClientSession | None = None,
        token_provider: TokenProvider | None = None,
    ) -> None:
        self._config = config
        self._external_session = session is not None
        self._http_session = session
        self._token_provider = token_provider
        self._transport: Transport | None = None

    @property
    def config(self) -> FleetConfig:
        return self._config

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> FleetClient:
        if self._http_session is None:
            self._http_session = aiohttp.ClientSession()
        self._transport = HttpTransport(
            self._config,
            self._http_session,
            token_provider=self._token_provider,
        )
        return self

    async def __aexit__(self, *exc: Any) -> None:
        if not self._external_session and self._http_session is not None:
            await self._http_session.close()
            self._http_session = None
        self._transport = None

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _require_transport(self) -> Transport:
        if self._transport is None:
            raise FleetError("Client not initialized. Use 'async with FleetClient(...) as client:'")
        return self._transport

    # ------------------------------------------------------------------
    # Read endpoints
    # ------------------------------------------------------------------

    async def get_device(self, device_id: str) -> DeviceSnapshot:
        """Fetch the device snapshot, including its real-time status."""
        return await _devices_api.fetch_device(self._require_transport(), device_id)

    async def get_telemetry_summary(self, device_id: str, window: TimeWindow) -> SummaryStatistics | None:
        """Fetch summary statistics for *window*."""
        return await _telemetry_api.fetch_summary(self._require_transport(), device_id, window)

    async def get_telemetry_track(
        self,
        device_id: str,
        window: TimeWindow,
        *,
        max_points: int | None = None,
    ) -> tuple[TrackPoint, ...]:
        """Fetch the GPS track for *window* (downsampled by the server)."""
        return await _telemetry_api.fetch_track(
            self._require_transport(),
            device_id,
            window,
            max_points=max_points if max_points is not None else self._config.track_max_points,
        )

    async def get_history_page(
        self,
        device_id: str,
        window: TimeWindow,
        *,
        page: int = 1,
        limit: int | None = None,
    ) -> HistoryPage:
        """Fetch one page of the history log for *window*."""
        if page < 1:
            raise ValueError(f"page must be >= 1, got {page}")
        return await _history_api.fetch_history_page(
            self._require_transport(),
            device_id,
            window,
            page=page,
            limit=limit if limit is not None else self._config.history_page_size,
        )
