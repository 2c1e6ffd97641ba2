"""Device detail view engine.

:class:`DeviceView` owns everything the device screen shows: the device
snapshot, the GPS track, the summary statistics and the current history
page. It loads them from :class:`fleetview.client.FleetClient`, keeps the
snapshot fresh with a periodic task and derives map instructions through
:class:`fleetview.rendering.track.TrackRenderer`.

Lifecycle::

    IDLE -> LOADING -> READY <-> REFRESHING
               |
               +-> FAILED   (device snapshot could not be loaded)

Only the device snapshot is fatal. Summary, track and history failures are
logged and leave their panel empty; live refresh failures are logged at
debug level and keep the previous snapshot on screen.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from collections.abc import Callable
from datetime import UTC, datetime
from typing import Any
from zoneinfo import ZoneInfo

from fleetview._constants import DEVICE_LIST_PATH
from fleetview.client import FleetClient
from fleetview.exceptions import FleetError
from fleetview.pager import HistoryPager
from fleetview.rendering.track import RenderPlan, TrackRenderer
from fleetview.state.policy import RequestTicket, is_current_device, is_current_page, is_current_window
from fleetview.state.view import DeviceViewState, ViewPhase
from fleetview.window import TimePreset, TimeWindow, coerce_preset, resolve_window

_logger = logging.getLogger(__name__)

StateListener = Callable[[DeviceViewState], None]


class DeviceView:
    """Live view of a single tracking device.

    Usage::

        async with FleetClient(config) as client:
            async with DeviceView(client, "42") as view:
                await view.select_preset("week")
                print(view.state.summary)

    Parameters
    ----------
    client : FleetClient
        Open client used for every backend query.
    device_id : str or None
        Device to show; may also be passed to :meth:`mount`.
    preset : TimePreset or str
        Initial time window preset.
    clock : callable or None
        Returns "now" for window resolution. Defaults to the wall clock in
        ``config.time_zone`` (or the local zone).
    refresh_interval : float or None
        Seconds between live snapshot refreshes; defaults to
        ``config.refresh_interval``.
    renderer : TrackRenderer or None
        Map adapter; one is created when omitted.
    listener : callable or None
        Called with the new state after every change.
    """

    def __init__(
        self,
        client: FleetClient,
        device_id: str | None = None,
        *,
        preset: TimePreset | str = TimePreset.TODAY,
        clock: Callable[[], datetime] | None = None,
        refresh_interval: float | None = None,
        renderer: TrackRenderer | None = None,
        listener: StateListener | None = None,
        back_path: str = DEVICE_LIST_PATH,
    ) -> None:
        config = client.config
        self._client = client
        self._pager = HistoryPager(client)
        self._renderer = renderer or TrackRenderer()
        self._listener = listener
        self._back_path = back_path
        self._refresh_interval = refresh_interval if refresh_interval is not None else config.refresh_interval
        if clock is None:
            zone = ZoneInfo(config.time_zone) if config.time_zone else None
            clock = (lambda: datetime.now(zone)) if zone is not None else datetime.now
        self._clock = clock

        self._generation = 0
        self._epoch = 0
        self._sequence = 0
        self._refresh_task: asyncio.Task[None] | None = None
        self._state = DeviceViewState(
            device_id=device_id,
            preset=coerce_preset(preset),
            cursor=self._pager.first_cursor(),
        )

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> DeviceView:
        await self.mount()
        return self

    async def __aexit__(self, *exc: Any) -> None:
        await self.unmount()

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def state(self) -> DeviceViewState:
        return self._state

    @property
    def renderer(self) -> TrackRenderer:
        return self._renderer

    @property
    def refresh_running(self) -> bool:
        return self._refresh_task is not None and not self._refresh_task.done()

    def _ticket(self) -> RequestTicket:
        return RequestTicket(generation=self._generation, epoch=self._epoch, sequence=self._sequence)

    def _set_state(self, **changes: Any) -> None:
        self._state = self._state.model_copy(update=changes)
        if self._listener is not None:
            try:
                self._listener(self._state)
            except Exception:
                _logger.debug("State listener failed", exc_info=True)

    def _render_map(self) -> None:
        snapshot = self._state.snapshot
        status = snapshot.real_time_status if snapshot is not None else None
        self._set_state(map_plan=self._renderer.render(self._state.track, status))

    def _clear_map(self) -> RenderPlan | None:
        plan = self._renderer.clear()
        return None if plan.is_empty else plan

    # ------------------------------------------------------------------
    # Mount / unmount
    # ------------------------------------------------------------------

    async def mount(self, device_id: str | None = None) -> DeviceViewState:
        """Load *device_id* (or the current device) from scratch.

        Any previous device's refresh task is cancelled and its in-flight
        responses are discarded.
        """
        target = device_id if device_id is not None else self._state.device_id
        if not target:
            raise ValueError("No device to mount")

        await self._stop_refresh()
        self._generation += 1
        self._epoch += 1
        ticket = self._ticket()
        self._state = DeviceViewState(device_id=target, preset=self._state.preset, cursor=self._pager.first_cursor())
        self._set_state(phase=ViewPhase.LOADING, map_plan=self._clear_map())

        try:
            snapshot = await self._client.get_device(target)
        except FleetError as exc:
            if not is_current_device(ticket, self._ticket()):
                return self._state
            _logger.warning("Failed to load device %s: %s", target, exc)
            self._set_state(
                phase=ViewPhase.FAILED,
                error=str(exc) or "Failed to load device data",
                back_path=self._back_path,
            )
            return self._state

        if not is_current_device(ticket, self._ticket()):
            _logger.debug("Discarding device %s loaded for an abandoned mount", target)
            return self._state

        self._set_state(snapshot=snapshot, refreshed_at=datetime.now(UTC))
        await self._load_window(target)

        if is_current_device(ticket, self._ticket()):
            self._set_state(phase=ViewPhase.READY)
            self._start_refresh()
        return self._state

    async def unmount(self) -> None:
        """Tear the view down: stop live refresh and drop all loaded data."""
        await self._stop_refresh()
        self._generation += 1
        self._state = DeviceViewState(
            device_id=self._state.device_id,
            preset=self._state.preset,
            cursor=self._pager.first_cursor(),
        )
        self._set_state(phase=ViewPhase.IDLE, map_plan=self._clear_map())

    # ------------------------------------------------------------------
    # Time window
    # ------------------------------------------------------------------

    async def select_preset(self, preset: TimePreset | str) -> DeviceViewState:
        """Switch the time window and reload summary, track and history.

        The history cursor goes back to page 1. Outside ``READY`` the preset
        is only remembered for the next load.
        """
        resolved = coerce_preset(preset)
        device_id = self._state.device_id
        if not self._state.is_live or device_id is None:
            self._set_state(preset=resolved)
            return self._state
        if resolved == self._state.preset:
            return self._state

        self._epoch += 1
        self._set_state(preset=resolved)
        await self._load_window(device_id)
        return self._state

    async def _load_window(self, device_id: str) -> None:
        window = resolve_window(self._state.preset, self._clock())
        ticket = self._ticket()

        self._set_state(
            window=window,
            cursor=self._pager.first_cursor(),
            summary=None,
            track=(),
            history=(),
        )
        self._render_map()

        # Independent queries: each one handles its own failure.
        await asyncio.gather(
            self._load_summary(ticket, device_id, window),
            self._load_track(ticket, device_id, window),
            self._load_history(device_id, window, 1),
        )

    async def _load_summary(self, ticket: RequestTicket, device_id: str, window: TimeWindow) -> None:
        try:
            summary = await self._client.get_telemetry_summary(device_id, window)
        except FleetError as exc:
            _logger.warning("Failed to load summary for device %s: %s", device_id, exc)
            return
        if not is_current_window(ticket, self._ticket()):
            _logger.debug("Discarding stale summary for device %s (%s)", device_id, window.preset)
            return
        self._set_state(summary=summary)

    async def _load_track(self, ticket: RequestTicket, device_id: str, window: TimeWindow) -> None:
        try:
            track = await self._client.get_telemetry_track(device_id, window)
        except FleetError as exc:
            _logger.warning("Failed to load track for device %s: %s", device_id, exc)
            return
        if not is_current_window(ticket, self._ticket()):
            _logger.debug("Discarding stale track for device %s (%s)", device_id, window.preset)
            return
        self._set_state(track=track)
        self._render_map()

    # ------------------------------------------------------------------
    # History pages
    # ------------------------------------------------------------------

    async def _load_history(self, device_id: str, window: TimeWindow, page: int) -> bool:
        self._sequence += 1
        ticket = self._ticket()
        try:
            result = await self._pager.fetch_page(device_id, window, page)
        except FleetError as exc:
            _logger.warning("Failed to load history page %d for device %s: %s", page, device_id, exc)
            return False
        if not is_current_page(ticket, self._ticket()):
            _logger.debug("Discarding stale history page %d for device %s", page, device_id)
            return False
        self._set_state(history=result.rows, cursor=self._pager.cursor_for(result))
        return True

    async def change_page(self, page: int) -> DeviceViewState:
        """Load history *page* for the current window.

        Snapshot, track and window are untouched. On failure the previous
        page stays on screen.
        """
        if page < 1:
            raise ValueError(f"page must be >= 1, got {page}")
        window = self._state.window
        device_id = self._state.device_id
        if not self._state.is_live or window is None or device_id is None:
            _logger.debug("Ignoring page change to %d while %s", page, self._state.phase)
            return self._state
        await self._load_history(device_id, window, page)
        return self._state

    async def next_page(self) -> DeviceViewState:
        if not self._state.cursor.has_next:
            return self._state
        return await self.change_page(self._state.cursor.page + 1)

    async def previous_page(self) -> DeviceViewState:
        if not self._state.cursor.has_previous:
            return self._state
        return await self.change_page(self._state.cursor.page - 1)

    # ------------------------------------------------------------------
    # Live refresh
    # ------------------------------------------------------------------

    async def refresh_snapshot(self) -> bool:
        """Re-fetch the device snapshot once.

        Returns ``True`` when a new snapshot was applied. Failures keep the
        previous snapshot and are only logged.
        """
        device_id = self._state.device_id
        if not self._state.is_live or device_id is None:
            return False

        ticket = self._ticket()
        self._set_state(phase=ViewPhase.REFRESHING)
        snapshot = None
        try:
            snapshot = await self._client.get_device(device_id)
        except FleetError:
            _logger.debug("Live refresh failed for device %s", device_id, exc_info=True)
        finally:
            # Leave REFRESHING on every exit path, unless the view moved on.
            if snapshot is None and is_current_device(ticket, self._ticket()):
                self._set_state(phase=ViewPhase.READY)

        if snapshot is None or not is_current_device(ticket, self._ticket()):
            return False
        self._set_state(snapshot=snapshot, phase=ViewPhase.READY, refreshed_at=datetime.now(UTC))
        self._render_map()
        return True

    async def _refresh_loop(self) -> None:
        while True:
            await asyncio.sleep(self._refresh_interval)
            try:
                await self.refresh_snapshot()
            except Exception:
                _logger.debug("Live refresh tick crashed for device %s", self._state.device_id, exc_info=True)

    def _start_refresh(self) -> None:
        if self.refresh_running:
            return
        self._refresh_task = asyncio.create_task(
            self._refresh_loop(),
            name=f"fleetview-refresh-{self._state.device_id}",
        )

    async def _stop_refresh(self) -> None:
        task = self._refresh_task
        self._refresh_task = None
        if task is None or task.done():
            return
        task.cancel()
        if task is asyncio.current_task():
            return
        with contextlib.suppress(asyncio.CancelledError):
            await task
