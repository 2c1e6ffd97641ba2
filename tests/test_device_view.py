from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator, Mapping
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

import pytest
import pytest_asyncio

from fleetview.client import FleetClient
from fleetview.config import FleetConfig
from fleetview.device_view import DeviceView
from fleetview.exceptions import FleetApiError, FleetNotFoundError
from fleetview.rendering.track import LayerAction, RenderPlan, ViewportMode
from fleetview.state.view import DeviceViewState, ViewPhase
from fleetview.window import TimePreset, resolve_window

NOW = datetime(2026, 10, 18, 9, 30, tzinfo=UTC)


@dataclass
class FakeFleetBackend:
    history_total: int = 120
    speed: float = 42.0
    failing: set[str] = field(default_factory=set)
    hold_next: set[str] = field(default_factory=set)
    crash_next: set[str] = field(default_factory=set)
    holding: asyncio.Event = field(default_factory=asyncio.Event)
    release: asyncio.Event = field(default_factory=asyncio.Event)
    calls: list[tuple[str, str, Any]] = field(default_factory=list)

    def count(self, kind: str) -> int:
        return sum(1 for call_kind, _, _ in self.calls if call_kind == kind)

    def history_bodies(self) -> list[Mapping[str, Any]]:
        return [payload for kind, _, payload in self.calls if kind == "history"]

    @staticmethod
    def _kind(endpoint: str) -> tuple[str, str]:
        parts = endpoint.strip("/").split("/")
        if parts[0] == "devices":
            return "device", parts[1]
        if parts[0] == "telemetry":
            return parts[2], parts[1]
        if parts[0] == "history":
            return "history", parts[1]
        raise AssertionError(f"Unexpected endpoint in fake backend: {endpoint}")

    async def request_json(
        self,
        method: str,
        endpoint: str,
        *,
        params: Mapping[str, Any] | None = None,
        json_body: Mapping[str, Any] | None = None,
    ) -> dict[str, Any]:
        kind, device_id = self._kind(endpoint)
        self.calls.append((kind, device_id, json_body if json_body is not None else params))
        call_number = self.count(kind)

        if kind in self.hold_next:
            self.hold_next.discard(kind)
            self.holding.set()
            await self.release.wait()

        if kind in self.crash_next:
            self.crash_next.discard(kind)
            raise RuntimeError("corrupt response body")

        if kind in self.failing:
            if kind == "device":
                raise FleetNotFoundError("Device not found", status_code=404, endpoint=endpoint)
            raise FleetApiError(f"{kind} unavailable", status_code=500, endpoint=endpoint)

        if kind == "device":
            return {
                "data": {
                    "id": device_id,
                    "imei": "356307042441013",
                    "vehicle": {"plateNumber": "B 1234 XYZ"},
                    "realTimeStatus": {
                        "connectionStatus": "online",
                        "ignition": True,
                        "latitude": -6.2,
                        "longitude": 106.8,
                        "speed": self.speed,
                        "io_elements": {"67": {"value": 24300}},
                    },
                }
            }

        if kind == "summary":
            return {"data": {"statistics": {"distanceTraveled": 1500, "maxSpeed": call_number}}}

        if kind == "track":
            return {"data": {"track": [{"coordinates": [106.80, -6.20]}, {"coordinates": [106.81, -6.21]}]}}

        assert json_body is not None
        page = json_body["pagination"]["page"]
        limit = json_body["pagination"]["limit"]
        start = (page - 1) * limit
        count = max(0, min(limit, self.history_total - start))
        rows = [{"time": "2026-10-18T07:30:00Z", "telemetry": {"speed": start + i}} for i in range(count)]
        return {"data": rows, "meta": {"returnedRecords": count}}


@dataclass
class MapSurface:
    """Applies published render plans the way a map widget would."""

    polylines: int = 0
    markers: int = 0
    applied: list[RenderPlan] = field(default_factory=list)

    @staticmethod
    def _apply(alive: int, action: LayerAction) -> int:
        if action == LayerAction.CREATE:
            assert alive == 0, "layer created while one is still on the map"
            return 1
        assert alive == 1, f"{action} on a layer that is not on the map"
        return 0 if action == LayerAction.REMOVE else 1

    def on_state(self, state: DeviceViewState) -> None:
        plan = state.map_plan
        if plan is None or any(plan is seen for seen in self.applied):
            return
        self.applied.append(plan)
        if plan.polyline is not None:
            self.polylines = self._apply(self.polylines, plan.polyline.action)
        if plan.marker is not None:
            self.markers = self._apply(self.markers, plan.marker.action)


@pytest.fixture
def backend(monkeypatch: pytest.MonkeyPatch) -> FakeFleetBackend:
    fake_backend = FakeFleetBackend()

    async def fake_request_json(_self: Any, method: str, endpoint: str, **kwargs: Any) -> dict[str, Any]:
        return await fake_backend.request_json(method, endpoint, **kwargs)

    monkeypatch.setattr("fleetview._transport.HttpTransport.request_json", fake_request_json)
    return fake_backend


@pytest_asyncio.fixture
async def client(backend: FakeFleetBackend) -> AsyncIterator[FleetClient]:
    async with FleetClient(FleetConfig(token="tok", refresh_interval=3600)) as fleet_client:
        yield fleet_client


def _view(client: FleetClient, device_id: str | None = "42", **kwargs: Any) -> DeviceView:
    return DeviceView(client, device_id, clock=lambda: NOW, **kwargs)


@pytest.mark.asyncio
@pytest.mark.e2e
async def test_mount_loads_snapshot_window_and_first_page(client: FleetClient, backend: FakeFleetBackend) -> None:
    view = _view(client)
    state = await view.mount()

    assert state.phase == ViewPhase.READY
    assert state.snapshot is not None
    assert state.snapshot.vehicle is not None
    assert state.snapshot.vehicle.plate_number == "B 1234 XYZ"
    assert state.window == resolve_window(TimePreset.TODAY, NOW)
    assert state.summary is not None
    assert state.summary.distance_traveled == 1500.0
    assert len(state.track) == 2
    assert len(state.history) == 50
    assert state.cursor.page == 1
    assert state.cursor.has_next is True
    assert state.refreshed_at is not None

    assert state.map_plan is not None
    assert state.map_plan.marker is not None
    assert view.renderer.marker == (-6.2, 106.8)
    assert state.map_plan.viewport is not None
    assert state.map_plan.viewport.mode == ViewportMode.CENTER
    assert view.renderer.polyline == ((-6.20, 106.80), (-6.21, 106.81))

    assert view.refresh_running is True
    assert [backend.count(kind) for kind in ("device", "summary", "track", "history")] == [1, 1, 1, 1]

    await view.unmount()
    assert view.refresh_running is False
    assert view.state.phase == ViewPhase.IDLE
    assert view.state.snapshot is None


@pytest.mark.asyncio
@pytest.mark.e2e
async def test_preset_change_resets_history_to_page_one(client: FleetClient, backend: FakeFleetBackend) -> None:
    async with _view(client) as view:
        await view.next_page()
        state = await view.next_page()
        assert state.cursor.page == 3
        assert len(state.history) == 20
        assert state.cursor.has_next is False

        state = await view.select_preset("week")

        assert state.preset == TimePreset.WEEK
        assert state.window is not None
        assert state.window.preset == TimePreset.WEEK
        assert state.cursor.page == 1
        assert len(state.history) == 50

        last_body = backend.history_bodies()[-1]
        assert last_body["pagination"]["page"] == 1
        assert last_body["timeParams"]["startTime"] == state.window.start_iso
        assert backend.count("summary") == 2
        assert backend.count("track") == 2


@pytest.mark.asyncio
async def test_same_preset_does_not_reload(client: FleetClient, backend: FakeFleetBackend) -> None:
    async with _view(client) as view:
        await view.select_preset(TimePreset.TODAY)
    assert backend.count("summary") == 1


@pytest.mark.asyncio
async def test_preset_selected_before_mount_is_used_on_mount(client: FleetClient, backend: FakeFleetBackend) -> None:
    view = _view(client)
    await view.select_preset("yesterday")
    assert backend.calls == []

    state = await view.mount()
    assert state.window is not None
    assert state.window.preset == TimePreset.YESTERDAY
    await view.unmount()


@pytest.mark.asyncio
async def test_previous_page_on_first_page_is_a_no_op(client: FleetClient, backend: FakeFleetBackend) -> None:
    async with _view(client) as view:
        await view.previous_page()
        with pytest.raises(ValueError):
            await view.change_page(0)
    assert backend.count("history") == 1


@pytest.mark.asyncio
@pytest.mark.e2e
async def test_snapshot_failure_is_fatal(client: FleetClient, backend: FakeFleetBackend) -> None:
    backend.failing.add("device")
    view = _view(client)

    state = await view.mount()

    assert state.phase == ViewPhase.FAILED
    assert state.error == "Device not found"
    assert state.back_path == "/devices"
    assert state.snapshot is None
    assert view.refresh_running is False
    assert backend.count("summary") == backend.count("track") == backend.count("history") == 0


@pytest.mark.asyncio
async def test_secondary_failures_degrade_their_panels_only(
    client: FleetClient,
    backend: FakeFleetBackend,
    caplog: pytest.LogCaptureFixture,
) -> None:
    backend.failing.update({"summary", "track"})
    view = _view(client)

    with caplog.at_level(logging.WARNING, logger="fleetview.device_view"):
        state = await view.mount()

    assert state.phase == ViewPhase.READY
    assert state.summary is None
    assert state.track == ()
    assert len(state.history) == 50
    assert "Failed to load summary" in caplog.text
    assert "Failed to load track" in caplog.text
    await view.unmount()


@pytest.mark.asyncio
async def test_failed_page_change_keeps_previous_page(client: FleetClient, backend: FakeFleetBackend) -> None:
    async with _view(client) as view:
        before = view.state.history
        backend.failing.add("history")

        state = await view.next_page()

        assert state.cursor.page == 1
        assert state.history == before
        assert state.phase == ViewPhase.READY


@pytest.mark.asyncio
async def test_refresh_replaces_snapshot_and_moves_marker(client: FleetClient, backend: FakeFleetBackend) -> None:
    async with _view(client) as view:
        backend.speed = 77.0

        assert await view.refresh_snapshot() is True

        state = view.state
        assert state.phase == ViewPhase.READY
        assert state.snapshot is not None
        assert state.snapshot.real_time_status is not None
        assert state.snapshot.real_time_status.speed == 77.0
        assert state.map_plan is not None
        assert state.map_plan.marker is not None
        assert state.map_plan.marker.action == LayerAction.UPDATE
        assert "Speed: 77 km/h" in (state.map_plan.marker.popup or "")


@pytest.mark.asyncio
async def test_refresh_failure_is_silent(
    client: FleetClient,
    backend: FakeFleetBackend,
    caplog: pytest.LogCaptureFixture,
) -> None:
    async with _view(client) as view:
        previous = view.state.snapshot
        backend.failing.add("device")

        with caplog.at_level(logging.DEBUG, logger="fleetview.device_view"):
            assert await view.refresh_snapshot() is False

        assert view.state.phase == ViewPhase.READY
        assert view.state.snapshot == previous
        assert view.state.error is None
        assert not [record for record in caplog.records if record.levelno >= logging.WARNING]
        assert "Live refresh failed" in caplog.text


@pytest.mark.asyncio
async def test_refresh_task_polls_and_stops_on_unmount(client: FleetClient, backend: FakeFleetBackend) -> None:
    view = _view(client, refresh_interval=0.01)
    await view.mount()

    await asyncio.sleep(0.1)
    assert backend.count("device") > 1

    await view.unmount()
    polled = backend.count("device")
    await asyncio.sleep(0.05)
    assert backend.count("device") == polled
    assert view.refresh_running is False


@pytest.mark.asyncio
async def test_stale_window_response_is_discarded(client: FleetClient, backend: FakeFleetBackend) -> None:
    async with _view(client) as view:
        backend.hold_next.add("summary")
        week = asyncio.create_task(view.select_preset("week"))
        await asyncio.wait_for(backend.holding.wait(), timeout=1)

        # The week summary (call 2) is held; yesterday (call 3) completes first.
        await view.select_preset("yesterday")
        backend.release.set()
        await week

        state = view.state
        assert state.preset == TimePreset.YESTERDAY
        assert state.window is not None
        assert state.window.preset == TimePreset.YESTERDAY
        assert state.summary is not None
        assert state.summary.max_speed == 3.0


@pytest.mark.asyncio
async def test_refresh_response_after_unmount_is_discarded(client: FleetClient, backend: FakeFleetBackend) -> None:
    view = _view(client)
    await view.mount()

    backend.hold_next.add("device")
    pending = asyncio.create_task(view.refresh_snapshot())
    await asyncio.wait_for(backend.holding.wait(), timeout=1)
    await view.unmount()
    backend.release.set()

    assert await pending is False
    assert view.state.phase == ViewPhase.IDLE
    assert view.state.snapshot is None


@pytest.mark.asyncio
async def test_switching_device_starts_fresh(client: FleetClient, backend: FakeFleetBackend) -> None:
    async with _view(client) as view:
        await view.next_page()
        state = await view.mount("43")

        assert state.device_id == "43"
        assert state.snapshot is not None
        assert state.snapshot.id == "43"
        assert state.cursor.page == 1
        assert state.map_plan is not None
        assert state.map_plan.viewport is not None
        assert state.map_plan.viewport.center == (-6.2, 106.8)
        assert view.renderer.polyline is not None
        assert view.refresh_running is True


@pytest.mark.asyncio
async def test_mount_without_device_raises(client: FleetClient) -> None:
    with pytest.raises(ValueError):
        await _view(client, None).mount()


@pytest.mark.asyncio
async def test_listener_sees_phases_and_its_errors_are_ignored(client: FleetClient) -> None:
    phases: list[ViewPhase] = []

    def listener(state: DeviceViewState) -> None:
        phases.append(state.phase)
        raise RuntimeError("listener bug")

    view = _view(client, listener=listener)
    state = await view.mount()
    await view.unmount()

    assert state.phase == ViewPhase.READY
    assert phases[0] == ViewPhase.LOADING
    assert ViewPhase.READY in phases
    assert phases[-1] == ViewPhase.IDLE


@pytest.mark.asyncio
@pytest.mark.e2e
async def test_device_switch_keeps_one_marker_and_one_polyline(client: FleetClient) -> None:
    surface = MapSurface()
    view = _view(client, listener=surface.on_state)

    await view.mount()
    assert (surface.polylines, surface.markers) == (1, 1)

    await view.mount("43")
    assert (surface.polylines, surface.markers) == (1, 1)

    await view.unmount()
    assert (surface.polylines, surface.markers) == (0, 0)


@pytest.mark.asyncio
async def test_unexpected_refresh_error_restores_ready(client: FleetClient, backend: FakeFleetBackend) -> None:
    async with _view(client) as view:
        backend.crash_next.add("device")

        with pytest.raises(RuntimeError):
            await view.refresh_snapshot()

        assert view.state.phase == ViewPhase.READY
        assert view.state.snapshot is not None


@pytest.mark.asyncio
async def test_refresh_loop_survives_unexpected_error(client: FleetClient, backend: FakeFleetBackend) -> None:
    view = _view(client, refresh_interval=0.01)
    await view.mount()
    backend.crash_next.add("device")
    backend.speed = 88.0

    await asyncio.sleep(0.1)

    assert view.refresh_running is True
    assert view.state.phase == ViewPhase.READY
    assert view.state.snapshot is not None
    assert view.state.snapshot.real_time_status is not None
    assert view.state.snapshot.real_time_status.speed == 88.0
    await view.unmount()
