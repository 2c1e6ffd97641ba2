"""Map drawing instructions for a GPS track and the live position.

:class:`TrackRenderer` translates a track and an optional live position
into instructions for a map surface (Leaflet-like: one polyline layer, one
marker layer, a viewport). It remembers only what it has told the surface
to draw so that layers are updated in place instead of duplicated.
"""

from __future__ import annotations

from collections.abc import Sequence
from enum import StrEnum

from pydantic import BaseModel, ConfigDict

from fleetview._constants import DEFAULT_MAP_CENTER, DEFAULT_MAP_ZOOM
from fleetview.models.device import RealTimeStatus
from fleetview.models.telemetry import TrackPoint

LatLng = tuple[float, float]


class LayerAction(StrEnum):
    CREATE = "create"
    UPDATE = "update"
    REMOVE = "remove"


class ViewportMode(StrEnum):
    FIT_BOUNDS = "fit_bounds"
    CENTER = "center"


class Bounds(BaseModel):
    """Latitude/longitude bounding box."""

    model_config = ConfigDict(frozen=True)

    south: float
    west: float
    north: float
    east: float

    @classmethod
    def from_points(cls, points: Sequence[LatLng]) -> Bounds:
        if not points:
            raise ValueError("cannot compute bounds of an empty point list")
        lats = [lat for lat, _ in points]
        lngs = [lng for _, lng in points]
        return cls(south=min(lats), west=min(lngs), north=max(lats), east=max(lngs))

    def contains(self, point: LatLng) -> bool:
        lat, lng = point
        return self.south <= lat <= self.north and self.west <= lng <= self.east

    @property
    def center(self) -> LatLng:
        return ((self.south + self.north) / 2, (self.west + self.east) / 2)


class PolylineInstruction(BaseModel):
    model_config = ConfigDict(frozen=True)

    action: LayerAction
    vertices: tuple[LatLng, ...] = ()


class MarkerInstruction(BaseModel):
    model_config = ConfigDict(frozen=True)

    action: LayerAction
    position: LatLng | None = None
    popup: str | None = None


class ViewportInstruction(BaseModel):
    model_config = ConfigDict(frozen=True)

    mode: ViewportMode
    bounds: Bounds | None = None
    center: LatLng | None = None
    zoom: int | None = None


class RenderPlan(BaseModel):
    """Instructions for one map update; ``None`` means leave that layer alone."""

    model_config = ConfigDict(frozen=True)

    polyline: PolylineInstruction | None = None
    marker: MarkerInstruction | None = None
    viewport: ViewportInstruction | None = None

    @property
    def is_empty(self) -> bool:
        return self.polyline is None and self.marker is None and self.viewport is None


def _format_reading(value: float | None) -> str:
    if value is None:
        return "—"
    return f"{value:g}"


def marker_popup(position: RealTimeStatus) -> str:
    """Popup text for the live position marker."""
    return "\n".join(
        (
            "Current Location",
            f"Speed: {_format_reading(position.speed)} km/h",
            f"Heading: {_format_reading(position.heading)}°",
        )
    )


class TrackRenderer:
    """Derives map instructions from a track and the live position.

    At most one polyline and one marker exist at any time. The zoom level
    is preserved across updates; the map surface reports user zoom changes
    through :meth:`set_zoom`.
    """

    def __init__(
        self,
        *,
        center: LatLng = DEFAULT_MAP_CENTER,
        zoom: int = DEFAULT_MAP_ZOOM,
    ) -> None:
        self._center = center
        self._zoom = zoom
        self._polyline: tuple[LatLng, ...] | None = None
        self._marker: LatLng | None = None

    @property
    def zoom(self) -> int:
        return self._zoom

    @property
    def center(self) -> LatLng:
        return self._center

    @property
    def polyline(self) -> tuple[LatLng, ...] | None:
        """Vertices of the polyline currently on the map, if any."""
        return self._polyline

    @property
    def marker(self) -> LatLng | None:
        """Position of the marker currently on the map, if any."""
        return self._marker

    def set_zoom(self, zoom: int) -> None:
        self._zoom = zoom

    def reset(self) -> None:
        """Forget drawn layers (the map surface was torn down)."""
        self._polyline = None
        self._marker = None

    def clear(self) -> RenderPlan:
        """Remove every layer still on the map surface.

        Use this when the surface stays alive but its content is being
        replaced, e.g. on a device change.
        """
        polyline = PolylineInstruction(action=LayerAction.REMOVE) if self._polyline is not None else None
        marker = MarkerInstruction(action=LayerAction.REMOVE) if self._marker is not None else None
        self.reset()
        return RenderPlan(polyline=polyline, marker=marker)

    def render(self, track: Sequence[TrackPoint], current_position: RealTimeStatus | None) -> RenderPlan:
        """Compute the instructions that bring the map up to date.

        *current_position* counts as absent unless it carries both
        coordinates.
        """
        vertices = tuple(point.to_lat_lng() for point in track)
        position = current_position.position if current_position is not None else None

        polyline = self._render_polyline(vertices)
        marker = self._render_marker(position, current_position)

        viewport: ViewportInstruction | None = None
        if position is not None:
            self._center = position
            viewport = ViewportInstruction(mode=ViewportMode.CENTER, center=position, zoom=self._zoom)
        elif vertices:
            bounds = Bounds.from_points(vertices)
            self._center = bounds.center
            viewport = ViewportInstruction(mode=ViewportMode.FIT_BOUNDS, bounds=bounds)

        return RenderPlan(polyline=polyline, marker=marker, viewport=viewport)

    def _render_polyline(self, vertices: tuple[LatLng, ...]) -> PolylineInstruction | None:
        if not vertices:
            if self._polyline is None:
                return None
            self._polyline = None
            return PolylineInstruction(action=LayerAction.REMOVE)

        if self._polyline is None:
            self._polyline = vertices
            return PolylineInstruction(action=LayerAction.CREATE, vertices=vertices)
        if self._polyline == vertices:
            return None
        self._polyline = vertices
        return PolylineInstruction(action=LayerAction.UPDATE, vertices=vertices)

    def _render_marker(self, position: LatLng | None, status: RealTimeStatus | None) -> MarkerInstruction | None:
        if position is None or status is None:
            if self._marker is None:
                return None
            self._marker = None
            return MarkerInstruction(action=LayerAction.REMOVE)

        action = LayerAction.CREATE if self._marker is None else LayerAction.UPDATE
        self._marker = position
        # The popup is always re-bound so speed and heading stay current.
        return MarkerInstruction(action=action, position=position, popup=marker_popup(status))
