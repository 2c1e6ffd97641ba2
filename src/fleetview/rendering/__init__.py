"""Map rendering adapters."""

from fleetview.rendering.track import (
    Bounds,
    LayerAction,
    MarkerInstruction,
    PolylineInstruction,
    RenderPlan,
    TrackRenderer,
    ViewportInstruction,
    ViewportMode,
)

__all__ = [
    "Bounds",
    "LayerAction",
    "MarkerInstruction",
    "PolylineInstruction",
    "RenderPlan",
    "TrackRenderer",
    "ViewportInstruction",
    "ViewportMode",
]
