"""Layout projection, overlay placement and the raster schedule surface."""

from .layout import DEFAULT_LAYOUT, Box, LayoutMetrics, RenderMode, Size
from .overlay import Arrow, OpenOverlay, OverlayPlacement, Side, place_overlay
from .projector import (
    Element,
    GridPlacement,
    GridProjector,
    ListProjector,
    Projector,
    Rendering,
    projector_for,
)
from .surface import RendererConfig, ScheduleSurface

__all__ = [
    "Arrow",
    "Box",
    "DEFAULT_LAYOUT",
    "Element",
    "GridPlacement",
    "GridProjector",
    "LayoutMetrics",
    "ListProjector",
    "OpenOverlay",
    "OverlayPlacement",
    "Projector",
    "RenderMode",
    "Rendering",
    "RendererConfig",
    "ScheduleSurface",
    "Side",
    "Size",
    "place_overlay",
    "projector_for",
]
