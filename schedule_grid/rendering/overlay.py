"""Placement of the session detail overlay relative to its anchor."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Optional

from .layout import DEFAULT_LAYOUT, Box, LayoutMetrics, RenderMode, Size

if TYPE_CHECKING:
    from .projector import Element


class Side(str, Enum):
    BELOW = "below"
    ABOVE = "above"
    FIXED = "fixed"


class Arrow(str, Enum):
    ARROW_TOP = "arrow-top"
    ARROW_BOTTOM = "arrow-bottom"


@dataclass(frozen=True)
class OverlayPlacement:
    left: float
    top: float
    width: float
    height: float
    side: Side
    arrow: Optional[Arrow] = None
    max_height: Optional[float] = None

    @property
    def box(self) -> Box:
        return Box(self.left, self.top, self.width, self.height)

    @property
    def scrolls(self) -> bool:
        return self.max_height is not None


@dataclass(frozen=True)
class OpenOverlay:
    """The single open overlay: the session element it belongs to and where it sits.

    ``scroll_offset`` is how far the content of a height-constrained overlay
    has been scrolled, in layout units.
    """

    element: "Element"
    placement: OverlayPlacement
    scroll_offset: float = 0.0


def place_overlay(
    anchor: Box,
    overlay: Size,
    viewport: Size,
    *,
    mode: RenderMode = RenderMode.GRID,
    metrics: LayoutMetrics = DEFAULT_LAYOUT,
) -> OverlayPlacement:
    """Compute where the overlay goes so that it stays inside ``viewport``.

    ``anchor`` is given in viewport coordinates. The overlay prefers the space
    below the anchor, flips above when that side has more room, and has its
    height constrained (scrolling internally) when neither side fits its
    natural height. Ties between the two sides go below.
    """

    if mode is RenderMode.LIST:
        return _place_fixed(overlay, viewport, metrics)

    margin = metrics.overlay_margin
    gap = metrics.overlay_gap

    width = _clamp(overlay.width, 0.0, max(0.0, viewport.width - 2 * margin))
    left = anchor.center_x - width / 2
    left = _clamp(left, margin, viewport.width - margin - width)

    # Anchors scrolled partly out of view are measured from the visible edge.
    anchor_top = _clamp(anchor.top, 0.0, viewport.height)
    anchor_bottom = _clamp(anchor.bottom, 0.0, viewport.height)
    room_below = max(0.0, viewport.height - anchor_bottom - gap - margin)
    room_above = max(0.0, anchor_top - gap - margin)
    natural = max(0.0, overlay.height)

    if natural <= room_below:
        side, room = Side.BELOW, room_below
    elif room_above > room_below:
        side, room = Side.ABOVE, room_above
    else:
        side, room = Side.BELOW, room_below

    max_height = room if natural > room else None
    height = natural if max_height is None else max_height

    if side is Side.BELOW:
        top = anchor_bottom + gap
        arrow = Arrow.ARROW_TOP
    else:
        top = anchor_top - gap - height
        arrow = Arrow.ARROW_BOTTOM

    top = _clamp(top, 0.0, viewport.height - height)
    left = _clamp(left, 0.0, viewport.width - width)
    return OverlayPlacement(
        left=left,
        top=top,
        width=width,
        height=height,
        side=side,
        arrow=arrow,
        max_height=max_height,
    )


def _place_fixed(overlay: Size, viewport: Size, metrics: LayoutMetrics) -> OverlayPlacement:
    margin = metrics.overlay_margin
    width = max(0.0, viewport.width - 2 * margin)
    room = max(0.0, viewport.height - 2 * margin)
    natural = max(0.0, overlay.height)
    max_height = room if natural > room else None
    height = natural if max_height is None else room
    return OverlayPlacement(
        left=_clamp(margin, 0.0, viewport.width - width),
        top=max(0.0, viewport.height - margin - height),
        width=width,
        height=height,
        side=Side.FIXED,
        max_height=max_height,
    )


def _clamp(value: float, low: float, high: float) -> float:
    if high < low:
        return low
    return max(low, min(value, high))


__all__ = ["Arrow", "OpenOverlay", "OverlayPlacement", "Side", "place_overlay"]
