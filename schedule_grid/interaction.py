"""State machine for the single session detail overlay."""

from __future__ import annotations

import logging
from dataclasses import replace
from enum import Enum
from typing import Optional

from .rendering.layout import RenderMode
from .rendering.overlay import OpenOverlay, OverlayPlacement, place_overlay
from .rendering.projector import Element, Rendering
from .schedule.formatting import NO_DETAILS
from .view import ScheduleView

LOGGER = logging.getLogger(__name__)

ACTIVATION_KEYS = frozenset({"Enter", " ", "Space"})
ESCAPE_KEYS = frozenset({"Escape", "Esc"})


class OverlayState(str, Enum):
    CLOSED = "closed"
    OPEN = "open"


class InteractionController:
    """Translate user input into overlay transitions.

    Transitions::

        Closed  --activate(s)-->         Open(s)
        Open(s) --activate(s)-->         Closed
        Open(s) --activate(t), t != s--> Open(t)
        Open(s) --click outside-->       Closed
        Open(s) --escape-->              Closed, focus returns to s

    At most one session is active at any time; the open overlay is the only
    place that records it.
    """

    def __init__(self, view: ScheduleView) -> None:
        self.view = view
        self.surface = view.surface
        self.focused: Optional[Element] = None
        self._overlay: Optional[OpenOverlay] = None
        view.on_rebuild(self._on_rebuild)

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------
    @property
    def state(self) -> OverlayState:
        return OverlayState.OPEN if self._overlay is not None else OverlayState.CLOSED

    @property
    def overlay(self) -> Optional[OpenOverlay]:
        return self._overlay

    @property
    def active(self) -> Optional[Element]:
        return self._overlay.element if self._overlay is not None else None

    @staticmethod
    def is_activatable(element: Optional[Element]) -> bool:
        return (
            element is not None
            and element.is_session
            and bool(element.detail_text)
            and element.detail_text != NO_DETAILS
        )

    # ------------------------------------------------------------------
    # Logical triggers
    # ------------------------------------------------------------------
    def activate(self, element: Element) -> Optional[OpenOverlay]:
        if not self.is_activatable(element):
            LOGGER.debug("Ignoring activation of %r: no details to show", element.text)
            return self._overlay

        if self._overlay is not None and self._overlay.element is element:
            self.close()
            return None

        self.focused = element
        self._overlay = OpenOverlay(element=element, placement=self._place(element))
        LOGGER.debug("Opened overlay for %r (%s)", element.text, self._overlay.placement.side.value)
        return self._overlay

    def dismiss_outside(self) -> None:
        self.close()

    def escape(self) -> Optional[Element]:
        """Close the overlay and return the anchor that should regain focus."""

        anchor = self.active
        self.close()
        if anchor is not None:
            self.focused = anchor
        return anchor

    def close(self) -> None:
        if self._overlay is None:
            return
        LOGGER.debug("Closed overlay for %r", self._overlay.element.text)
        self._overlay = None

    def reposition(self) -> Optional[OpenOverlay]:
        if self._overlay is None:
            return None
        element = self._overlay.element
        self._overlay = OpenOverlay(element=element, placement=self._place(element))
        return self._overlay

    def scroll_overlay(self, dy: float) -> float:
        """Scroll the content of a height-constrained overlay by ``dy``.

        The offset is clamped so the last line never scrolls above the bottom
        edge. Returns the new offset.
        """

        if self._overlay is None:
            return 0.0
        limit = self.surface.overlay_scroll_limit(self._overlay)
        offset = max(0.0, min(self._overlay.scroll_offset + dy, limit))
        self._overlay = replace(self._overlay, scroll_offset=offset)
        return offset

    # ------------------------------------------------------------------
    # Host input adapter
    # ------------------------------------------------------------------
    def handle_click(self, target: Optional[Element], *, inside_overlay: bool = False) -> None:
        if inside_overlay:
            return
        if target is not None and target.is_session:
            self.activate(target)
            return
        self.dismiss_outside()

    def handle_point(self, x: float, y: float) -> None:
        """Pointer click at viewport coordinates."""

        if self._overlay is not None and self._overlay.placement.box.contains(x, y):
            self.handle_click(None, inside_overlay=True)
            return
        self.handle_click(self.surface.element_at(x, y))

    def handle_key(self, key: str, target: Optional[Element] = None) -> None:
        if key in ESCAPE_KEYS:
            self.escape()
            return
        target = target if target is not None else self.focused
        if key in ACTIVATION_KEYS and target is not None and target.is_session:
            self.activate(target)

    def handle_resize(self, width: float, height: float) -> bool:
        rebuilt = self.view.resize(width, height)
        if not rebuilt:
            self.reposition()
        return rebuilt

    def handle_scroll(self, y: float) -> None:
        self.surface.scroll_to(y)
        self.reposition()

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _place(self, element: Element) -> OverlayPlacement:
        metrics = self.surface.layout
        viewport = self.surface.viewport
        mode = self.view.mode or RenderMode.GRID
        if mode is RenderMode.LIST:
            max_width = viewport.width - 2 * metrics.overlay_margin
        else:
            max_width = metrics.overlay_max_width
        natural = self.surface.measure_overlay(element, max(1.0, max_width))
        anchor = self.surface.element_box(element)
        return place_overlay(anchor, natural, viewport, mode=mode, metrics=metrics)

    def _on_rebuild(self, rendering: Rendering) -> None:
        # The previous elements no longer exist after a rebuild.
        self.close()
        self.focused = None


__all__ = ["InteractionController", "OverlayState"]
