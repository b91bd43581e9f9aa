"""Viewport-driven choice between the grid and list renderings."""

from __future__ import annotations

import logging
from typing import Callable, List, Optional

from .rendering.layout import DEFAULT_LAYOUT, RenderMode, Size
from .rendering.projector import Formatter, Rendering, projector_for
from .rendering.surface import ScheduleSurface
from .schedule.formatting import format_details
from .schedule.model import Schedule
from .schedule.timeline import Timeline

LOGGER = logging.getLogger(__name__)

RebuildListener = Callable[[Rendering], None]


def select_mode(width: float, breakpoint: int = DEFAULT_LAYOUT.breakpoint) -> RenderMode:
    """Return LIST for viewports at or below ``breakpoint``, GRID otherwise."""

    return RenderMode.LIST if width <= breakpoint else RenderMode.GRID


class ScheduleView:
    """Owns the current rendering and rebuilds it only when the mode changes.

    The timeline is normalized once per schedule load. Resizes that keep the
    same mode only re-measure the surface, so an open overlay survives them.
    """

    def __init__(
        self,
        schedule: Schedule,
        surface: ScheduleSurface,
        *,
        breakpoint: int = DEFAULT_LAYOUT.breakpoint,
        formatter: Formatter = format_details,
    ) -> None:
        self.schedule = schedule
        self.surface = surface
        self.breakpoint = breakpoint
        self.formatter = formatter
        self.timeline = Timeline.from_schedule(schedule)
        self.rendering: Optional[Rendering] = None
        self.rebuild_count = 0
        self._listeners: List[RebuildListener] = []

    @property
    def mode(self) -> Optional[RenderMode]:
        return self.rendering.mode if self.rendering is not None else None

    def on_rebuild(self, listener: RebuildListener) -> None:
        self._listeners.append(listener)

    def resize(self, width: float, height: float) -> bool:
        """Handle a viewport change; return ``True`` when the rendering was rebuilt."""

        viewport = Size(width, height)
        mode = select_mode(width, self.breakpoint)
        if self.rendering is not None and mode is self.rendering.mode:
            self.surface.resize(viewport)
            return False

        LOGGER.info("Switching to %s layout at width %s", mode.value, width)
        rendering = projector_for(mode, self.formatter).build(self.schedule, self.timeline)
        self.rendering = rendering
        self.rebuild_count += 1
        self.surface.lay_out(rendering, viewport)
        for listener in self._listeners:
            listener(rendering)
        return True


__all__ = ["ScheduleView", "select_mode"]
