"""Layout constants and geometry primitives for the schedule surface."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Final


class RenderMode(str, Enum):
    GRID = "grid"
    LIST = "list"


@dataclass(frozen=True)
class Size:
    width: float
    height: float


@dataclass(frozen=True)
class Box:
    """Axis-aligned rectangle in logical units."""

    left: float
    top: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.left + self.width

    @property
    def bottom(self) -> float:
        return self.top + self.height

    @property
    def center_x(self) -> float:
        return self.left + self.width / 2

    def shifted(self, dx: float = 0, dy: float = 0) -> "Box":
        return Box(self.left + dx, self.top + dy, self.width, self.height)

    def contains(self, x: float, y: float) -> bool:
        return self.left <= x < self.right and self.top <= y < self.bottom


@dataclass(frozen=True)
class LayoutMetrics:
    """Collection of reusable layout constants derived from the design."""

    breakpoint: int = 800
    page_padding: int = 12
    time_label_width: int = 72
    header_height: int = 44
    row_height: int = 56
    cell_gap: int = 4
    list_header_height: int = 40
    list_row_padding: int = 10
    list_row_gap: int = 6
    title_max_lines: int = 3
    overlay_margin: int = 10
    overlay_gap: int = 10
    overlay_max_width: int = 360
    overlay_padding: int = 12
    arrow_size: int = 8

    def content_width(self, viewport_width: float) -> float:
        return max(0.0, viewport_width - 2 * self.page_padding)


DEFAULT_LAYOUT: Final[LayoutMetrics] = LayoutMetrics()

__all__ = ["Box", "DEFAULT_LAYOUT", "LayoutMetrics", "RenderMode", "Size"]
