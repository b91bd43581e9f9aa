"""Raster surface that lays out a rendering and draws schedule frames."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Sequence

from PIL import Image, ImageDraw, ImageFont

from .layout import DEFAULT_LAYOUT, Box, LayoutMetrics, RenderMode, Size
from .overlay import Arrow, OpenOverlay
from .projector import DAY_HEADER, DAY_LABEL, SESSION, TIME_LABEL, Element, Rendering

LOGGER = logging.getLogger(__name__)

ELLIPSIS = "…"


def _font_length(font: ImageFont.ImageFont, text: str) -> float:
    try:
        return font.getlength(text)  # type: ignore[attr-defined]
    except AttributeError:  # pragma: no cover - fallback for older Pillow
        dummy_img = Image.new("L", (1, 1), color=255)
        draw = ImageDraw.Draw(dummy_img)
        return float(draw.textlength(text, font=font))


def _load_font(path_candidates: Sequence[Path], size: int) -> ImageFont.ImageFont:
    for candidate in path_candidates:
        if candidate and candidate.exists():
            return ImageFont.truetype(str(candidate), size=size)
    return ImageFont.load_default()


def _default_font_candidates(bold: bool) -> List[Path]:
    names = [
        "DejaVuSans-Bold.ttf" if bold else "DejaVuSans.ttf",
        "Arial Bold.ttf" if bold else "Arial.ttf",
    ]
    candidates: List[Path] = []
    search_dirs = [
        Path("/usr/share/fonts/truetype/dejavu"),
        Path("/usr/share/fonts"),
        Path("/Library/Fonts"),
        Path.home() / ".fonts",
    ]
    for name in names:
        for directory in search_dirs:
            candidates.append(directory / name)
    return candidates


def wrap_text(
    text: str,
    font: ImageFont.ImageFont,
    *,
    max_width: float,
    max_lines: int | None = None,
) -> List[str]:
    """Greedy word wrap that keeps explicit line breaks.

    Words wider than ``max_width`` are truncated with an ellipsis. When
    ``max_lines`` is given, the last kept line is ellipsized.
    """

    lines: List[str] = []
    for paragraph in text.split("\n"):
        words = paragraph.split()
        if not words:
            lines.append("")
            continue
        current = ""
        for word in words:
            candidate = f"{current} {word}" if current else word
            if _font_length(font, candidate) <= max_width:
                current = candidate
                continue
            if current:
                lines.append(current)
            current = word if _font_length(font, word) <= max_width else _truncate(word, font, max_width)
        lines.append(current)

    if max_lines is not None and len(lines) > max_lines:
        lines = lines[:max_lines]
        lines[-1] = _truncate(lines[-1], font, max_width, force=True)
    return lines


def _truncate(line: str, font: ImageFont.ImageFont, max_width: float, *, force: bool = False) -> str:
    current = line.rstrip()
    if not force and _font_length(font, current) <= max_width:
        return current
    while current and _font_length(font, current + ELLIPSIS) > max_width:
        current = current[:-1].rstrip()
    return (current + ELLIPSIS) if current else ELLIPSIS


CATEGORY_FILLS: Dict[str, int] = {
    "keynote": 200,
    "talk": 235,
    "panel": 220,
    "workshop": 210,
    "break": 248,
}


@dataclass
class RendererConfig:
    """Configuration values and font management for the surface."""

    layout: LayoutMetrics = DEFAULT_LAYOUT
    font_regular_path: Path | None = None
    font_bold_path: Path | None = None
    background_color: int = 255
    foreground_color: int = 0
    muted_color: int = 110
    session_fill: int = 240
    label_font_size: int = 14
    header_font_size: int = 16
    title_font_size: int = 14
    body_font_size: int = 13
    category_fills: Dict[str, int] = field(default_factory=lambda: dict(CATEGORY_FILLS))

    def _font_candidates(self, bold: bool) -> List[Path]:
        provided = self.font_bold_path if bold else self.font_regular_path
        candidates: List[Path] = []
        if provided is not None:
            candidates.append(Path(provided))
        candidates.extend(_default_font_candidates(bold))
        return candidates

    def font(self, size: int, *, bold: bool = False) -> ImageFont.ImageFont:
        return _load_font(self._font_candidates(bold), size)

    def line_height(self, size: int) -> int:
        return size + 5

    def fill_for(self, category: str) -> int:
        return self.category_fills.get(category, self.session_fill)


class ScheduleSurface:
    """Lay out a :class:`Rendering` for a viewport and draw it.

    Element boxes are computed in content coordinates and reported in
    viewport coordinates, i.e. shifted by the current vertical scroll.
    """

    def __init__(self, config: RendererConfig | None = None) -> None:
        self.config = config or RendererConfig()
        self.viewport = Size(0, 0)
        self.scroll_y = 0.0
        self.content_height = 0.0
        self._rendering: Optional[Rendering] = None
        self._boxes: Dict[int, Box] = {}

    @property
    def layout(self) -> LayoutMetrics:
        return self.config.layout

    # ------------------------------------------------------------------
    # Geometry
    # ------------------------------------------------------------------
    def lay_out(self, rendering: Rendering, viewport: Size) -> None:
        self._rendering = rendering
        self.viewport = viewport
        if rendering.mode is RenderMode.GRID:
            self._boxes = self._grid_boxes(rendering, viewport)
        else:
            self._boxes = self._list_boxes(rendering, viewport)
        bottom = max((box.bottom for box in self._boxes.values()), default=0.0)
        self.content_height = bottom + self.layout.page_padding
        self.scroll_to(self.scroll_y)

    def resize(self, viewport: Size) -> None:
        """Re-measure the current rendering for a new viewport size."""

        if self._rendering is not None:
            self.lay_out(self._rendering, viewport)
        else:
            self.viewport = viewport

    def scroll_to(self, y: float) -> float:
        limit = max(0.0, self.content_height - self.viewport.height)
        self.scroll_y = max(0.0, min(float(y), limit))
        return self.scroll_y

    def content_box(self, element: Element) -> Box:
        return self._boxes[id(element)]

    def element_box(self, element: Element) -> Box:
        return self.content_box(element).shifted(dy=-self.scroll_y)

    def element_at(self, x: float, y: float) -> Optional[Element]:
        """Return the session element under a viewport point, if any."""

        if self._rendering is None:
            return None
        for element in self._rendering.sessions():
            box = self._boxes.get(id(element))
            if box is not None and box.shifted(dy=-self.scroll_y).contains(x, y):
                return element
        return None

    def measure_overlay(self, element: Element, max_width: float) -> Size:
        """Natural size of the overlay for ``element`` when capped at ``max_width``."""

        cfg = self.config
        padding = self.layout.overlay_padding
        inner = max(1.0, max_width - 2 * padding)
        title_lines, body_lines = self._overlay_lines(element, inner)
        widest = max(
            [_font_length(cfg.font(cfg.title_font_size, bold=True), line) for line in title_lines]
            + [_font_length(cfg.font(cfg.body_font_size), line) for line in body_lines]
            + [0.0]
        )
        width = min(max_width, widest + 2 * padding)
        height = (
            2 * padding
            + len(title_lines) * cfg.line_height(cfg.title_font_size)
            + padding // 2
            + len(body_lines) * cfg.line_height(cfg.body_font_size)
        )
        return Size(width, height)

    def overlay_scroll_limit(self, overlay: OpenOverlay) -> float:
        """Largest content offset that still fills a height-constrained overlay."""

        placement = overlay.placement
        if not placement.scrolls:
            return 0.0
        natural = self.measure_overlay(overlay.element, placement.width)
        return max(0.0, natural.height - placement.height)

    def _overlay_lines(self, element: Element, inner_width: float) -> tuple[List[str], List[str]]:
        cfg = self.config
        title_lines = wrap_text(
            element.text, cfg.font(cfg.title_font_size, bold=True), max_width=inner_width
        )
        body_lines = wrap_text(
            element.detail_text, cfg.font(cfg.body_font_size), max_width=inner_width
        )
        return title_lines, body_lines

    def _grid_boxes(self, rendering: Rendering, viewport: Size) -> Dict[int, Box]:
        layout = self.layout
        placements = [e.placement for e in rendering.elements if e.placement is not None]
        columns = max((p.last_column for p in placements), default=1)
        day_area = layout.content_width(viewport.width) - layout.time_label_width
        column_width = day_area / (columns - 1) if columns > 1 else 0.0

        def column_left(column: int) -> float:
            if column <= 1:
                return layout.page_padding
            return layout.page_padding + layout.time_label_width + (column - 2) * column_width

        def row_top(row: int) -> float:
            if row <= 1:
                return layout.page_padding
            return layout.page_padding + layout.header_height + (row - 2) * layout.row_height

        def column_right(column: int) -> float:
            if column <= 1:
                return column_left(1) + layout.time_label_width
            return column_left(column) + column_width

        def row_bottom(row: int) -> float:
            if row <= 1:
                return row_top(1) + layout.header_height
            return row_top(row) + layout.row_height

        boxes: Dict[int, Box] = {}
        inset = layout.cell_gap / 2
        for element in rendering.elements:
            p = element.placement
            if p is None:
                continue
            left = column_left(p.column) + inset
            top = row_top(p.row) + inset
            right = column_right(p.last_column) - inset
            bottom = row_bottom(p.last_row) - inset
            boxes[id(element)] = Box(left, top, max(0.0, right - left), max(0.0, bottom - top))
        return boxes

    def _list_boxes(self, rendering: Rendering, viewport: Size) -> Dict[int, Box]:
        layout = self.layout
        cfg = self.config
        width = layout.content_width(viewport.width)
        title_font = cfg.font(cfg.title_font_size, bold=True)
        inner = max(1.0, width - 2 * layout.list_row_padding)

        boxes: Dict[int, Box] = {}
        y = float(layout.page_padding)
        for element in rendering.elements:
            if element.kind == DAY_HEADER:
                height = float(layout.list_header_height)
            else:
                lines = wrap_text(
                    element.text, title_font, max_width=inner, max_lines=layout.title_max_lines
                )
                height = (
                    2 * layout.list_row_padding
                    + cfg.line_height(cfg.body_font_size)
                    + len(lines) * cfg.line_height(cfg.title_font_size)
                )
            boxes[id(element)] = Box(layout.page_padding, y, width, height)
            y += height + layout.list_row_gap
        return boxes

    # ------------------------------------------------------------------
    # Drawing
    # ------------------------------------------------------------------
    def draw(self, overlay: OpenOverlay | None = None) -> Image.Image:
        """Draw the visible part of the current rendering plus the overlay."""

        if self._rendering is None:
            raise RuntimeError("Surface has no rendering; call lay_out() first")

        cfg = self.config
        image = Image.new(
            "L",
            (max(1, int(self.viewport.width)), max(1, int(self.viewport.height))),
            color=cfg.background_color,
        )
        draw = ImageDraw.Draw(image)

        active = overlay.element if overlay is not None else None
        for element in self._rendering.elements:
            box = self._boxes.get(id(element))
            if box is None:
                continue
            box = box.shifted(dy=-self.scroll_y)
            if box.bottom < 0 or box.top > self.viewport.height:
                continue
            self._draw_element(draw, element, box, active=element is active)

        if overlay is not None:
            self._draw_overlay(draw, overlay)
        return image

    def render_message(self, message: str, viewport: Size | None = None) -> Image.Image:
        """Draw a single centred message, used before data arrives or on failure."""

        cfg = self.config
        viewport = viewport or self.viewport
        width, height = max(1, int(viewport.width)), max(1, int(viewport.height))
        image = Image.new("L", (width, height), color=cfg.background_color)
        draw = ImageDraw.Draw(image)
        font = cfg.font(cfg.header_font_size, bold=True)
        lines = wrap_text(message, font, max_width=max(1, width - 2 * self.layout.page_padding))
        line_height = cfg.line_height(cfg.header_font_size)
        y = (height - len(lines) * line_height) / 2
        for line in lines:
            x = (width - _font_length(font, line)) / 2
            draw.text((x, y), line, font=font, fill=cfg.foreground_color)
            y += line_height
        return image

    def _draw_element(
        self,
        draw: ImageDraw.ImageDraw,
        element: Element,
        box: Box,
        *,
        active: bool,
    ) -> None:
        cfg = self.config
        layout = self.layout
        rect = (box.left, box.top, box.right, box.bottom)

        if element.kind in (DAY_LABEL, DAY_HEADER):
            font = cfg.font(cfg.header_font_size, bold=True)
            draw.line((box.left, box.bottom, box.right, box.bottom), fill=cfg.foreground_color, width=2)
            draw.text(
                (box.left + 4, box.bottom - cfg.line_height(cfg.header_font_size) - 4),
                _truncate(element.text, font, box.width - 8),
                font=font,
                fill=cfg.foreground_color,
            )
            return

        if element.kind == TIME_LABEL:
            font = cfg.font(cfg.label_font_size)
            draw.text((box.left, box.top), element.text, font=font, fill=cfg.muted_color)
            return

        if element.kind != SESSION or element.session is None:
            return

        session = element.session
        draw.rounded_rectangle(
            rect,
            radius=6,
            fill=cfg.fill_for(session.category),
            outline=cfg.foreground_color,
            width=3 if active else 1,
        )
        padding = layout.list_row_padding if element.placement is None else 6
        inner = max(1.0, box.width - 2 * padding)
        body_font = cfg.font(cfg.body_font_size)
        title_font = cfg.font(cfg.title_font_size, bold=True)

        y = box.top + padding
        time_text = f"{session.start}-{session.end}"
        draw.text((box.left + padding, y), time_text, font=body_font, fill=cfg.muted_color)
        y += cfg.line_height(cfg.body_font_size)

        title_lh = cfg.line_height(cfg.title_font_size)
        room = max(1, int((box.bottom - padding - y) // title_lh))
        for line in wrap_text(
            element.text,
            title_font,
            max_width=inner,
            max_lines=min(room, layout.title_max_lines),
        ):
            draw.text((box.left + padding, y), line, font=title_font, fill=cfg.foreground_color)
            y += title_lh

    def _draw_overlay(self, draw: ImageDraw.ImageDraw, overlay: OpenOverlay) -> None:
        cfg = self.config
        layout = self.layout
        placement = overlay.placement
        box = placement.box
        draw.rounded_rectangle(
            (box.left, box.top, box.right, box.bottom),
            radius=8,
            fill=cfg.background_color,
            outline=cfg.foreground_color,
            width=2,
        )

        if placement.arrow is not None:
            anchor = self.element_box(overlay.element)
            size = layout.arrow_size
            tip_x = min(max(anchor.center_x, box.left + 2 * size), box.right - 2 * size)
            if placement.arrow is Arrow.ARROW_TOP:
                points = [(tip_x - size, box.top), (tip_x + size, box.top), (tip_x, box.top - size)]
            else:
                points = [
                    (tip_x - size, box.bottom),
                    (tip_x + size, box.bottom),
                    (tip_x, box.bottom + size),
                ]
            draw.polygon(points, fill=cfg.foreground_color)

        padding = layout.overlay_padding
        title_lines, body_lines = self._overlay_lines(overlay.element, max(1.0, box.width - 2 * padding))
        rows = [(line, True) for line in title_lines] + [(line, False) for line in body_lines]
        title_font = cfg.font(cfg.title_font_size, bold=True)
        body_font = cfg.font(cfg.body_font_size)

        first = box.top + padding
        y = first - overlay.scroll_offset
        limit = box.bottom - padding
        clipped = False
        for index, (line, is_title) in enumerate(rows):
            size = cfg.title_font_size if is_title else cfg.body_font_size
            if index == len(title_lines):
                y += padding // 2
            line_height = cfg.line_height(size)
            if y < first:
                # scrolled past
                y += line_height
                continue
            if y + line_height > limit:
                clipped = True
                break
            font = title_font if is_title else body_font
            draw.text((box.left + padding, y), line, font=font, fill=cfg.foreground_color)
            y += line_height

        if clipped:
            hint = ELLIPSIS
            draw.text(
                (box.right - padding - _font_length(body_font, hint), limit - cfg.body_font_size),
                hint,
                font=body_font,
                fill=cfg.muted_color,
            )
            LOGGER.debug("Overlay content clipped to %.0f units; scroll hint drawn", box.height)


__all__ = ["RendererConfig", "ScheduleSurface", "wrap_text"]
