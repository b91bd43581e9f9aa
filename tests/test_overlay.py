from __future__ import annotations

import itertools

import pytest

from schedule_grid.rendering.layout import Box, LayoutMetrics, RenderMode, Size
from schedule_grid.rendering.overlay import Arrow, Side, place_overlay

METRICS = LayoutMetrics(overlay_margin=10, overlay_gap=10)


def test_prefers_below_and_centres_on_anchor() -> None:
    placement = place_overlay(
        Box(400, 100, 200, 50), Size(300, 200), Size(1200, 900), metrics=METRICS
    )

    assert placement.side is Side.BELOW
    assert placement.arrow is Arrow.ARROW_TOP
    assert placement.top == 160
    assert placement.left == 350
    assert placement.max_height is None
    assert placement.height == 200


def test_flips_above_when_more_room_there() -> None:
    # 50 units below the anchor, 400 above it
    viewport = Size(1200, 1000)
    anchor = Box(500, 400, 100, 550)

    placement = place_overlay(anchor, Size(300, 300), viewport, metrics=METRICS)

    assert placement.side is Side.ABOVE
    assert placement.arrow is Arrow.ARROW_BOTTOM
    assert placement.max_height is None
    assert placement.height == 300
    assert placement.top == 90
    assert placement.box.bottom == anchor.top - METRICS.overlay_gap


def test_constrains_height_when_neither_side_fits() -> None:
    viewport = Size(1200, 300)
    anchor = Box(500, 50, 100, 200)

    placement = place_overlay(anchor, Size(300, 300), viewport, metrics=METRICS)

    # equal room on both sides goes below
    assert placement.side is Side.BELOW
    assert placement.arrow is Arrow.ARROW_TOP
    assert placement.max_height == 30
    assert placement.height == 30
    assert placement.scrolls
    assert placement.box.bottom <= viewport.height


def test_constrained_overlay_uses_larger_side() -> None:
    viewport = Size(1200, 400)
    anchor = Box(500, 200, 100, 120)

    placement = place_overlay(anchor, Size(300, 500), viewport, metrics=METRICS)

    assert placement.side is Side.ABOVE
    assert placement.arrow is Arrow.ARROW_BOTTOM
    assert placement.max_height == 180
    assert placement.top == 10


@pytest.mark.parametrize(
    "anchor_left, expected_left",
    [(0, 10), (-40, 10), (1180, 1200 - 10 - 300), (450, 375)],
)
def test_horizontal_clamping(anchor_left: float, expected_left: float) -> None:
    placement = place_overlay(
        Box(anchor_left, 100, 150, 40), Size(300, 100), Size(1200, 900), metrics=METRICS
    )

    assert placement.left == expected_left


def test_wide_overlay_is_narrowed_to_viewport() -> None:
    placement = place_overlay(Box(10, 10, 50, 20), Size(2000, 50), Size(500, 400), metrics=METRICS)

    assert placement.width == 480
    assert placement.left == 10


def test_list_mode_uses_fixed_bottom_sheet() -> None:
    viewport = Size(400, 800)

    placement = place_overlay(
        Box(12, 100, 376, 60), Size(376, 200), viewport, mode=RenderMode.LIST, metrics=METRICS
    )

    assert placement.side is Side.FIXED
    assert placement.arrow is None
    assert (placement.left, placement.width) == (10, 380)
    assert placement.box.bottom == viewport.height - METRICS.overlay_margin


def test_list_mode_constrains_tall_content() -> None:
    placement = place_overlay(
        Box(0, 0, 10, 10), Size(300, 5000), Size(400, 800), mode=RenderMode.LIST, metrics=METRICS
    )

    assert placement.max_height == 780
    assert placement.top == 10


def test_placement_is_idempotent() -> None:
    args = (Box(300, 700, 120, 40), Size(320, 260), Size(1000, 800))

    assert place_overlay(*args, metrics=METRICS) == place_overlay(*args, metrics=METRICS)


ANCHORS = [
    Box(0, 0, 100, 40),
    Box(900, 760, 100, 40),
    Box(-50, -30, 80, 60),
    Box(450, 380, 100, 40),
    Box(980, 300, 200, 40),
    Box(200, 900, 100, 40),
    Box(0, 0, 1000, 800),
]
OVERLAYS = [Size(0, 0), Size(200, 100), Size(360, 780), Size(2000, 3000)]
VIEWPORTS = [Size(1000, 800), Size(320, 480), Size(15, 15)]


@pytest.mark.parametrize("mode", [RenderMode.GRID, RenderMode.LIST])
def test_overlay_always_stays_inside_viewport(mode: RenderMode) -> None:
    for anchor, overlay, viewport in itertools.product(ANCHORS, OVERLAYS, VIEWPORTS):
        placement = place_overlay(anchor, overlay, viewport, mode=mode, metrics=METRICS)
        box = placement.box
        assert box.left >= 0, (anchor, overlay, viewport)
        assert box.top >= 0, (anchor, overlay, viewport)
        assert box.right <= viewport.width + 1e-9, (anchor, overlay, viewport)
        assert box.bottom <= viewport.height + 1e-9, (anchor, overlay, viewport)
        if mode is RenderMode.GRID:
            expected = Arrow.ARROW_TOP if placement.side is Side.BELOW else Arrow.ARROW_BOTTOM
            assert placement.arrow is expected
