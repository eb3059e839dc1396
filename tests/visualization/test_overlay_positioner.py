"""
Overlay Positioner Tests

Each placement rule is exercised on its own, then in combination.
Viewport 1200x800, margin 20, gap 10 unless stated otherwise.
"""

import pytest

from chainview.config import OverlayConfig
from chainview.visualization.graph import Point
from chainview.visualization.overlay import OverlayPositioner, Rect, Size


VIEWPORT = Size(1200, 800)
PANEL = Size(400, 300)


@pytest.fixture
def positioner():
    return OverlayPositioner()


def assert_contained(point, overlay, viewport, margin=20):
    assert margin <= point.x
    assert point.x + overlay.width <= viewport.width - margin
    assert margin <= point.y
    assert point.y + overlay.height <= viewport.height - margin


class TestDefaultPlacement:

    def test_right_of_anchor(self, positioner):
        anchor = Rect(left=100, top=200, width=120, height=60)
        assert positioner.position(anchor, PANEL, VIEWPORT) == Point(230, 200)

    def test_rect_edges(self):
        rect = Rect.from_edges(10, 20, 110, 70)
        assert rect.width == 100
        assert rect.right == 110
        assert rect.bottom == 70


class TestCorrectiveRules:

    def test_flip_left_near_right_edge(self, positioner):
        """Anchor 10 units from the right edge flips the popover to the left."""
        anchor = Rect(left=VIEWPORT.width - 10, top=50, width=10, height=40)
        point = positioner.position(anchor, Size(400, 300), VIEWPORT)
        assert point.x <= 1180 - 400
        assert point.x == 1190 - 400 - 10
        assert_contained(point, Size(400, 300), VIEWPORT)

    def test_shift_up_near_bottom(self, positioner):
        anchor = Rect(left=100, top=700, width=100, height=60)
        point = positioner.position(anchor, PANEL, VIEWPORT)
        assert point.y == 800 - 20 - 300
        assert_contained(point, PANEL, VIEWPORT)

    def test_clamp_top(self, positioner):
        anchor = Rect(left=100, top=-40, width=100, height=60)
        point = positioner.position(anchor, PANEL, VIEWPORT)
        assert point.y == 20

    def test_flip_would_cross_left_margin(self, positioner):
        """Neither side fits next to a central anchor: clamp inside the margins."""
        viewport = Size(700, 800)
        anchor = Rect(left=300, top=100, width=100, height=40)
        overlay = Size(600, 200)
        point = positioner.position(anchor, overlay, viewport)
        assert point.x == 20
        assert_contained(point, overlay, viewport)

    def test_flip_with_gap_smaller_than_margin(self, positioner):
        """An anchor hugging the right edge still lands inside the right margin."""
        anchor = Rect(left=1195, top=100, width=5, height=5)
        point = positioner.position(anchor, PANEL, VIEWPORT)
        assert point.x + PANEL.width <= VIEWPORT.width - 20

    def test_overlay_wider_than_viewport_clamps_left(self, positioner):
        anchor = Rect(left=500, top=100, width=50, height=50)
        overlay = Size(1500, 200)
        point = positioner.position(anchor, overlay, VIEWPORT)
        assert point.x == 20
        assert not positioner.fits(overlay, VIEWPORT)

    def test_overlay_taller_than_viewport_clamps_top(self, positioner):
        anchor = Rect(left=100, top=100, width=50, height=50)
        point = positioner.position(anchor, Size(300, 1000), VIEWPORT)
        assert point.y == 20

    def test_corner_anchor(self, positioner):
        anchor = Rect(left=1150, top=780, width=40, height=15)
        point = positioner.position(anchor, PANEL, VIEWPORT)
        assert_contained(point, PANEL, VIEWPORT)


class TestMarginHandling:

    def test_explicit_margin_overrides_config(self, positioner):
        anchor = Rect(left=100, top=0, width=10, height=10)
        assert positioner.position(anchor, PANEL, VIEWPORT, margin=50).y == 50

    def test_configured_margin_and_gap(self):
        positioner = OverlayPositioner(OverlayConfig(margin=5, gap=0))
        anchor = Rect(left=100, top=0, width=10, height=10)
        assert positioner.position(anchor, PANEL, VIEWPORT) == Point(110, 5)

    def test_fits(self, positioner):
        assert positioner.fits(Size(1160, 760), VIEWPORT)
        assert not positioner.fits(Size(1161, 100), VIEWPORT)

    def test_negative_margin_rejected(self):
        with pytest.raises(ValueError):
            OverlayConfig(margin=-1)
