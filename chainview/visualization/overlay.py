"""
Overlay Placement

Responsibility:
Compute an on-screen location for a detail popover so the popover stays
inside the visible viewport wherever the triggering node sits.

Input: anchor Rect + overlay Size + viewport Size -> Output: Point

PLACEMENT RULES (applied in order):
===================================
0. Default: right of the anchor, top-aligned with it
1. Overflows the right margin -> flip to the left of the anchor
2. Overflows the bottom margin -> shift up so the bottom sits on it
3. Above the top margin -> clamp to the top margin
4. Horizontal containment, left margin last: the popover never starts
   left of the margin, even when it is wider than the viewport allows

No caching: viewport and anchor change between interactions.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Optional

from chainview.config import OverlayConfig
from chainview.visualization.graph import Point


@dataclass(frozen=True)
class Size:
    width: float
    height: float


@dataclass(frozen=True)
class Rect:
    """Screen rectangle of the element that triggered the overlay."""
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

    @classmethod
    def from_edges(cls, left: float, top: float, right: float, bottom: float) -> 'Rect':
        return cls(left=left, top=top, width=right - left, height=bottom - top)


class OverlayPositioner:
    """Viewport-aware popover placement."""

    def __init__(self, config: Optional[OverlayConfig] = None):
        self._config = config or OverlayConfig()

    @property
    def config(self) -> OverlayConfig:
        return self._config

    def position(
        self,
        anchor: Rect,
        overlay: Size,
        viewport: Size,
        margin: Optional[float] = None
    ) -> Point:
        margin = self._config.margin if margin is None else margin
        gap = self._config.gap

        x = anchor.right + gap
        y = anchor.top

        # 1. flip left
        if x + overlay.width > viewport.width - margin:
            x = anchor.left - overlay.width - gap

        # 2. shift up
        if y + overlay.height > viewport.height - margin:
            y = viewport.height - margin - overlay.height

        # 3. top margin
        if y < margin:
            y = margin

        # 4. horizontal containment
        if x + overlay.width > viewport.width - margin:
            x = viewport.width - margin - overlay.width
        if x < margin:
            x = margin

        return Point(x=x, y=y)

    def fits(self, overlay: Size, viewport: Size, margin: Optional[float] = None) -> bool:
        """Whether full containment is achievable at all."""
        margin = self._config.margin if margin is None else margin
        return (
            overlay.width <= viewport.width - 2 * margin
            and overlay.height <= viewport.height - 2 * margin
        )
