"""
Visualizer Configuration

Layout, overlay and service settings. All layout values are in
px-equivalent canvas units.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Optional, Tuple
import os


DEFAULT_EDGE_PALETTE: Tuple[str, ...] = (
    "#3b82f6",  # blue
    "#06b6d4",  # cyan
    "#8b5cf6",  # violet
    "#22c55e",  # green
    "#f97316",  # orange
    "#ec4899",  # pink
)

NEUTRAL_COLOR = "#64748b"


@dataclass(frozen=True)
class LayoutConfig:
    """Fixed-grid layout: one rule per row, traffic flows left to right."""
    start_x: float = 50.0
    start_y: float = 60.0
    column_gap: float = 200.0
    row_gap: float = 180.0
    palette: Tuple[str, ...] = DEFAULT_EDGE_PALETTE

    def __post_init__(self):
        if not self.palette:
            raise ValueError("Edge palette must not be empty")
        if self.row_gap <= 0 or self.column_gap <= 0:
            raise ValueError("Layout gaps must be positive")


@dataclass(frozen=True)
class OverlayConfig:
    """Detail popover placement and sizing."""
    margin: float = 20.0            # Minimum clearance from viewport edges
    gap: float = 10.0               # Distance between anchor and popover
    panel_width: float = 400.0
    panel_max_height: float = 500.0
    panel_header_height: float = 100.0
    panel_row_height: float = 36.0

    def __post_init__(self):
        if self.margin < 0 or self.gap < 0:
            raise ValueError("Overlay margin and gap must be non-negative")


@dataclass(frozen=True)
class ServiceConfig:
    """Admin API access for fetching chain previews."""
    base_url: str = "http://localhost:8000"
    access_token: Optional[str] = None
    timeout: float = 30.0

    @classmethod
    def from_env(cls) -> 'ServiceConfig':
        timeout_raw = os.environ.get("CHAINVIEW_API_TIMEOUT", "30")
        try:
            timeout = float(timeout_raw)
        except ValueError:
            timeout = 30.0
        return cls(
            base_url=os.environ.get("CHAINVIEW_API_BASE", cls.base_url).rstrip("/"),
            access_token=os.environ.get("CHAINVIEW_API_TOKEN") or None,
            timeout=timeout,
        )


@dataclass
class ChainViewConfig:
    """Unified configuration for the visualizer."""
    layout: LayoutConfig = None
    overlay: OverlayConfig = None
    service: ServiceConfig = None

    def __post_init__(self):
        self.layout = self.layout or LayoutConfig()
        self.overlay = self.overlay or OverlayConfig()
        self.service = self.service or ServiceConfig()
