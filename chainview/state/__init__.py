"""
State Layer

Responsibility:
Own the visualizer's reactive state (rules, graph, popover, highlight)
and drive the external drawing and overlay surfaces.
"""

from .overlay import OverlayState
from .visualization import (
    ChainVisualization, DrawingSurface, OverlaySurface,
    NullDrawingSurface, NullOverlaySurface,
)

__all__ = [
    'OverlayState',
    'ChainVisualization', 'DrawingSurface', 'OverlaySurface',
    'NullDrawingSurface', 'NullOverlaySurface',
]
