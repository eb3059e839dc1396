"""
Overlay State

Closed -> Open(node_id, position) on a node click;
Open -> Open(other node) on a click on another node (replaces, never stacks);
Open -> Closed on background click, explicit close, or a graph rebuild.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Optional

from chainview.presentation.viewmodels import DetailPanelViewModel
from chainview.visualization.graph import Point


@dataclass(frozen=True)
class OverlayState:
    """Immutable snapshot of the detail popover."""
    is_open: bool
    node_id: Optional[str] = None
    position: Optional[Point] = None
    panel: Optional[DetailPanelViewModel] = None
    view_id: Optional[str] = None   # graph the popover was opened against

    def __post_init__(self):
        if self.is_open and (self.node_id is None or self.position is None or self.panel is None):
            raise ValueError("Open overlay requires node_id, position and panel")
        if not self.is_open and self.node_id is not None:
            raise ValueError("Closed overlay cannot reference a node")

    @classmethod
    def closed(cls) -> 'OverlayState':
        return cls(is_open=False)

    @classmethod
    def opened(
        cls,
        node_id: str,
        position: Point,
        panel: DetailPanelViewModel,
        view_id: str
    ) -> 'OverlayState':
        return cls(is_open=True, node_id=node_id, position=position, panel=panel, view_id=view_id)
