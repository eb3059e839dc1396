"""
Interaction Contracts

Responsibility:
Define valid user actions on the chain canvas and their intent.
No execution logic - ChainVisualization interprets them.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional

from chainview.visualization.overlay import Rect, Size


class ActionType(Enum):
    """Types of user interaction."""
    # Detail popover
    SHOW_DETAIL = "show_detail"
    CLOSE_DETAIL = "close_detail"
    BACKGROUND_CLICK = "background_click"

    # Chain emphasis
    HIGHLIGHT_RULE = "highlight_rule"
    CLEAR_HIGHLIGHT = "clear_highlight"


@dataclass(frozen=True)
class InteractionRequest:
    """A specific user intent, as reported by the drawing surface."""
    request_id: str
    action: ActionType
    node_id: Optional[str] = None
    anchor: Optional[Rect] = None
    viewport: Optional[Size] = None
    timestamp: Optional[datetime] = None
    source_component: str = "canvas"

    def __post_init__(self):
        if self.action is ActionType.SHOW_DETAIL:
            if self.node_id is None or self.anchor is None or self.viewport is None:
                raise ValueError("show_detail requires node_id, anchor and viewport")
        if self.action is ActionType.HIGHLIGHT_RULE and self.node_id is None:
            raise ValueError("highlight_rule requires node_id")
