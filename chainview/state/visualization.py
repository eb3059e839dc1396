"""
Chain Visualization (composition)

Responsibility:
Own the current rule tuple, the graph built from it, the open detail
popover and the highlighted chain. Hand results to the external drawing
and overlay surfaces.

ORDERING GUARANTEE:
===================
set_rules() closes any open popover BEFORE the new graph is rendered, so
a popover is never shown against a graph it was not opened on.

All operations are synchronous and run to completion on the caller's
thread; nothing here blocks, suspends or performs I/O.
"""

from __future__ import annotations
from typing import Optional, Protocol, Sequence, Tuple
import logging

from chainview.config import ChainViewConfig
from chainview.dtos import ChainPreviewDTO, RuleDTO
from chainview.errors import Degradation, UnknownNodeError
from chainview.interaction import ActionType, InteractionRequest
from chainview.observability import AuditEventType, AuditLog
from chainview.presentation.viewmodels import (
    DetailPanelViewModel, RuleHeaderViewModel, EMPTY_RULES_MESSAGE,
)
from chainview.state.overlay import OverlayState
from chainview.visualization.graph import ChainGraphView, GraphBuilder, Point
from chainview.visualization.overlay import OverlayPositioner, Rect, Size
from chainview.visualization.topology import ChainTopology, ChainTrace

logger = logging.getLogger(__name__)


# =============================================================================
# EXTERNAL SURFACES
# =============================================================================

class DrawingSurface(Protocol):
    """Draws shapes and animations; owns efficient re-render."""

    def render(self, view: ChainGraphView) -> None:
        ...


class OverlaySurface(Protocol):
    """Shows the detail popover at an absolute viewport position."""

    def show(self, position: Point, panel: DetailPanelViewModel) -> None:
        ...

    def hide(self) -> None:
        ...


class NullDrawingSurface:
    def render(self, view: ChainGraphView) -> None:
        pass


class NullOverlaySurface:
    def show(self, position: Point, panel: DetailPanelViewModel) -> None:
        pass

    def hide(self) -> None:
        pass


# =============================================================================
# COMPOSITION
# =============================================================================

class ChainVisualization:
    """
    Reactive state for the chain canvas.

    The rule tuple is treated as immutable once received; the graph is
    replaced as a whole whenever a new rule sequence object arrives.
    """

    def __init__(
        self,
        drawing_surface: Optional[DrawingSurface] = None,
        overlay_surface: Optional[OverlaySurface] = None,
        config: Optional[ChainViewConfig] = None,
        audit_log: Optional[AuditLog] = None,
    ):
        self._config = config or ChainViewConfig()
        self._drawing = drawing_surface or NullDrawingSurface()
        self._overlay_surface = overlay_surface or NullOverlaySurface()
        self._audit = audit_log or AuditLog("chain_visualization")

        self._builder = GraphBuilder(self._config.layout)
        self._positioner = OverlayPositioner(self._config.overlay)

        self._rules_ref: Optional[Sequence[RuleDTO]] = None
        self._rules: Tuple[RuleDTO, ...] = ()
        self._degradations: Tuple[Degradation, ...] = ()
        self._view: ChainGraphView = self._builder.build(())
        self._topology = ChainTopology(self._view)
        self._overlay = OverlayState.closed()
        self._highlight: Optional[ChainTrace] = None

    # =========================================================================
    # READ ACCESS
    # =========================================================================

    @property
    def rules(self) -> Tuple[RuleDTO, ...]:
        return self._rules

    @property
    def view(self) -> ChainGraphView:
        return self._view

    @property
    def overlay(self) -> OverlayState:
        return self._overlay

    @property
    def highlight(self) -> Optional[ChainTrace]:
        return self._highlight

    @property
    def degradations(self) -> Tuple[Degradation, ...]:
        return self._degradations

    @property
    def audit_log(self) -> AuditLog:
        return self._audit

    @property
    def is_empty(self) -> bool:
        return self._view.is_empty

    @property
    def empty_message(self) -> Optional[str]:
        return EMPTY_RULES_MESSAGE if self._view.is_empty else None

    def rule_headers(self) -> Tuple[RuleHeaderViewModel, ...]:
        return tuple(
            RuleHeaderViewModel.from_rule(rule, index)
            for index, rule in enumerate(self._rules)
        )

    # =========================================================================
    # RULE UPDATES
    # =========================================================================

    def set_rules(self, rules: Optional[Sequence[RuleDTO]]) -> ChainGraphView:
        """
        Replace the rule sequence.

        The same sequence object handed in again is not a change; any other
        object triggers a full rebuild even when equal by value.
        """
        if rules is not None and rules is self._rules_ref:
            return self._view

        # Close stale detail before anything is drawn for the new graph.
        self._close(reason="rebuild")
        self._highlight = None

        self._rules_ref = rules
        self._rules = tuple(rules or ())
        self._view = self._builder.build(self._rules)
        self._topology = ChainTopology(self._view)

        self._audit.record(
            AuditEventType.GRAPH_REBUILT, self._view.view_id,
            rules=self._view.rule_count, nodes=len(self._view.nodes), edges=len(self._view.edges),
        )
        if self._view.is_empty:
            logger.info("Chain graph rebuilt with no rules configured")
        else:
            logger.debug("Chain graph rebuilt: %s", self._view.view_id)

        self._drawing.render(self._view)
        return self._view

    def set_preview(self, preview: ChainPreviewDTO) -> ChainGraphView:
        """Replace rules from a fetched preview, keeping its degradations for display."""
        for degradation in preview.degradations:
            self._audit.record(
                AuditEventType.DEGRADATION, str(degradation.rule_index),
                code=degradation.code.name, message=degradation.message,
            )
        self._degradations = preview.degradations
        return self.set_rules(preview.rules)

    # =========================================================================
    # DETAIL POPOVER
    # =========================================================================

    def show_detail(self, node_id: str, anchor: Rect, viewport: Size) -> OverlayState:
        """
        Open (or replace) the detail popover for a graph node.

        Nodes without a detail payload (user, sink) leave the state as is.
        """
        node = self._view.node(node_id)
        if node is None:
            raise UnknownNodeError(node_id, self._view.view_id)
        if not node.has_detail:
            logger.debug("Node %s has no detail payload, ignoring", node_id)
            return self._overlay

        panel = DetailPanelViewModel.from_payload(
            node_id, node.payload, self._config.overlay, kind_token=node.kind_token,
        )
        position = self._positioner.position(anchor, panel.size, viewport)

        replaced = self._overlay.is_open
        previous = self._overlay.node_id
        self._overlay = OverlayState.opened(node_id, position, panel, self._view.view_id)

        self._audit.record(
            AuditEventType.OVERLAY_REPLACED if replaced else AuditEventType.OVERLAY_OPENED,
            node_id, x=position.x, y=position.y, previous=previous or "",
        )
        self._overlay_surface.show(position, panel)
        return self._overlay

    def close_detail(self) -> OverlayState:
        self._close(reason="close")
        return self._overlay

    def on_background_click(self) -> OverlayState:
        self._close(reason="background")
        return self._overlay

    def _close(self, reason: str) -> None:
        if not self._overlay.is_open:
            return
        node_id = self._overlay.node_id
        self._overlay = OverlayState.closed()
        self._audit.record(AuditEventType.OVERLAY_CLOSED, node_id, reason=reason)
        self._overlay_surface.hide()

    # =========================================================================
    # CHAIN EMPHASIS
    # =========================================================================

    def highlight_rule(self, node_id: str) -> ChainTrace:
        """Mark the whole chain containing node_id."""
        if self._view.node(node_id) is None:
            raise UnknownNodeError(node_id, self._view.view_id)
        self._highlight = self._topology.trace(node_id)
        self._audit.record(
            AuditEventType.HIGHLIGHT_CHANGED, node_id, rule_index=self._highlight.rule_index,
        )
        return self._highlight

    def clear_highlight(self) -> None:
        if self._highlight is not None:
            self._highlight = None
            self._audit.record(AuditEventType.HIGHLIGHT_CHANGED, "", rule_index="none")

    # =========================================================================
    # DISPATCH
    # =========================================================================

    def handle(self, request: InteractionRequest):
        """Apply one interaction intent reported by the drawing surface."""
        action = request.action
        if action is ActionType.SHOW_DETAIL:
            return self.show_detail(request.node_id, request.anchor, request.viewport)
        if action is ActionType.CLOSE_DETAIL:
            return self.close_detail()
        if action is ActionType.BACKGROUND_CLICK:
            return self.on_background_click()
        if action is ActionType.HIGHLIGHT_RULE:
            return self.highlight_rule(request.node_id)
        if action is ActionType.CLEAR_HIGHLIGHT:
            self.clear_highlight()
            return None
        raise ValueError(f"Unsupported action: {action}")
