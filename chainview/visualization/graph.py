"""
Chain Graph Visualization

Responsibility:
Deterministic transformation of an ordered rule tuple into a renderable
graph view. Input: Tuple[RuleDTO, ...] -> Output: ChainGraphView

LAYOUT:
=======
Fixed grid, one rule per row, traffic flows left to right:

    user(0) -> hop_1(1) -> ... -> hop_n(n) -> target(n+1) -> sink(n+2)

    x = start_x + column * column_gap
    y = start_y + rule_index * row_gap

DETERMINISTIC:
==============
Same rules (by value) + same layout = identical view: same ids, same
positions, same colours, same view_id. Nothing here reads a clock,
a random source or mutable global state.
"""

from __future__ import annotations
from dataclasses import dataclass, asdict
from enum import Enum
from typing import Dict, Iterable, List, Optional, Tuple, Union
import hashlib
import json
import logging

from chainview.config import LayoutConfig, NEUTRAL_COLOR
from chainview.dtos import (
    AvailabilityState, DisplayState, HopKind, NodeRole, TargetKind,
    HopSpec, TargetSpec, RuleDTO,
)

logger = logging.getLogger(__name__)


SINK_LABEL = "Internet"
UNKNOWN_KIND_TOKEN = "unknown"

ROLE_COLORS: Dict[NodeRole, str] = {
    NodeRole.USER: "#3b82f6",
    NodeRole.TARGET: "#f97316",
    NodeRole.SINK: "#22c55e",
}

HOP_KIND_COLORS: Dict[HopKind, str] = {
    HopKind.TEMPLATE_GROUP: "#06b6d4",
    HopKind.CUSTOM_GROUP: "#8b5cf6",
    HopKind.DYNAMIC_NODE: "#eab308",
    HopKind.SPECIFIED_NODE: "#06b6d4",
    HopKind.UNKNOWN: NEUTRAL_COLOR,
}


# =============================================================================
# RENDERABLE CONTRACTS
# =============================================================================

@dataclass(frozen=True)
class Point:
    x: float
    y: float


@dataclass(frozen=True)
class NodeAnnotation:
    """
    Server-supplied rule flags copied onto every node of the rule row.
    The drawing surface dims DISABLED rows and strikes through COVERED ones.
    """
    enabled: bool
    fully_covered: bool
    display_state: DisplayState


@dataclass(frozen=True)
class GraphNode:
    """Renderable graph node."""
    node_id: str
    role: NodeRole
    position: Point
    payload: Optional[Union[HopSpec, TargetSpec]]
    rule_index: int
    column: int
    label: str
    color: str
    kind_token: Optional[str]   # hop/target kind value, None for user and sink
    annotation: NodeAnnotation

    @property
    def has_detail(self) -> bool:
        return self.payload is not None

    @property
    def is_unknown_kind(self) -> bool:
        return self.kind_token == UNKNOWN_KIND_TOKEN


@dataclass(frozen=True)
class GraphEdge:
    """Renderable directed connector."""
    edge_id: str
    source_id: str
    target_id: str
    color_token: str
    rule_index: int


@dataclass(frozen=True)
class ChainGraphView:
    """
    Pre-layouted chain graph.
    Replaced as a whole on every rebuild, never mutated.
    """
    view_id: str
    nodes: Tuple[GraphNode, ...]
    edges: Tuple[GraphEdge, ...]
    availability: AvailabilityState
    rule_count: int

    @property
    def is_empty(self) -> bool:
        return self.availability is AvailabilityState.EMPTY

    def node(self, node_id: str) -> Optional[GraphNode]:
        for node in self.nodes:
            if node.node_id == node_id:
                return node
        return None

    def nodes_for_rule(self, rule_index: int) -> Tuple[GraphNode, ...]:
        return tuple(n for n in self.nodes if n.rule_index == rule_index)

    def edges_for_rule(self, rule_index: int) -> Tuple[GraphEdge, ...]:
        return tuple(e for e in self.edges if e.rule_index == rule_index)


# =============================================================================
# IDENTITY
# =============================================================================

def user_node_id(rule_index: int) -> str:
    return f"user-{rule_index}"


def hop_node_id(rule_index: int, hop_index: int) -> str:
    return f"hop-{rule_index}-{hop_index}"


def target_node_id(rule_index: int) -> str:
    return f"target-{rule_index}"


def sink_node_id(rule_index: int) -> str:
    return f"sink-{rule_index}"


def edge_id(source_id: str, target_id: str) -> str:
    return f"edge-{source_id}-{target_id}"


def rule_label(rule: RuleDTO, rule_index: int) -> str:
    return rule.name or f"Rule {rule_index + 1}"


def _json_default(obj):
    if isinstance(obj, Enum):
        return obj.value
    raise TypeError(f"Cannot fingerprint {type(obj).__name__}")


def fingerprint(rules: Iterable[RuleDTO], layout: LayoutConfig) -> str:
    """Content hash of rules + layout. Equal by value -> equal fingerprint."""
    canonical = json.dumps(
        {
            "layout": asdict(layout),
            "rules": [asdict(rule) for rule in rules],
        },
        sort_keys=True,
        default=_json_default,
        separators=(",", ":"),
    )
    return hashlib.sha256(canonical.encode("utf-8")).hexdigest()


# =============================================================================
# BUILDER
# =============================================================================

class GraphBuilder:
    """
    Builds ChainGraphViews from rule tuples.

    GUARANTEES:
    ===========
    1. Never mutates its input
    2. Never omits a rule - disabled and covered rows are flagged
    3. Never fails on an unknown hop/target kind - it renders neutral
    4. Each rule yields 3 + |hops| nodes and 2 + |hops| edges
    """

    def __init__(self, layout: Optional[LayoutConfig] = None):
        self._layout = layout or LayoutConfig()

    @property
    def layout(self) -> LayoutConfig:
        return self._layout

    def build(self, rules: Optional[Iterable[RuleDTO]]) -> ChainGraphView:
        rules = tuple(rules or ())
        nodes: List[GraphNode] = []
        edges: List[GraphEdge] = []

        for rule_index, rule in enumerate(rules):
            row_nodes, row_edges = self._build_row(rule, rule_index)
            nodes.extend(row_nodes)
            edges.extend(row_edges)

        view = ChainGraphView(
            view_id=f"chain_{fingerprint(rules, self._layout)[:16]}",
            nodes=tuple(nodes),
            edges=tuple(edges),
            availability=AvailabilityState.PRESENT if rules else AvailabilityState.EMPTY,
            rule_count=len(rules),
        )
        logger.debug(
            "Built %s: %d rules, %d nodes, %d edges",
            view.view_id, view.rule_count, len(view.nodes), len(view.edges),
        )
        return view

    def position_of(self, rule_index: int, column: int) -> Point:
        return Point(
            x=self._layout.start_x + column * self._layout.column_gap,
            y=self._layout.start_y + rule_index * self._layout.row_gap,
        )

    def color_for_rule(self, rule_index: int) -> str:
        palette = self._layout.palette
        return palette[rule_index % len(palette)]

    # =========================================================================
    # ROW CONSTRUCTION
    # =========================================================================

    def _build_row(
        self,
        rule: RuleDTO,
        rule_index: int
    ) -> Tuple[List[GraphNode], List[GraphEdge]]:
        annotation = NodeAnnotation(
            enabled=bool(rule.enabled),
            fully_covered=bool(rule.fully_covered),
            display_state=DisplayState.from_flags(bool(rule.enabled), bool(rule.fully_covered)),
        )
        hops = tuple(rule.hops or ())

        chain: List[GraphNode] = [GraphNode(
            node_id=user_node_id(rule_index),
            role=NodeRole.USER,
            position=self.position_of(rule_index, 0),
            payload=None,
            rule_index=rule_index,
            column=0,
            label=rule_label(rule, rule_index),
            color=ROLE_COLORS[NodeRole.USER],
            kind_token=None,
            annotation=annotation,
        )]

        for hop_index, hop in enumerate(hops):
            kind = hop.resolved_kind
            chain.append(GraphNode(
                node_id=hop_node_id(rule_index, hop_index),
                role=NodeRole.HOP,
                position=self.position_of(rule_index, hop_index + 1),
                payload=hop,
                rule_index=rule_index,
                column=hop_index + 1,
                label=hop.label,
                color=HOP_KIND_COLORS[kind],
                kind_token=kind.value,
                annotation=annotation,
            ))

        target = rule.target
        target_kind = target.resolved_kind
        chain.append(GraphNode(
            node_id=target_node_id(rule_index),
            role=NodeRole.TARGET,
            position=self.position_of(rule_index, len(hops) + 1),
            payload=target,
            rule_index=rule_index,
            column=len(hops) + 1,
            label=target.label,
            color=NEUTRAL_COLOR if target_kind is TargetKind.UNKNOWN else ROLE_COLORS[NodeRole.TARGET],
            kind_token=target_kind.value,
            annotation=annotation,
        ))

        chain.append(GraphNode(
            node_id=sink_node_id(rule_index),
            role=NodeRole.SINK,
            position=self.position_of(rule_index, len(hops) + 2),
            payload=None,
            rule_index=rule_index,
            column=len(hops) + 2,
            label=SINK_LABEL,
            color=ROLE_COLORS[NodeRole.SINK],
            kind_token=None,
            annotation=annotation,
        ))

        color = self.color_for_rule(rule_index)
        edges = [
            GraphEdge(
                edge_id=edge_id(source.node_id, target_node.node_id),
                source_id=source.node_id,
                target_id=target_node.node_id,
                color_token=color,
                rule_index=rule_index,
            )
            for source, target_node in zip(chain, chain[1:])
        ]
        return chain, edges
