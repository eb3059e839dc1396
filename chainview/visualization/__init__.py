"""
Visualization Layer

Responsibility:
Deterministic, pure transformations from rule DTOs to renderable views
(graph layout) and from interaction geometry to overlay placement.
"""

from .graph import (
    Point, NodeAnnotation, GraphNode, GraphEdge, ChainGraphView, GraphBuilder,
    user_node_id, hop_node_id, target_node_id, sink_node_id, edge_id, rule_label,
)
from .overlay import Size, Rect, OverlayPositioner
from .topology import ChainTrace, ChainTopology

__all__ = [
    'Point', 'NodeAnnotation', 'GraphNode', 'GraphEdge', 'ChainGraphView', 'GraphBuilder',
    'user_node_id', 'hop_node_id', 'target_node_id', 'sink_node_id', 'edge_id', 'rule_label',
    'Size', 'Rect', 'OverlayPositioner',
    'ChainTrace', 'ChainTopology',
]
