"""
Chain Topology
==============

Structural queries over a built ChainGraphView.

STRUCTURE ONLY:
===============
This module answers "which nodes and edges form this chain" and
"is every rule row a simple user -> sink path". It never scores,
ranks or evaluates rules.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import FrozenSet, List, Tuple

import networkx as nx

from chainview.dtos import NodeRole
from chainview.visualization.graph import ChainGraphView


@dataclass(frozen=True)
class ChainTrace:
    """Node and edge ids belonging to one rule's chain."""
    rule_index: int
    node_ids: FrozenSet[str]
    edge_ids: FrozenSet[str]


class ChainTopology:
    """
    Wraps a networkx DiGraph built from one view.

    Built once per view; the view itself is never modified.
    """

    def __init__(self, view: ChainGraphView):
        self._view = view
        self._graph = nx.DiGraph()
        for node in view.nodes:
            self._graph.add_node(node.node_id, rule_index=node.rule_index, role=node.role)
        for edge in view.edges:
            self._graph.add_edge(edge.source_id, edge.target_id, edge_id=edge.edge_id)

    @property
    def view_id(self) -> str:
        return self._view.view_id

    @property
    def graph(self) -> nx.DiGraph:
        return self._graph

    def trace(self, node_id: str) -> ChainTrace:
        """All nodes upstream and downstream of node_id, plus the edges among them."""
        if node_id not in self._graph:
            raise KeyError(node_id)
        members = {node_id} | nx.ancestors(self._graph, node_id) | nx.descendants(self._graph, node_id)
        edge_ids = frozenset(
            data["edge_id"]
            for source, target, data in self._graph.subgraph(members).edges(data=True)
        )
        return ChainTrace(
            rule_index=self._graph.nodes[node_id]["rule_index"],
            node_ids=frozenset(members),
            edge_ids=edge_ids,
        )

    def rule_path(self, rule_index: int) -> List[str]:
        """Node ids of one rule row from user to sink."""
        users = [
            n for n, data in self._graph.nodes(data=True)
            if data["rule_index"] == rule_index and data["role"] is NodeRole.USER
        ]
        sinks = [
            n for n, data in self._graph.nodes(data=True)
            if data["rule_index"] == rule_index and data["role"] is NodeRole.SINK
        ]
        if len(users) != 1 or len(sinks) != 1:
            return []
        try:
            return nx.shortest_path(self._graph, users[0], sinks[0])
        except nx.NetworkXNoPath:
            return []

    def structural_violations(self) -> Tuple[str, ...]:
        """
        Rows that are not a single simple path from user to sink.
        An empty result means the view is well formed.
        """
        problems = []
        if not nx.is_directed_acyclic_graph(self._graph):
            problems.append("graph contains a cycle")

        for component in nx.weakly_connected_components(self._graph):
            rule_indices = {self._graph.nodes[n]["rule_index"] for n in component}
            if len(rule_indices) != 1:
                problems.append(f"component spans rules {sorted(rule_indices)}")
                continue
            rule_index = rule_indices.pop()
            path = self.rule_path(rule_index)
            if len(path) != len(component):
                problems.append(f"rule {rule_index} is not a simple user-to-sink path")
        return tuple(problems)

    def component_count(self) -> int:
        if not self._graph:
            return 0
        return nx.number_weakly_connected_components(self._graph)
