import json
from dataclasses import asdict, is_dataclass
from datetime import datetime, date
from enum import Enum
from typing import Any, Dict

from chainview.errors import Degradation
from chainview.visualization.graph import ChainGraphView, GraphEdge, GraphNode, Point


class GraphJSONEncoder(json.JSONEncoder):
    """
    JSON Encoder for renderable views.

    RULES:
    1. Dates MUST be ISO 8601 strings.
    2. Enums MUST use their .value.
    3. Sets -> Lists (sorted for determinism).
    4. Dataclasses -> dicts.
    """

    def default(self, obj: Any) -> Any:
        if isinstance(obj, (datetime, date)):
            return obj.isoformat()
        if isinstance(obj, Enum):
            return obj.value
        if isinstance(obj, (set, frozenset)):
            return sorted(list(obj))
        if is_dataclass(obj) and not isinstance(obj, type):
            return asdict(obj)
        return super().default(obj)


def to_jsonable(obj: Any) -> Any:
    """Round-trip through the encoder so nested enums become plain values."""
    return json.loads(json.dumps(obj, cls=GraphJSONEncoder))


def point_to_dict(point: Point) -> Dict[str, float]:
    return {"x": point.x, "y": point.y}


def node_to_dict(node: GraphNode) -> Dict[str, Any]:
    return {
        "id": node.node_id,
        "role": node.role.value,
        "position": point_to_dict(node.position),
        "ruleIndex": node.rule_index,
        "column": node.column,
        "label": node.label,
        "color": node.color,
        "kind": node.kind_token,
        "enabled": node.annotation.enabled,
        "fullyCovered": node.annotation.fully_covered,
        "displayState": node.annotation.display_state.value,
        "payload": to_jsonable(node.payload) if node.payload is not None else None,
    }


def edge_to_dict(edge: GraphEdge) -> Dict[str, Any]:
    return {
        "id": edge.edge_id,
        "source": edge.source_id,
        "target": edge.target_id,
        "color": edge.color_token,
        "ruleIndex": edge.rule_index,
    }


def degradation_to_dict(degradation: Degradation) -> Dict[str, Any]:
    return {
        "code": degradation.code.name,
        "message": degradation.message,
        "ruleIndex": degradation.rule_index,
    }


def view_to_dict(view: ChainGraphView) -> Dict[str, Any]:
    """Full graph description handed to a drawing surface."""
    return {
        "viewId": view.view_id,
        "availability": view.availability.value,
        "ruleCount": view.rule_count,
        "nodes": [node_to_dict(n) for n in view.nodes],
        "edges": [edge_to_dict(e) for e in view.edges],
    }
