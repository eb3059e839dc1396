"""
Rule Fixtures

Explicit rule sets and preview payloads for visualizer tests.

RULES:
======
1. All fixtures are EXPLICIT, not random (hypothesis strategies live
   beside the property tests)
2. Payload fixtures mirror the admin API's JSON field names
"""

from __future__ import annotations
from typing import Any, Dict, Optional, Sequence, Tuple

from chainview.dtos import (
    HopKind, TargetKind, NodeSummary, HopSpec, TargetSpec, RuleDTO,
)


# =============================================================================
# DTO BUILDERS
# =============================================================================

def make_node(name: str = "hk-01", country: Optional[str] = "HK",
              latency: int = 80, speed: float = 12.5) -> NodeSummary:
    return NodeSummary(name=name, country_code=country, latency_ms=latency, throughput_mbps=speed)


def make_hop(kind: HopKind = HopKind.TEMPLATE_GROUP, label: str = "Relay",
             members: Sequence[NodeSummary] = ()) -> HopSpec:
    members = tuple(members)
    return HopSpec(kind=kind, label=label, member_count=len(members), members=members,
                   raw_kind=kind.value)


def make_target(kind: TargetKind = TargetKind.ALL, label: str = "All nodes",
                members: Sequence[NodeSummary] = ()) -> TargetSpec:
    members = tuple(members)
    return TargetSpec(kind=kind, label=label, member_count=len(members), members=members,
                      raw_kind=kind.value)


def make_rule(rule_id: str = "1", name: str = "Rule", enabled: bool = True,
              hops: Sequence[HopSpec] = (), target: Optional[TargetSpec] = None,
              fully_covered: bool = False, effective: int = 0, covered: int = 0) -> RuleDTO:
    return RuleDTO(
        rule_id=rule_id,
        name=name,
        enabled=enabled,
        hops=tuple(hops),
        target=target or make_target(),
        effective_node_count=effective,
        covered_node_count=covered,
        fully_covered=fully_covered,
    )


def sample_rules() -> Tuple[RuleDTO, ...]:
    """Three rows: two-hop, zero-hop, one-hop disabled."""
    return (
        make_rule(
            rule_id="10", name="HK via relay",
            hops=(
                make_hop(HopKind.TEMPLATE_GROUP, "Relay group", [make_node("relay-1"), make_node("relay-2")]),
                make_hop(HopKind.DYNAMIC_NODE, "jp-01 (dynamic)", [make_node("jp-01", "JP", 150, 4.0)]),
            ),
            target=make_target(TargetKind.CONDITIONS, "Matching nodes", [make_node("hk-01"), make_node("hk-02")]),
            effective=2,
        ),
        make_rule(rule_id="11", name="Direct", target=make_target(TargetKind.ALL, "All nodes")),
        make_rule(
            rule_id="12", name="Old", enabled=False,
            hops=(make_hop(HopKind.SPECIFIED_NODE, "us-01", [make_node("us-01", "US", 320, 1.5)]),),
            target=make_target(TargetKind.SPECIFIED_NODE, "sg-01", [make_node("sg-01", "SG")]),
        ),
    )


# =============================================================================
# PAYLOAD BUILDERS (admin API JSON)
# =============================================================================

def node_payload(name: str = "hk-01", country: str = "hk", delay: Any = 85, speed: Any = 10.5) -> Dict[str, Any]:
    return {
        "name": name, "protocol": "vless", "linkCountry": country,
        "delayTime": delay, "speed": speed, "group": "default",
    }


def rule_payload(rule_id: Any = 1, name: str = "HK chain", enabled: bool = True,
                 links: Any = None, target_type: Any = "all", target_nodes: Any = None,
                 fully_covered: bool = False) -> Dict[str, Any]:
    return {
        "ruleId": rule_id,
        "ruleName": name,
        "enabled": enabled,
        "sort": 0,
        "links": links,
        "targetType": target_type,
        "targetInfo": "",
        "targetNodes": target_nodes,
        "effectiveNodes": len(target_nodes or []),
        "coveredNodes": 0,
        "fullyCovered": fully_covered,
    }


def preview_payload() -> Dict[str, Any]:
    return {
        "subscriptionName": "Main",
        "totalNodes": 3,
        "rules": [
            rule_payload(
                rule_id=1,
                links=[
                    {"type": "template_group", "name": "Relay", "isGroup": True, "groupType": "select",
                     "dialerProxy": "", "nodes": None},
                    {"type": "dynamic_node", "name": "jp-01 (dynamic)", "isGroup": False,
                     "dialerProxy": "Relay", "nodes": [node_payload("jp-01", "jp", 120, 3.2)]},
                ],
                target_type="conditions",
                target_nodes=[node_payload("hk-01"), node_payload("hk-02")],
            ),
            rule_payload(rule_id=2, name="Fallback", target_nodes=[node_payload("hk-01")], fully_covered=True),
        ],
        "matchSummary": [
            {"nodeId": 1, "nodeName": "hk-01", "linkCountry": "HK", "matchedRule": "HK chain",
             "matchedRuleId": 1, "entryProxy": "Relay", "unmatched": False},
            {"nodeId": 3, "nodeName": "us-09", "linkCountry": "US", "matchedRule": "",
             "matchedRuleId": 0, "entryProxy": "", "unmatched": True},
        ],
    }
