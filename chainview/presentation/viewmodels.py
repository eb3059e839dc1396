"""
Presentation Contracts

Responsibility:
ViewModels and display formatting for the chain canvas, the detail
popover and the preview header. Pure functions of DTO values; no
coverage math, no layout.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Optional, Tuple, Union

from chainview.config import OverlayConfig, NEUTRAL_COLOR
from chainview.dtos import (
    ChainPreviewDTO, DisplayState, HopKind, HopSpec, NodeSummary, RuleDTO,
    TargetKind, TargetSpec,
)
from chainview.visualization.overlay import Size


GLOBE = "\U0001F310"
REGIONAL_INDICATOR_OFFSET = 127397

HOP_KIND_LABELS = {
    HopKind.TEMPLATE_GROUP: "Template group",
    HopKind.CUSTOM_GROUP: "Custom group",
    HopKind.DYNAMIC_NODE: "Dynamic node",
    HopKind.SPECIFIED_NODE: "Specified node",
}

TARGET_KIND_LABELS = {
    TargetKind.ALL: "All nodes",
    TargetKind.CONDITIONS: "Matching nodes",
    TargetKind.SPECIFIED_NODE: "Specified node",
}

EMPTY_RULES_MESSAGE = "No chain proxy rules configured"
EMPTY_MEMBERS_MESSAGE = "No node information"


# =============================================================================
# FORMATTERS
# =============================================================================

def country_flag(code: Optional[str]) -> str:
    """Two-letter country code to flag emoji; globe when unknown."""
    if not code or len(code) != 2 or not code.isalpha() or not code.isascii():
        return GLOBE
    return "".join(chr(ord(c) + REGIONAL_INDICATOR_OFFSET) for c in code.upper())


def format_latency(latency_ms: int) -> str:
    if not latency_ms or latency_ms <= 0:
        return "-"
    return f"{latency_ms}ms"


def latency_color(latency_ms: int) -> str:
    if not latency_ms or latency_ms <= 0:
        return NEUTRAL_COLOR
    if latency_ms < 100:
        return "#22c55e"
    if latency_ms < 300:
        return "#eab308"
    return "#ef4444"


def format_speed(mbps: float) -> str:
    if not mbps or mbps <= 0:
        return "-"
    return f"{mbps:.2f} MB/s"


def speed_color(mbps: float) -> str:
    if not mbps or mbps <= 0:
        return NEUTRAL_COLOR
    if mbps >= 10:
        return "#22c55e"
    if mbps >= 3:
        return "#eab308"
    return "#f97316"


def kind_label(spec: Union[HopSpec, TargetSpec]) -> str:
    """Human label for a hop/target kind; raw server string for unknown kinds."""
    if isinstance(spec, HopSpec):
        label = HOP_KIND_LABELS.get(spec.resolved_kind)
    else:
        label = TARGET_KIND_LABELS.get(spec.resolved_kind)
    if label:
        return label
    raw = spec.raw_kind or (spec.kind if isinstance(spec.kind, str) else "")
    return raw or "Unknown"


def detail_panel_size(member_count: int, config: Optional[OverlayConfig] = None) -> Size:
    """Popover size, known before placement: fixed width, height grows per row up to a cap."""
    config = config or OverlayConfig()
    height = min(
        config.panel_max_height,
        config.panel_header_height + max(member_count, 0) * config.panel_row_height,
    )
    return Size(width=config.panel_width, height=height)


# =============================================================================
# DETAIL POPOVER
# =============================================================================

@dataclass(frozen=True)
class NodeRowViewModel:
    """One member row of the detail popover."""
    flag: str
    name: str
    latency_text: str
    latency_color: str
    speed_text: str
    speed_color: str

    @classmethod
    def from_summary(cls, node: NodeSummary) -> 'NodeRowViewModel':
        return cls(
            flag=country_flag(node.country_code),
            name=node.name,
            latency_text=format_latency(node.latency_ms),
            latency_color=latency_color(node.latency_ms),
            speed_text=format_speed(node.throughput_mbps),
            speed_color=speed_color(node.throughput_mbps),
        )


@dataclass(frozen=True)
class DetailPanelViewModel:
    """Content of the detail popover for a hop or target node."""
    node_id: str
    title: str
    kind_label: str
    kind_token: str
    member_count: int
    rows: Tuple[NodeRowViewModel, ...]
    empty_text: Optional[str]
    size: Size

    @classmethod
    def from_payload(
        cls,
        node_id: str,
        payload: Union[HopSpec, TargetSpec],
        config: Optional[OverlayConfig] = None,
        kind_token: Optional[str] = None
    ) -> 'DetailPanelViewModel':
        """kind_token, when given, is the graph node's already-resolved kind."""
        rows = tuple(NodeRowViewModel.from_summary(m) for m in (payload.members or ()))
        return cls(
            node_id=node_id,
            title=payload.label or "Unconfigured",
            kind_label=kind_label(payload),
            kind_token=kind_token or payload.kind_token,
            member_count=len(rows),
            rows=rows,
            empty_text=None if rows else EMPTY_MEMBERS_MESSAGE,
            size=detail_panel_size(len(rows), config),
        )


# =============================================================================
# RULE HEADER / LEGEND / SUMMARY
# =============================================================================

@dataclass(frozen=True)
class RuleHeaderViewModel:
    """Title line and status chips of one rule row."""
    rule_id: str
    title: str
    display_state: DisplayState
    strike_through: bool
    opacity: float
    chips: Tuple[str, ...]

    @classmethod
    def from_rule(cls, rule: RuleDTO, rule_index: int) -> 'RuleHeaderViewModel':
        state = DisplayState.from_flags(rule.enabled, rule.fully_covered)
        chips = []
        if state is DisplayState.DISABLED:
            chips.append("Disabled")
        elif state is DisplayState.COVERED:
            chips.append("Fully covered")
        else:
            if rule.effective_node_count > 0:
                chips.append(f"{rule.effective_node_count} effective")
            if rule.covered_node_count > 0:
                chips.append(f"{rule.covered_node_count} covered")
        opacity = {DisplayState.ACTIVE: 1.0, DisplayState.COVERED: 0.6, DisplayState.DISABLED: 0.4}[state]
        return cls(
            rule_id=rule.rule_id,
            title=rule.name or f"Rule {rule_index + 1}",
            display_state=state,
            strike_through=state is DisplayState.COVERED,
            opacity=opacity,
            chips=tuple(chips),
        )


@dataclass(frozen=True)
class LegendEntry:
    label: str
    color: str


LEGEND: Tuple[LegendEntry, ...] = (
    LegendEntry("User", "#3b82f6"),
    LegendEntry("Proxy chain", "#06b6d4"),
    LegendEntry("Egress", "#f97316"),
    LegendEntry("Internet", "#22c55e"),
)


@dataclass(frozen=True)
class MatchRowViewModel:
    flag: str
    node_name: str
    matched_rule: str
    entry_proxy: str


@dataclass(frozen=True)
class MatchSummaryViewModel:
    """Node-to-rule match table, as computed by the server."""
    subscription_name: str
    total_nodes: int
    matched_count: int
    unmatched_count: int
    rows: Tuple[MatchRowViewModel, ...]

    @classmethod
    def from_preview(cls, preview: ChainPreviewDTO) -> 'MatchSummaryViewModel':
        rows = tuple(
            MatchRowViewModel(
                flag=country_flag(m.country_code),
                node_name=m.node_name,
                matched_rule="None" if m.unmatched else (m.matched_rule or "-"),
                entry_proxy=m.entry_proxy or "-",
            )
            for m in preview.match_summary
        )
        return cls(
            subscription_name=preview.subscription_name,
            total_nodes=preview.total_nodes,
            matched_count=preview.matched_count,
            unmatched_count=preview.unmatched_count,
            rows=rows,
        )
