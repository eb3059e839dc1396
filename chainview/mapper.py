"""
Preview Payload to DTO Mapper

Converts the admin API's chain-preview JSON into read-only DTOs.

MAPPING BOUNDARY:
=================
This is the ONLY place where raw preview JSON becomes DTOs.
All conversion happens here, nowhere else.

MAPPING RULES:
==============
1. Never raise for a malformed rule - repair it and record a Degradation
2. null arrays are empty arrays (the server emits null for empty slices)
3. Unknown kinds map to the UNKNOWN variant, never guessed
4. Preserve server ordering - it is the evaluation order
5. Non-boolean flags are coerced ("false", 0, null) and recorded
"""

from __future__ import annotations
from typing import Any, Dict, List, Optional, Tuple
import logging
import math

from chainview.dtos import (
    DTOVersion, HopKind, TargetKind,
    NodeSummary, HopSpec, TargetSpec, RuleDTO,
    NodeMatchSummaryDTO, ChainPreviewDTO,
)
from chainview.dtos.rule import UNKNOWN_TARGET_LABEL
from chainview.errors import Degradation, ErrorCode

logger = logging.getLogger(__name__)


UNCONFIGURED_LABEL = "Unconfigured"
MISSING_NODE_LABEL = "(node missing)"

TARGET_FALLBACK_LABELS = {
    TargetKind.ALL: "All nodes",
    TargetKind.CONDITIONS: "Matching nodes",
    TargetKind.SPECIFIED_NODE: MISSING_NODE_LABEL,
    TargetKind.UNKNOWN: UNKNOWN_TARGET_LABEL,
}

TRUE_STRINGS = frozenset({"true", "1", "yes", "on"})
FALSE_STRINGS = frozenset({"false", "0", "no", "off"})


class PreviewMapper:
    """
    Maps chain-preview payloads to DTOs.

    One mapper instance collects the degradations of one mapping call;
    they are returned with the result and also logged.
    """

    def __init__(self):
        self._degradations: List[Degradation] = []

    # =========================================================================
    # ENTRY POINTS
    # =========================================================================

    def map_preview(self, payload: Dict[str, Any]) -> ChainPreviewDTO:
        """Map a whole preview envelope (the `data` object of the response)."""
        self._degradations = []
        if not isinstance(payload, dict):
            self._degrade(ErrorCode.MALFORMED_RULE, f"preview payload is {type(payload).__name__}, not an object")
            payload = {}

        rules = self._map_rule_list(payload.get("rules"))
        summary = []
        for entry in self._as_list(payload.get("matchSummary"), ErrorCode.INVALID_MEMBERS, None):
            if not isinstance(entry, dict):
                self._degrade(
                    ErrorCode.MALFORMED_NODE,
                    f"match summary entry is {type(entry).__name__}, not an object",
                )
                continue
            summary.append(self._map_match_summary(entry))

        return ChainPreviewDTO(
            dto_version=DTOVersion.current(),
            subscription_name=str(payload.get("subscriptionName") or ""),
            total_nodes=self._as_int(payload.get("totalNodes"), "totalNodes", None),
            rules=rules,
            match_summary=tuple(summary),
            degradations=tuple(self._degradations),
        )

    def map_rules(self, payload: Any) -> Tuple[Tuple[RuleDTO, ...], Tuple[Degradation, ...]]:
        """Map a bare rule array."""
        self._degradations = []
        rules = self._map_rule_list(payload)
        return rules, tuple(self._degradations)

    @property
    def degradations(self) -> Tuple[Degradation, ...]:
        return tuple(self._degradations)

    # =========================================================================
    # RULE MAPPING
    # =========================================================================

    def _map_rule_list(self, raw: Any) -> Tuple[RuleDTO, ...]:
        items = self._as_list(raw, ErrorCode.MALFORMED_RULE, None)
        return tuple(self.map_rule(item, index) for index, item in enumerate(items))

    def map_rule(self, raw: Any, index: int) -> RuleDTO:
        """Map a single rule. Always returns a RuleDTO."""
        if not isinstance(raw, dict):
            self._degrade(ErrorCode.MALFORMED_RULE, f"rule is {type(raw).__name__}, not an object", index)
            return RuleDTO(
                rule_id=f"rule-{index}",
                name="",
                enabled=False,
                hops=(),
                target=TargetSpec.unknown(),
            )

        rule_id = raw.get("ruleId")
        if rule_id is None or rule_id == "":
            self._degrade(ErrorCode.MISSING_RULE_ID, "ruleId missing, using position", index)
            rule_id = f"rule-{index}"

        links = self._as_list(raw.get("links"), ErrorCode.INVALID_HOPS, index)
        hops = tuple(self._map_hop(link, index) for link in links)

        return RuleDTO(
            rule_id=str(rule_id),
            name=str(raw.get("ruleName") or ""),
            enabled=self._as_bool(raw.get("enabled", True), "enabled", True, index),
            hops=hops,
            target=self._map_target(raw, index),
            effective_node_count=self._as_int(raw.get("effectiveNodes"), "effectiveNodes", index),
            covered_node_count=self._as_int(raw.get("coveredNodes"), "coveredNodes", index),
            fully_covered=self._as_bool(raw.get("fullyCovered", False), "fullyCovered", False, index),
            sort=self._as_int(raw.get("sort"), "sort", index),
        )

    def _map_hop(self, raw: Any, index: int) -> HopSpec:
        if not isinstance(raw, dict):
            self._degrade(ErrorCode.MALFORMED_HOP, f"hop is {type(raw).__name__}, not an object", index)
            return HopSpec(
                kind=HopKind.UNKNOWN, label=UNCONFIGURED_LABEL,
                member_count=0, members=(), raw_kind="",
            )

        raw_kind = str(raw.get("type") or "")
        kind = HopKind.parse(raw_kind)
        if kind is HopKind.UNKNOWN:
            self._degrade(ErrorCode.UNKNOWN_HOP_KIND, f"unknown hop type {raw_kind!r}", index)

        members = self._map_members(raw.get("nodes"), index)
        return HopSpec(
            kind=kind,
            label=str(raw.get("name") or UNCONFIGURED_LABEL),
            member_count=len(members),
            members=members,
            raw_kind=raw_kind,
            group_type=self._as_text(raw.get("groupType")),
            dialer_proxy=self._as_text(raw.get("dialerProxy")),
        )

    def _map_target(self, raw: Dict[str, Any], index: int) -> TargetSpec:
        raw_kind = raw.get("targetType")
        if raw_kind is None or raw_kind == "":
            # Server default when no target is configured
            raw_kind = TargetKind.ALL.value
        raw_kind = str(raw_kind)
        kind = TargetKind.parse(raw_kind)
        if kind is TargetKind.UNKNOWN:
            self._degrade(ErrorCode.UNKNOWN_TARGET_KIND, f"unknown target type {raw_kind!r}", index)

        members = self._map_members(raw.get("targetNodes"), index)
        label = raw.get("targetInfo") or TARGET_FALLBACK_LABELS[kind]
        return TargetSpec(
            kind=kind,
            label=str(label),
            member_count=len(members),
            members=members,
            raw_kind=raw_kind,
        )

    # =========================================================================
    # NODE MAPPING
    # =========================================================================

    def _map_members(self, raw: Any, index: int) -> Tuple[NodeSummary, ...]:
        members = []
        for item in self._as_list(raw, ErrorCode.INVALID_MEMBERS, index):
            if not isinstance(item, dict):
                self._degrade(ErrorCode.MALFORMED_NODE, f"node is {type(item).__name__}, not an object", index)
                continue
            members.append(self.map_node(item, index))
        return tuple(members)

    def map_node(self, raw: Dict[str, Any], index: Optional[int] = None) -> NodeSummary:
        return NodeSummary(
            name=str(raw.get("name") or ""),
            country_code=(str(raw["linkCountry"]).upper() if raw.get("linkCountry") else None),
            latency_ms=self._as_int(raw.get("delayTime"), "delayTime", index),
            throughput_mbps=self._as_float(raw.get("speed"), "speed", index),
            protocol=self._as_text(raw.get("protocol")),
            group=self._as_text(raw.get("group")),
        )

    def _map_match_summary(self, raw: Dict[str, Any]) -> NodeMatchSummaryDTO:
        unmatched = self._as_bool(raw.get("unmatched", False), "unmatched", False, None)
        rule_id = raw.get("matchedRuleId")
        return NodeMatchSummaryDTO(
            node_id=str(raw.get("nodeId", "")),
            node_name=str(raw.get("nodeName") or ""),
            country_code=(str(raw["linkCountry"]).upper() if raw.get("linkCountry") else None),
            matched_rule=None if unmatched else self._as_text(raw.get("matchedRule")),
            matched_rule_id=None if unmatched or not rule_id else str(rule_id),
            entry_proxy=self._as_text(raw.get("entryProxy")),
            unmatched=unmatched,
        )

    # =========================================================================
    # COERCION HELPERS
    # =========================================================================

    def _as_list(self, raw: Any, code: ErrorCode, index: Optional[int]) -> list:
        if raw is None:
            return []
        if isinstance(raw, (list, tuple)):
            return list(raw)
        self._degrade(code, f"expected array, got {type(raw).__name__}", index)
        return []

    @staticmethod
    def _as_text(raw: Any) -> Optional[str]:
        return str(raw) if raw else None

    def _as_bool(self, raw: Any, field_name: str, default: bool, index: Optional[int]) -> bool:
        if isinstance(raw, bool):
            return raw
        if isinstance(raw, (int, float)) and raw in (0, 1):
            value = bool(raw)
        elif isinstance(raw, str) and raw.strip().lower() in TRUE_STRINGS | FALSE_STRINGS:
            value = raw.strip().lower() in TRUE_STRINGS
        else:
            value = default
        self._degrade(ErrorCode.INVALID_FLAG, f"{field_name}={raw!r} is not a boolean, using {value}", index)
        return value

    def _as_int(self, raw: Any, field_name: str, index: Optional[int]) -> int:
        if raw is None or isinstance(raw, bool):
            return 0
        try:
            return int(float(raw))
        except (TypeError, ValueError, OverflowError):
            self._degrade(ErrorCode.INVALID_NUMBER, f"{field_name}={raw!r} is not a number", index)
            return 0

    def _as_float(self, raw: Any, field_name: str, index: Optional[int]) -> float:
        if raw is None or isinstance(raw, bool):
            return 0.0
        try:
            value = float(raw)
        except (TypeError, ValueError, OverflowError):
            value = math.nan
        if not math.isfinite(value):
            self._degrade(ErrorCode.INVALID_NUMBER, f"{field_name}={raw!r} is not a number", index)
            return 0.0
        return value

    def _degrade(self, code: ErrorCode, message: str, index: Optional[int] = None) -> None:
        degradation = Degradation(code=code, message=message, rule_index=index)
        self._degradations.append(degradation)
        logger.warning("Degraded chain preview input: %s", degradation.describe())
