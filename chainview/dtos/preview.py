"""
Chain Preview Envelope

Wrapper for one subscription's whole chain preview as delivered by
the admin API (`GET /api/v1/subcription/{id}/chain-rules/preview`).

ENVELOPE CONTRACT:
==================
- Always versioned
- Rules delivered as a single atomic tuple, never streamed
- Degradations applied while mapping are listed explicitly
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Optional, Tuple

from .core import DTOVersion
from .rule import RuleDTO
from ..errors import Degradation, UnsupportedVersionError


@dataclass(frozen=True)
class NodeMatchSummaryDTO:
    """
    Which rule a subscription node ended up matched by.

    SERVER-OWNED:
    =============
    First-match evaluation happens server-side.
    """
    node_id: str
    node_name: str
    country_code: Optional[str]
    matched_rule: Optional[str]
    matched_rule_id: Optional[str]
    entry_proxy: Optional[str]
    unmatched: bool


@dataclass(frozen=True)
class ChainPreviewDTO:
    """Whole-subscription chain preview."""
    dto_version: DTOVersion
    subscription_name: str
    total_nodes: int
    rules: Tuple[RuleDTO, ...]
    match_summary: Tuple[NodeMatchSummaryDTO, ...]
    degradations: Tuple[Degradation, ...] = ()

    def __post_init__(self):
        if self.dto_version != DTOVersion.current():
            raise UnsupportedVersionError(f"Unknown DTO version: {self.dto_version}")

    @property
    def matched_count(self) -> int:
        return sum(1 for m in self.match_summary if not m.unmatched)

    @property
    def unmatched_count(self) -> int:
        return sum(1 for m in self.match_summary if m.unmatched)
