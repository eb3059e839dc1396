"""
Rule DTOs

Read-only projection of one subscription's chain-proxy rules.

SERVER-OWNED:
=============
Coverage figures (effective / covered / fully covered) are computed by
the admin API. This package displays them, never recomputes them.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Optional, Tuple

from .core import HopKind, TargetKind


UNKNOWN_TARGET_LABEL = "Unknown target"


@dataclass(frozen=True)
class NodeSummary:
    """A matched proxy node's display projection."""
    name: str
    country_code: Optional[str]
    latency_ms: int
    throughput_mbps: float
    protocol: Optional[str] = None
    group: Optional[str] = None


@dataclass(frozen=True)
class HopSpec:
    """
    One link in a rule's proxy chain.

    raw_kind keeps the server string so an UNKNOWN kind can still be
    labelled with what the server actually sent.
    """
    kind: HopKind
    label: str
    member_count: int
    members: Tuple[NodeSummary, ...]
    raw_kind: str = ""
    group_type: Optional[str] = None    # select, url-test (groups only)
    dialer_proxy: Optional[str] = None  # name of the upstream hop

    @property
    def resolved_kind(self) -> HopKind:
        """kind, or UNKNOWN when a caller handed in something that is not a HopKind."""
        return self.kind if isinstance(self.kind, HopKind) else HopKind.UNKNOWN

    @property
    def is_group(self) -> bool:
        return self.resolved_kind.is_group

    @property
    def kind_token(self) -> str:
        return self.resolved_kind.value


@dataclass(frozen=True)
class TargetSpec:
    """Egress specification a rule resolves to."""
    kind: TargetKind
    label: str
    member_count: int
    members: Tuple[NodeSummary, ...]
    raw_kind: str = ""

    @classmethod
    def unknown(cls, raw_kind: str = "") -> 'TargetSpec':
        return cls(
            kind=TargetKind.UNKNOWN, label=UNKNOWN_TARGET_LABEL,
            member_count=0, members=(), raw_kind=raw_kind,
        )

    @property
    def resolved_kind(self) -> TargetKind:
        return self.kind if isinstance(self.kind, TargetKind) else TargetKind.UNKNOWN

    @property
    def kind_token(self) -> str:
        return self.resolved_kind.value


@dataclass(frozen=True)
class RuleDTO:
    """
    One routing policy.

    ORDERING:
    =========
    Evaluation order is the rule's position in the containing tuple,
    first match wins. `sort` is the server's sort key, display only.
    """
    rule_id: str
    name: str
    enabled: bool
    hops: Tuple[HopSpec, ...]
    target: TargetSpec
    effective_node_count: int = 0
    covered_node_count: int = 0
    fully_covered: bool = False
    sort: int = 0

    def __post_init__(self):
        # Tolerate callers handing in None or a list for hops, and no target.
        if self.hops is None:
            object.__setattr__(self, "hops", ())
        elif not isinstance(self.hops, tuple):
            object.__setattr__(self, "hops", tuple(self.hops))
        if self.target is None:
            object.__setattr__(self, "target", TargetSpec.unknown())

    @property
    def hop_count(self) -> int:
        return len(self.hops)
