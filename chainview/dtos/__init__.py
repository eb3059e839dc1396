"""
Rule Data Layer

Responsibility:
Read-only contracts for chain-proxy rule data as delivered by the admin API.

PRINCIPLES:
1. Immutable (Frozen)
2. No Coverage Logic
3. No Rendering Logic
"""

from .core import (
    DTOVersion, AvailabilityState, HopKind, TargetKind, NodeRole, DisplayState
)
from .rule import (
    NodeSummary, HopSpec, TargetSpec, RuleDTO
)
from .preview import (
    NodeMatchSummaryDTO, ChainPreviewDTO
)

__all__ = [
    'DTOVersion', 'AvailabilityState', 'HopKind', 'TargetKind', 'NodeRole', 'DisplayState',
    'NodeSummary', 'HopSpec', 'TargetSpec', 'RuleDTO',
    'NodeMatchSummaryDTO', 'ChainPreviewDTO',
]
