"""
Core DTO Types

Foundational enums and version types for all chain-preview DTOs.

VERSIONING REQUIREMENT:
=======================
Every top-level DTO includes a version field.
Consumers MUST fail fast on unknown versions.
"""

from __future__ import annotations
from enum import Enum
from typing import Final


# =============================================================================
# VERSION CONSTANTS
# =============================================================================

class DTOVersion(Enum):
    """
    DTO schema versions.

    Consumers MUST reject unknown versions.
    """
    V1 = "v1"

    @classmethod
    def current(cls) -> 'DTOVersion':
        return cls.V1


CURRENT_DTO_VERSION: Final[DTOVersion] = DTOVersion.V1


# =============================================================================
# AVAILABILITY (Explicit Absence)
# =============================================================================

class AvailabilityState(Enum):
    """
    Availability of a rendered view.

    An empty rule set is a valid, explicitly flagged state.
    """
    PRESENT = "present"     # At least one rule row
    EMPTY = "empty"         # No rules configured


# =============================================================================
# HOP / TARGET KINDS (Closed Variants)
# =============================================================================

class HopKind(Enum):
    """
    Kind of a hop in a rule's proxy chain.

    UNKNOWN is the explicit fallback for values the server sends
    that this client does not recognise.
    """
    TEMPLATE_GROUP = "template_group"
    CUSTOM_GROUP = "custom_group"
    DYNAMIC_NODE = "dynamic_node"
    SPECIFIED_NODE = "specified_node"
    UNKNOWN = "unknown"

    @classmethod
    def parse(cls, raw) -> 'HopKind':
        for kind in cls:
            if kind.value == raw and kind is not cls.UNKNOWN:
                return kind
        return cls.UNKNOWN

    @property
    def is_group(self) -> bool:
        return self in (HopKind.TEMPLATE_GROUP, HopKind.CUSTOM_GROUP)


class TargetKind(Enum):
    """Egress specification kind."""
    ALL = "all"
    SPECIFIED_NODE = "specified_node"
    CONDITIONS = "conditions"
    UNKNOWN = "unknown"

    @classmethod
    def parse(cls, raw) -> 'TargetKind':
        for kind in cls:
            if kind.value == raw and kind is not cls.UNKNOWN:
                return kind
        return cls.UNKNOWN


# =============================================================================
# GRAPH ROLES
# =============================================================================

class NodeRole(Enum):
    """Role of a vertex within one rule row."""
    USER = "user"       # Entry point, column 0
    HOP = "hop"         # Proxy chain link
    TARGET = "target"   # Egress specification
    SINK = "sink"       # Internet


class DisplayState(Enum):
    """
    How a rule row should be drawn.

    Derived only from server-supplied flags, never from coverage math.
    """
    ACTIVE = "active"
    DISABLED = "disabled"   # Drawn dimmed
    COVERED = "covered"     # Enabled but fully covered, drawn struck through

    @classmethod
    def from_flags(cls, enabled: bool, fully_covered: bool) -> 'DisplayState':
        if not enabled:
            return cls.DISABLED
        if fully_covered:
            return cls.COVERED
        return cls.ACTIVE
