"""
Error Types

Two kinds of failure exist in the visualizer:

DEGRADATIONS (data):
====================
Malformed rule data is repaired and the repair is recorded as a
Degradation. These never propagate; an odd-looking rule row is
preferable to a broken graph.

CALLER ERRORS (exceptions):
===========================
Misuse of the API by a caller (stale node id, unknown DTO version,
unreachable preview endpoint) raises a ChainViewError subclass.
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional


class ErrorCode(Enum):
    """Enumerated degradation codes."""
    UNKNOWN_HOP_KIND = auto()
    UNKNOWN_TARGET_KIND = auto()
    INVALID_HOPS = auto()
    INVALID_MEMBERS = auto()
    INVALID_NUMBER = auto()
    INVALID_FLAG = auto()
    MISSING_RULE_ID = auto()
    MALFORMED_RULE = auto()
    MALFORMED_HOP = auto()
    MALFORMED_NODE = auto()


@dataclass(frozen=True)
class Degradation:
    """
    A non-fatal repair applied to malformed input.
    Errors are data, not exceptions - they can be listed and displayed.
    """
    code: ErrorCode
    message: str
    rule_index: Optional[int] = None

    def describe(self) -> str:
        where = f"rule {self.rule_index}" if self.rule_index is not None else "preview"
        return f"[{self.code.name}] {where}: {self.message}"


class ChainViewError(Exception):
    """Base class for caller errors."""


class UnknownNodeError(ChainViewError, KeyError):
    """Node id is not part of the current graph."""

    def __init__(self, node_id: str, view_id: Optional[str] = None):
        self.node_id = node_id
        self.view_id = view_id
        super().__init__(f"Node {node_id!r} not in graph {view_id or '<none>'}")

    def __str__(self) -> str:
        return self.args[0]


class UnsupportedVersionError(ChainViewError, ValueError):
    """DTO carries a schema version this client does not know."""


class PreviewFetchError(ChainViewError):
    """Chain preview could not be fetched from the admin API."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.status_code = status_code
        super().__init__(message)
