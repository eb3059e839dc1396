"""
Observability & Audit

RESPONSIBILITY: Record what the visualizer did (rebuilds, overlay
transitions, degradations) without influencing it.

WHAT THIS MODULE MUST NOT DO:
=============================
- Modify visualizer behaviour
- Filter or interpret events (only record them)
- Hold references to mutable state
"""

from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Deque, List, Optional, Tuple
from collections import deque
import logging
import sys


# =============================================================================
# AUDIT ENTRIES
# =============================================================================

DEFAULT_MAX_ENTRIES = 1000


class AuditEventType(Enum):
    GRAPH_REBUILT = "graph_rebuilt"
    OVERLAY_OPENED = "overlay_opened"
    OVERLAY_REPLACED = "overlay_replaced"
    OVERLAY_CLOSED = "overlay_closed"
    HIGHLIGHT_CHANGED = "highlight_changed"
    DEGRADATION = "degradation"


@dataclass(frozen=True)
class AuditEntry:
    """Immutable record of one visualizer event."""
    sequence: int
    event_type: AuditEventType
    subject_id: str
    recorded_at: datetime
    details: Tuple[Tuple[str, str], ...] = field(default_factory=tuple)

    def detail(self, key: str) -> Optional[str]:
        for k, v in self.details:
            if k == key:
                return v
        return None


class AuditLog:
    """
    Append-only collector, bounded.

    Entries are never modified once collected. Only the newest
    max_entries are kept; sequence numbers keep counting past evictions.
    """

    def __init__(self, component: str = "chainview", max_entries: int = DEFAULT_MAX_ENTRIES):
        if max_entries <= 0:
            raise ValueError("max_entries must be positive")
        self._component = component
        self._entries: Deque[AuditEntry] = deque(maxlen=max_entries)
        self._sequence: int = 0

    def record(self, event_type: AuditEventType, subject_id: str, **details) -> AuditEntry:
        self._sequence += 1
        entry = AuditEntry(
            sequence=self._sequence,
            event_type=event_type,
            subject_id=subject_id,
            recorded_at=datetime.now(timezone.utc),
            details=tuple(sorted((k, str(v)) for k, v in details.items())),
        )
        self._entries.append(entry)
        return entry

    def get_entries(self, event_type: Optional[AuditEventType] = None) -> List[AuditEntry]:
        """Get entries, optionally filtered."""
        if event_type is None:
            return list(self._entries)
        return [e for e in self._entries if e.event_type == event_type]

    @property
    def component(self) -> str:
        return self._component

    @property
    def max_entries(self) -> int:
        return self._entries.maxlen

    @property
    def entry_count(self) -> int:
        return len(self._entries)

    @property
    def total_recorded(self) -> int:
        """Entries ever recorded, evicted ones included."""
        return self._sequence


# =============================================================================
# PROCESS LOGGING
# =============================================================================

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Console logging for the service entry point."""
    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    if not any(getattr(h, "_chainview", False) for h in root.handlers):
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
        handler._chainview = True
        root.addHandler(handler)
