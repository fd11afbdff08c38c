"""Timeline tracker.

Progress status per phase is always derived from the current phase and
the fixed phase ordering; it is never stored or mutated independently.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

from .roles import PHASE_ORDER, Phase


class TimelineStatus(str, Enum):
    """Progress status of a phase."""

    PENDING = "pending"
    ACTIVE = "active"
    COMPLETED = "completed"


@dataclass(frozen=True)
class TimelineEvent:
    """A phase on the session timeline."""

    phase: Phase
    label: str
    status: TimelineStatus

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "phase": self.phase.value,
            "label": self.label,
            "status": self.status.value,
        }


def phase_status(phase: Phase, current: Optional[Phase]) -> TimelineStatus:
    """Status of one phase relative to the current phase (None = not started)."""
    if current is None:
        return TimelineStatus.PENDING
    if phase == current:
        return TimelineStatus.ACTIVE
    if phase.index < current.index:
        return TimelineStatus.COMPLETED
    return TimelineStatus.PENDING


def build_timeline(current: Optional[Phase]) -> list[TimelineEvent]:
    """
    Build the timeline for the current phase.

    Args:
        current: Current phase, or None before the session has started

    Returns:
        One event per phase except CLOSED, in procedural order
    """
    return [
        TimelineEvent(phase=phase, label=phase.label, status=phase_status(phase, current))
        for phase in PHASE_ORDER
        if phase != Phase.CLOSED
    ]
