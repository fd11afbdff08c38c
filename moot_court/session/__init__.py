"""Session orchestration: phases, speakers, guard and turn-taking."""

from .driver import SessionDriver, TurnResult, TurnStatus
from .guard import StallGuard
from .machine import PhaseStateMachine, Transition, compute_transition
from .snapshot import SessionSnapshot
from .speaker import resolve_next_speaker

__all__ = [
    "PhaseStateMachine",
    "SessionDriver",
    "SessionSnapshot",
    "StallGuard",
    "Transition",
    "TurnResult",
    "TurnStatus",
    "compute_transition",
    "resolve_next_speaker",
]
