"""Moot Court - Simulated courtroom proceedings with checked judgments."""

__version__ = "0.1.0"

from .models import CaseContext, DecisionRecord, Message, Phase, Role
from .session import PhaseStateMachine, SessionDriver

__all__ = [
    "__version__",
    "CaseContext",
    "DecisionRecord",
    "Message",
    "Phase",
    "PhaseStateMachine",
    "Role",
    "SessionDriver",
]
