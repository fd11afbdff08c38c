"""Data models for Moot Court."""

from .case import (
    CaseContext,
    CaseNature,
    Jurisdiction,
    Party,
    validate_case_context,
)
from .decision import Compensation, DecisionRecord, Outcome
from .message import Attachment, Message, MessageCategory
from .roles import (
    PHASE_ORDER,
    PartyType,
    Phase,
    Role,
    UserSide,
    next_phase,
    resolve_opponent_role,
)
from .timeline import TimelineEvent, TimelineStatus, build_timeline

__all__ = [
    # Roles and phases
    "PHASE_ORDER",
    "PartyType",
    "Phase",
    "Role",
    "UserSide",
    "next_phase",
    "resolve_opponent_role",
    # Timeline
    "TimelineEvent",
    "TimelineStatus",
    "build_timeline",
    # Transcript
    "Attachment",
    "Message",
    "MessageCategory",
    # Case
    "CaseContext",
    "CaseNature",
    "Jurisdiction",
    "Party",
    "validate_case_context",
    # Decision
    "Compensation",
    "DecisionRecord",
    "Outcome",
]
