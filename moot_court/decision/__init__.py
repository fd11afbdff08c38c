"""Structured decision: digest, engine and invariants."""

from .digest import CaseMeta, JudgmentMeta, build_case_digest
from .engine import DecisionEngine, fallback_decision
from .validator import assert_script_only, validate_decision

__all__ = [
    "CaseMeta",
    "DecisionEngine",
    "JudgmentMeta",
    "assert_script_only",
    "build_case_digest",
    "fallback_decision",
    "validate_decision",
]
