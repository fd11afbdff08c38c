"""Judgment drafting: outcome directives, quality gates and assembly."""

from .assembler import DocumentAssembler, DraftResult, render_judgment
from .prompts import DirectiveKind, OutcomeDirective, build_drafting_prompt, build_outcome_directive
from .qa import QAReport, extract_ruling_section, run_quality_gates

__all__ = [
    "DirectiveKind",
    "DocumentAssembler",
    "DraftResult",
    "OutcomeDirective",
    "QAReport",
    "build_drafting_prompt",
    "build_outcome_directive",
    "extract_ruling_section",
    "render_judgment",
    "run_quality_gates",
]
