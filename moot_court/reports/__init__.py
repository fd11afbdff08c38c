"""Report generation module for Moot Court.

Exports rendered judgments as right-to-left DOCX documents.
"""

from .docx_generator import JudgmentDocxGenerator, generate_judgment_docx

__all__ = [
    "JudgmentDocxGenerator",
    "generate_judgment_docx",
]
