"""Utility modules for Moot Court.

Provides common utilities:
- Logging configuration
- Arabic script and digit helpers
"""

from .arabic import (
    compact,
    format_arabic_amount,
    has_latin,
    normalize_document,
    strip_latin,
    to_arabic_digits,
)
from .logging import get_logger, setup_logging

__all__ = [
    # Arabic
    "compact",
    "format_arabic_amount",
    "has_latin",
    "normalize_document",
    "strip_latin",
    "to_arabic_digits",
    # Logging
    "get_logger",
    "setup_logging",
]
