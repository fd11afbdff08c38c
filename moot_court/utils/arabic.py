"""Arabic script helpers."""

import re

LATIN_PATTERN = re.compile(r"[A-Za-z]")

_ARABIC_DIGITS = "٠١٢٣٤٥٦٧٨٩"
_TO_ARABIC = str.maketrans("0123456789", _ARABIC_DIGITS)
_TO_WESTERN = str.maketrans(_ARABIC_DIGITS, "0123456789")

# Thousands separators that may appear between digits
_DIGIT_SEPARATOR = re.compile(r"(?<=\d)[,٬](?=\d)")

# Bidi control marks that generation sometimes leaks into output
_BIDI_MARKS = re.compile("[\u200e\u200f\u202a-\u202e]")


def has_latin(text: str) -> bool:
    """Check whether text contains any Latin letter."""
    return bool(LATIN_PATTERN.search(text))


def strip_latin(text: str) -> str:
    """Remove Latin letters from text."""
    return LATIN_PATTERN.sub("", text)


def to_arabic_digits(value) -> str:
    """Render the digits of a value as Arabic-Indic digits."""
    return str(value).translate(_TO_ARABIC)


def to_western_digits(text: str) -> str:
    """Convert Arabic-Indic digits to Western digits."""
    return text.translate(_TO_WESTERN)


def format_amount(amount: float) -> str:
    """Plain Western rendering of an amount, without trailing zeros."""
    if float(amount).is_integer():
        return str(int(amount))
    return f"{amount:.2f}".rstrip("0").rstrip(".")


def format_arabic_amount(amount: float) -> str:
    """Arabic-Indic rendering of an amount with Arabic thousands separators."""
    if float(amount).is_integer():
        grouped = f"{int(amount):,}"
    else:
        grouped = f"{amount:,.2f}".rstrip("0").rstrip(".")
    return to_arabic_digits(grouped).replace(",", "٬").replace(".", "٫")


def normalize_digits(text: str) -> str:
    """Western digits with thousands separators removed, for amount matching."""
    return _DIGIT_SEPARATOR.sub("", to_western_digits(text)).replace("٫", ".")


def normalize_document(text: str) -> str:
    """Remove bidi marks, trailing whitespace and runs of blank lines."""
    text = _BIDI_MARKS.sub("", text)
    text = re.sub(r"[ \t]+\n", "\n", text)
    text = re.sub(r"\n{3,}", "\n\n", text)
    return text.strip()


def compact(text: str, limit: int = 320) -> str:
    """Collapse whitespace, drop Latin letters and cap the length."""
    text = re.sub(r"\s+", " ", text)
    text = strip_latin(text)
    text = re.sub(r"\s+", " ", text).strip()
    return text[:limit]
