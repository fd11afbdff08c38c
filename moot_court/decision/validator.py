"""Cross-field invariants of a decision record.

A record that fails any rule here must never reach the drafter.
"""

import math
from typing import Any

from ..exceptions import DecisionValidationError
from ..models.decision import DEFAULT_CURRENCY, DecisionRecord, Outcome
from ..utils.arabic import has_latin


def _string_values(value: Any) -> list[str]:
    """Collect every string value of a nested wire structure."""
    if isinstance(value, str):
        return [value]
    if isinstance(value, dict):
        return [s for key, item in value.items() if key != "currency" for s in _string_values(item)]
    if isinstance(value, (list, tuple)):
        return [s for item in value for s in _string_values(item)]
    return []


def assert_script_only(record: DecisionRecord) -> None:
    """
    Reject a record whose free text contains Latin letters.

    Field names and the currency code are structural and not checked.

    Raises:
        DecisionValidationError: With code NON_ARABIC_LEAK
    """
    for text in _string_values(record.to_wire()):
        if text != DEFAULT_CURRENCY and has_latin(text):
            raise DecisionValidationError("NON_ARABIC_LEAK", f"Latin letters in {text[:60]!r}")


def validate_decision(record: DecisionRecord) -> DecisionRecord:
    """
    Check a decision record against its consistency rules.

    Args:
        record: Decision to check

    Returns:
        The same record, when valid

    Raises:
        DecisionValidationError: On the first violated rule
    """
    if not record.jurisdiction_competent:
        if record.outcome != Outcome.DENIAL:
            raise DecisionValidationError("INCOMPETENT_NOT_DENIED", "incompetent forum requires a denial")
        if record.compensation is not None:
            raise DecisionValidationError("INCOMPETENT_WITH_COMPENSATION", "no award without jurisdiction")

    if not record.formally_admissible:
        if record.outcome != Outcome.DENIAL:
            raise DecisionValidationError("INADMISSIBLE_NOT_DENIED", "inadmissible claim requires a denial")
        if record.compensation is not None:
            raise DecisionValidationError("INADMISSIBLE_WITH_COMPENSATION", "no award on an inadmissible claim")

    if record.compensation is not None:
        if record.outcome == Outcome.DENIAL:
            raise DecisionValidationError("DENIAL_WITH_COMPENSATION", "no award with a denial")
        amount = record.compensation.amount
        if (
            isinstance(amount, bool)
            or not isinstance(amount, (int, float))
            or not math.isfinite(amount)
            or amount <= 0
        ):
            raise DecisionValidationError("INVALID_AMOUNT", f"amount must be a positive number, got {amount!r}")

    for claims in (record.accepted_claims, record.rejected_claims):
        if not isinstance(claims, list) or not all(isinstance(c, str) for c in claims):
            raise DecisionValidationError("INVALID_CLAIMS", "claims must be lists of text")

    if (
        not isinstance(record.reasoning, list)
        or not [r for r in record.reasoning if isinstance(r, str) and r.strip()]
    ):
        raise DecisionValidationError("MISSING_REASONING", "reasoning must not be empty")

    assert_script_only(record)
    return record
