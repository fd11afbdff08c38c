"""Structured judicial decision models.

The wire shape uses fixed field names with Arabic enumerated values, as
requested from the decision engine. Consistency invariants are enforced
separately by ``moot_court.decision.validator``.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

from ..exceptions import DecisionValidationError


class Outcome(str, Enum):
    """Substantive outcome of the case."""

    FULL_GRANT = "قبول كلي"
    PARTIAL_GRANT = "قبول جزئي"
    DENIAL = "رفض"

    @property
    def is_grant(self) -> bool:
        """Check if the claimant prevailed at least in part."""
        return self != Outcome.DENIAL


JURISDICTION_COMPETENT = "مختصة"
JURISDICTION_INCOMPETENT = "غير مختصة"
ADMISSIBLE = "مقبولة شكلاً"
INADMISSIBLE = "مرفوضة شكلاً"
DEFAULT_CURRENCY = "SAR"

# Field names of the wire shape; excluded from the script check
WIRE_FIELDS = (
    "jurisdiction",
    "admissibility",
    "outcome",
    "acceptedClaims",
    "rejectedClaims",
    "legalCharacterization",
    "reliesOnExpert",
    "compensation",
    "basis",
    "amount",
    "currency",
    "method",
    "reasoningBullets",
    "proceduralNotes",
)

REQUIRED_WIRE_FIELDS = (
    "jurisdiction",
    "admissibility",
    "outcome",
    "legalCharacterization",
    "acceptedClaims",
    "rejectedClaims",
    "reasoningBullets",
)


@dataclass
class Compensation:
    """Monetary award attached to a granting decision."""

    basis: str
    amount: float
    currency: str = DEFAULT_CURRENCY
    method: Optional[str] = None

    def to_wire(self) -> dict[str, Any]:
        """Convert to the wire shape."""
        result = {
            "basis": self.basis,
            "amount": self.amount,
            "currency": self.currency,
        }
        if self.method:
            result["method"] = self.method
        return result

    @classmethod
    def from_wire(cls, data: dict[str, Any]) -> "Compensation":
        """Create from the wire shape."""
        if not isinstance(data, dict):
            raise DecisionValidationError("INVALID_COMPENSATION", "compensation must be an object")

        amount = data.get("amount")
        if isinstance(amount, bool) or not isinstance(amount, (int, float)):
            raise DecisionValidationError("INVALID_AMOUNT", f"amount must be numeric, got {amount!r}")

        currency = data.get("currency") or DEFAULT_CURRENCY
        if currency != DEFAULT_CURRENCY:
            raise DecisionValidationError("INVALID_CURRENCY", f"unsupported currency {currency!r}")

        try:
            amount = float(amount)
        except OverflowError:
            raise DecisionValidationError("INVALID_AMOUNT", "amount is out of range")

        return cls(
            basis=str(data.get("basis", "")),
            amount=amount,
            currency=currency,
            method=data.get("method") or None,
        )


@dataclass
class DecisionRecord:
    """Structured, invariant-checked representation of a ruling.

    Attributes:
        jurisdiction_competent: Whether the forum is competent
        formally_admissible: Whether the claim passes formal admissibility
        outcome: Substantive outcome
        accepted_claims: Claims granted in the operative ruling
        rejected_claims: Claims refused in the operative ruling
        legal_characterization: Legal characterization of the dispute
        relies_on_expert: Whether the reasoning relies on expert evidence
        compensation: Optional monetary award
        reasoning: Reasoning bullet points (never empty when accepted)
        procedural_notes: Optional procedural remarks
    """

    jurisdiction_competent: bool
    formally_admissible: bool
    outcome: Outcome
    legal_characterization: str
    reasoning: list[str]
    accepted_claims: list[str] = field(default_factory=list)
    rejected_claims: list[str] = field(default_factory=list)
    relies_on_expert: bool = False
    compensation: Optional[Compensation] = None
    procedural_notes: list[str] = field(default_factory=list)

    def to_wire(self) -> dict[str, Any]:
        """Convert to the key/value interchange shape."""
        result = {
            "jurisdiction": JURISDICTION_COMPETENT if self.jurisdiction_competent else JURISDICTION_INCOMPETENT,
            "admissibility": ADMISSIBLE if self.formally_admissible else INADMISSIBLE,
            "outcome": self.outcome.value,
            "acceptedClaims": self.accepted_claims,
            "rejectedClaims": self.rejected_claims,
            "legalCharacterization": self.legal_characterization,
            "reliesOnExpert": self.relies_on_expert,
            "reasoningBullets": self.reasoning,
        }
        if self.compensation is not None:
            result["compensation"] = self.compensation.to_wire()
        if self.procedural_notes:
            result["proceduralNotes"] = self.procedural_notes
        return result

    @classmethod
    def from_wire(cls, data: dict[str, Any]) -> "DecisionRecord":
        """
        Create from the wire shape.

        Raises:
            DecisionValidationError: On missing fields or values outside
                the enumerated value sets
        """
        if not isinstance(data, dict):
            raise DecisionValidationError("INVALID_SHAPE", "decision must be an object")

        missing = [name for name in REQUIRED_WIRE_FIELDS if name not in data]
        if missing:
            raise DecisionValidationError("MISSING_FIELDS", ", ".join(missing))

        jurisdiction = data["jurisdiction"]
        if jurisdiction not in (JURISDICTION_COMPETENT, JURISDICTION_INCOMPETENT):
            raise DecisionValidationError("INVALID_JURISDICTION", repr(jurisdiction))

        admissibility = data["admissibility"]
        if admissibility not in (ADMISSIBLE, INADMISSIBLE):
            raise DecisionValidationError("INVALID_ADMISSIBILITY", repr(admissibility))

        try:
            outcome = Outcome(data["outcome"])
        except ValueError:
            raise DecisionValidationError("INVALID_OUTCOME", repr(data["outcome"]))

        compensation = None
        if data.get("compensation"):
            compensation = Compensation.from_wire(data["compensation"])
            # A zero award is the same as no award
            if compensation.amount == 0:
                compensation = None

        return cls(
            jurisdiction_competent=jurisdiction == JURISDICTION_COMPETENT,
            formally_admissible=admissibility == ADMISSIBLE,
            outcome=outcome,
            accepted_claims=data["acceptedClaims"],
            rejected_claims=data["rejectedClaims"],
            legal_characterization=str(data.get("legalCharacterization", "")),
            relies_on_expert=bool(data.get("reliesOnExpert", False)),
            compensation=compensation,
            reasoning=data["reasoningBullets"],
            procedural_notes=data.get("proceduralNotes") or [],
        )
