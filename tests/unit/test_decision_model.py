"""Tests for decision records and their invariants."""

from dataclasses import replace

import pytest
from hypothesis import HealthCheck, given, settings
from hypothesis import strategies as st

from moot_court.decision import assert_script_only, validate_decision
from moot_court.exceptions import DecisionValidationError
from moot_court.models import Compensation, DecisionRecord, Outcome


def _record(**overrides) -> DecisionRecord:
    values = {
        "jurisdiction_competent": True,
        "formally_admissible": True,
        "outcome": Outcome.DENIAL,
        "legal_characterization": "منازعة عقد إداري",
        "reasoning": ["عدم كفاية الأدلة"],
    }
    values.update(overrides)
    return DecisionRecord(**values)


class TestWireShape:
    """Tests for conversion from and to the wire shape."""

    def test_from_wire(self, grant_decision_wire):
        """Arabic enumerated values map onto the record."""
        record = DecisionRecord.from_wire(grant_decision_wire)

        assert record.jurisdiction_competent
        assert record.formally_admissible
        assert record.outcome == Outcome.PARTIAL_GRANT
        assert record.compensation == Compensation(
            basis="التأخير في صرف المستخلص",
            amount=500000.0,
            currency="SAR",
            method="تقدير الدائرة",
        )
        assert record.rejected_claims == ["التعويض عن الأضرار المعنوية"]

    def test_to_wire(self, grant_decision, grant_decision_wire):
        """The record converts back to the wire shape."""
        assert grant_decision.to_wire() == grant_decision_wire

    def test_missing_fields(self, grant_decision_wire):
        del grant_decision_wire["reasoningBullets"]

        with pytest.raises(DecisionValidationError) as exc_info:
            DecisionRecord.from_wire(grant_decision_wire)
        assert exc_info.value.code == "MISSING_FIELDS"

    @pytest.mark.parametrize(
        "field,value,code",
        [
            ("jurisdiction", "competent", "INVALID_JURISDICTION"),
            ("admissibility", "نعم", "INVALID_ADMISSIBILITY"),
            ("outcome", "تأجيل", "INVALID_OUTCOME"),
        ],
    )
    def test_values_outside_enumeration(self, grant_decision_wire, field, value, code):
        """Only the enumerated Arabic values are accepted."""
        grant_decision_wire[field] = value

        with pytest.raises(DecisionValidationError) as exc_info:
            DecisionRecord.from_wire(grant_decision_wire)
        assert exc_info.value.code == code

    def test_non_numeric_amount(self, grant_decision_wire):
        grant_decision_wire["compensation"]["amount"] = "خمسمائة ألف"

        with pytest.raises(DecisionValidationError) as exc_info:
            DecisionRecord.from_wire(grant_decision_wire)
        assert exc_info.value.code == "INVALID_AMOUNT"

    def test_amount_out_of_float_range(self, grant_decision_wire):
        grant_decision_wire["compensation"]["amount"] = 10 ** 400

        with pytest.raises(DecisionValidationError) as exc_info:
            DecisionRecord.from_wire(grant_decision_wire)
        assert exc_info.value.code == "INVALID_AMOUNT"

    def test_zero_amount_is_no_award(self, grant_decision_wire):
        """A zero award is dropped."""
        grant_decision_wire["compensation"]["amount"] = 0
        assert DecisionRecord.from_wire(grant_decision_wire).compensation is None

    def test_not_an_object(self):
        with pytest.raises(DecisionValidationError) as exc_info:
            DecisionRecord.from_wire(["رفض"])
        assert exc_info.value.code == "INVALID_SHAPE"


class TestValidateDecision:
    """Tests for validate_decision."""

    def test_valid_grant(self, grant_decision):
        """A consistent record is returned unchanged."""
        assert validate_decision(grant_decision) is grant_decision

    def test_valid_denial(self, denial_decision):
        assert validate_decision(denial_decision) is denial_decision

    @pytest.mark.parametrize(
        "overrides,code",
        [
            ({"jurisdiction_competent": False, "outcome": Outcome.FULL_GRANT}, "INCOMPETENT_NOT_DENIED"),
            (
                {"jurisdiction_competent": False, "compensation": Compensation(basis="ضرر", amount=10)},
                "INCOMPETENT_WITH_COMPENSATION",
            ),
            ({"formally_admissible": False, "outcome": Outcome.PARTIAL_GRANT}, "INADMISSIBLE_NOT_DENIED"),
            (
                {"formally_admissible": False, "compensation": Compensation(basis="ضرر", amount=10)},
                "INADMISSIBLE_WITH_COMPENSATION",
            ),
            ({"compensation": Compensation(basis="ضرر", amount=10)}, "DENIAL_WITH_COMPENSATION"),
            (
                {"outcome": Outcome.FULL_GRANT, "compensation": Compensation(basis="ضرر", amount=-5)},
                "INVALID_AMOUNT",
            ),
            (
                {"outcome": Outcome.FULL_GRANT, "compensation": Compensation(basis="ضرر", amount=float("nan"))},
                "INVALID_AMOUNT",
            ),
            ({"accepted_claims": "كل الطلبات"}, "INVALID_CLAIMS"),
            ({"rejected_claims": [1, 2]}, "INVALID_CLAIMS"),
            ({"reasoning": []}, "MISSING_REASONING"),
            ({"reasoning": ["  "]}, "MISSING_REASONING"),
            ({"reasoning": ["The claim is rejected"]}, "NON_ARABIC_LEAK"),
        ],
    )
    def test_violations(self, overrides, code):
        """Each broken rule raises its own code."""
        with pytest.raises(DecisionValidationError) as exc_info:
            validate_decision(_record(**overrides))
        assert exc_info.value.code == code

    def test_currency_not_script_checked(self, grant_decision):
        """The currency code is structural."""
        assert grant_decision.compensation.currency == "SAR"
        assert_script_only(grant_decision)

    def test_latin_in_compensation_basis(self, grant_decision):
        """Free text inside the award is checked too."""
        record = replace(grant_decision, compensation=replace(grant_decision.compensation, basis="delay"))

        with pytest.raises(DecisionValidationError) as exc_info:
            assert_script_only(record)
        assert exc_info.value.code == "NON_ARABIC_LEAK"

    @settings(suppress_health_check=[HealthCheck.function_scoped_fixture])
    @given(
        competent=st.booleans(),
        admissible=st.booleans(),
        outcome=st.sampled_from(list(Outcome)),
        amount=st.one_of(st.none(), st.floats(min_value=1, max_value=1e9)),
    )
    def test_accepted_records_are_consistent(self, competent, admissible, outcome, amount):
        """A record passes exactly when no invariant is broken."""
        compensation = Compensation(basis="ضرر", amount=amount) if amount is not None else None
        record = _record(
            jurisdiction_competent=competent,
            formally_admissible=admissible,
            outcome=outcome,
            compensation=compensation,
        )

        consistent = (
            (competent or (outcome == Outcome.DENIAL and compensation is None))
            and (admissible or (outcome == Outcome.DENIAL and compensation is None))
            and (compensation is None or outcome != Outcome.DENIAL)
        )

        if consistent:
            assert validate_decision(record) is record
        else:
            with pytest.raises(DecisionValidationError):
                validate_decision(record)
