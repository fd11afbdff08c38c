"""Tests for speaker resolution."""

import pytest
from hypothesis import HealthCheck, given, settings
from hypothesis import strategies as st

from moot_court.models import Phase, Role
from moot_court.session import resolve_next_speaker


def _rotation(phase, context, start=Role.JUDGE, steps=5):
    """Follow the rotation from a starting speaker."""
    speakers = [start]
    for _ in range(steps - 1):
        speakers.append(resolve_next_speaker(phase, speakers[-1], context))
    return speakers


class TestTieBreaks:
    """Tests for resolution without a rotation position."""

    def test_closed_has_no_speaker(self, case_context):
        """Nobody speaks once the session is closed."""
        assert resolve_next_speaker(Phase.CLOSED, Role.JUDGE, case_context) is None

    @pytest.mark.parametrize("last", [None, Role.SYSTEM, Role.CLERK])
    def test_judge_resumes(self, case_context, last):
        """No previous speaker, a system record or the clerk hand the floor to the judge."""
        for phase in (Phase.SESSION_OPEN, Phase.EVIDENCE_REVIEW, Phase.JUDGMENT):
            assert resolve_next_speaker(phase, last, case_context) == Role.JUDGE


class TestDefaultRotation:
    """Tests for the adversarial rotation."""

    def test_claimant_user_leads_claim_presentation(self, case_context):
        """The claimant's side speaks first in claimant-led phases."""
        assert _rotation(Phase.CLAIM_PRESENTATION, case_context) == [
            Role.JUDGE,
            Role.USER,
            Role.USER_ADVISOR,
            Role.OPPONENT_GOVERNMENT,
            Role.JUDGE,
        ]

    def test_opponent_leads_defense_response(self, case_context):
        """The respondent's counsel opens the defense response."""
        assert _rotation(Phase.DEFENSE_RESPONSE, case_context) == [
            Role.JUDGE,
            Role.OPPONENT_GOVERNMENT,
            Role.USER,
            Role.USER_ADVISOR,
            Role.JUDGE,
        ]

    def test_respondent_user_waits_in_claim_presentation(self, respondent_context):
        """A respondent user speaks after the claimant's counsel."""
        assert _rotation(Phase.CLAIM_PRESENTATION, respondent_context) == [
            Role.JUDGE,
            Role.OPPONENT_PRIVATE,
            Role.USER,
            Role.USER_ADVISOR,
            Role.JUDGE,
        ]

    def test_respondent_user_leads_questions_to_defendant(self, respondent_context):
        """A respondent user answers first when the defendant is questioned."""
        assert resolve_next_speaker(Phase.QUESTIONS_TO_DEFENDANT, Role.JUDGE, respondent_context) == Role.USER

    def test_off_rotation_speaker_returns_to_judge(self, case_context):
        """A witness outside the witness phase hands back to the judge."""
        assert resolve_next_speaker(Phase.MOTIONS, Role.WITNESS, case_context) == Role.JUDGE


class TestEvidentiaryRotations:
    """Tests for the evidence, witness and expert rotations."""

    def test_evidence_review_without_experts(self, case_context):
        """The user comments on the exhibit first."""
        assert _rotation(Phase.EVIDENCE_REVIEW, case_context) == [
            Role.JUDGE,
            Role.USER,
            Role.USER_ADVISOR,
            Role.OPPONENT_GOVERNMENT,
            Role.JUDGE,
        ]

    def test_evidence_review_with_experts(self, expert_context):
        """The expert comments before the parties."""
        assert _rotation(Phase.EVIDENCE_REVIEW, expert_context, steps=6) == [
            Role.JUDGE,
            Role.EXPERT,
            Role.USER,
            Role.USER_ADVISOR,
            Role.OPPONENT_GOVERNMENT,
            Role.JUDGE,
        ]

    def test_witness_examination(self, case_context):
        """The witness answers, then each side questions."""
        assert _rotation(Phase.WITNESS_EXAMINATION, case_context) == [
            Role.JUDGE,
            Role.WITNESS,
            Role.USER,
            Role.OPPONENT_GOVERNMENT,
            Role.JUDGE,
        ]

    def test_expert_report_with_experts(self, expert_context):
        """The expert presents and counsel discuss the report."""
        assert _rotation(Phase.EXPERT_REPORT, expert_context) == [
            Role.JUDGE,
            Role.EXPERT,
            Role.USER_ADVISOR,
            Role.OPPONENT_GOVERNMENT,
            Role.JUDGE,
        ]

    def test_expert_report_without_experts(self, case_context):
        """Without the expert track the phase uses the default rotation."""
        assert resolve_next_speaker(Phase.EXPERT_REPORT, Role.JUDGE, case_context) == Role.USER


class TestResolutionProperties:
    """Property tests over every phase and previous speaker."""

    @settings(suppress_health_check=[HealthCheck.function_scoped_fixture])
    @given(
        phase=st.sampled_from([p for p in Phase if p != Phase.CLOSED]),
        last=st.one_of(st.none(), st.sampled_from(list(Role))),
        experts=st.booleans(),
    )
    def test_never_resolves_to_staff(self, case_context, phase, last, experts):
        """Resolution always yields a participant, never a system record or the clerk."""
        from dataclasses import replace

        context = replace(case_context, experts_enabled=experts)
        speaker = resolve_next_speaker(phase, last, context)

        assert speaker is not None
        assert speaker not in (Role.SYSTEM, Role.CLERK)

    @settings(suppress_health_check=[HealthCheck.function_scoped_fixture])
    @given(
        phase=st.sampled_from(list(Phase)),
        last=st.one_of(st.none(), st.sampled_from(list(Role))),
    )
    def test_deterministic(self, case_context, phase, last):
        """Same inputs give the same speaker."""
        first = resolve_next_speaker(phase, last, case_context)
        assert resolve_next_speaker(phase, last, case_context) == first
