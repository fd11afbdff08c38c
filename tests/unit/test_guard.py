"""Tests for the stall and duplicate-turn guard."""

from moot_court.models import Message, Phase, Role
from moot_court.session import StallGuard


def _messages(phase, roles):
    return [Message(role=role, content="نص", phase=phase) for role in roles]


class TestDuplicateJudge:
    """Tests for consecutive judge turns."""

    def test_judge_twice_in_a_row_advances(self, guard):
        """A judge turn right after a judge turn is refused."""
        messages = _messages(Phase.MOTIONS, [Role.JUDGE])
        assert guard.should_advance(Role.JUDGE, Phase.MOTIONS, messages)

    def test_judge_after_other_speaker_allowed(self, guard):
        """The judge may speak after counsel."""
        messages = _messages(Phase.MOTIONS, [Role.JUDGE, Role.USER])
        assert not guard.should_advance(Role.JUDGE, Phase.MOTIONS, messages)

    def test_non_judge_speaker_allowed(self, guard):
        """Only the judge is checked for repetition."""
        messages = _messages(Phase.MOTIONS, [Role.JUDGE])
        assert not guard.should_advance(Role.USER, Phase.MOTIONS, messages)

    def test_system_records_do_not_separate_judge_turns(self, guard):
        """A procedural record between two judge turns still counts as consecutive."""
        messages = _messages(Phase.EVIDENCE_REVIEW, [Role.JUDGE, Role.SYSTEM])
        assert guard.should_advance(Role.JUDGE, Phase.EVIDENCE_REVIEW, messages)

    def test_previous_phase_judge_ignored(self, guard):
        """Only turns of the current phase are considered."""
        messages = _messages(Phase.MOTIONS, [Role.JUDGE])
        assert not guard.should_advance(Role.JUDGE, Phase.FINAL_PLEADINGS, messages)

    def test_empty_phase_allowed(self, guard):
        """The judge opens a phase with no turns yet."""
        assert not guard.should_advance(Role.JUDGE, Phase.MOTIONS, [])


class TestRulingMarker:
    """Tests for the terminal ruling in the judgment phase."""

    def test_ruling_advances_judgment(self, guard):
        """Once the judge has ruled the judgment phase ends."""
        messages = [
            Message(role=Role.JUDGE, content="حكمت الدائرة برفض الدعوى.", phase=Phase.JUDGMENT),
            Message(role=Role.USER, content="نعم.", phase=Phase.JUDGMENT),
        ]
        assert guard.should_advance(Role.JUDGE, Phase.JUDGMENT, messages)

    def test_ruling_marker_only_counts_in_judgment(self, guard):
        """The same words in an earlier phase do not end it."""
        messages = [
            Message(role=Role.JUDGE, content="حكمت الدائرة سابقاً في قضية مماثلة.", phase=Phase.MOTIONS),
            Message(role=Role.USER, content="نعم.", phase=Phase.MOTIONS),
        ]
        assert not guard.should_advance(Role.JUDGE, Phase.MOTIONS, messages)

    def test_ruling_by_counsel_ignored(self, guard):
        """Only the judge delivers the ruling."""
        messages = [
            Message(role=Role.JUDGE, content="تفضلوا.", phase=Phase.JUDGMENT),
            Message(role=Role.USER, content="نطلب أن حكمت الدائرة لصالحنا.", phase=Phase.JUDGMENT),
        ]
        assert not guard.should_advance(Role.JUDGE, Phase.JUDGMENT, messages)


class TestTurnCeilings:
    """Tests for the per-phase turn ceilings."""

    def test_general_ceiling(self, guard):
        """Fifteen turns in a phase force an advance."""
        rotation = [Role.JUDGE, Role.USER, Role.USER_ADVISOR, Role.OPPONENT_GOVERNMENT]
        messages = _messages(Phase.MOTIONS, (rotation * 4)[:15])

        assert guard.should_advance(Role.JUDGE, Phase.MOTIONS, messages)
        assert not guard.should_advance(Role.JUDGE, Phase.MOTIONS, messages[:14])

    def test_general_ceiling_applies_to_any_speaker(self, guard):
        """The ceiling does not depend on who is next."""
        messages = _messages(Phase.MOTIONS, [Role.USER] * 15)
        assert guard.should_advance(Role.USER_ADVISOR, Phase.MOTIONS, messages)

    def test_evidentiary_ceiling(self, guard):
        """Evidentiary phases advance after ten turns."""
        messages = _messages(Phase.WITNESS_EXAMINATION, [Role.WITNESS, Role.USER] * 5)

        assert guard.should_advance(Role.OPPONENT_GOVERNMENT, Phase.WITNESS_EXAMINATION, messages)
        assert not guard.should_advance(Role.OPPONENT_GOVERNMENT, Phase.WITNESS_EXAMINATION, messages[:9])

    def test_custom_ceilings(self):
        """Ceilings are configurable."""
        guard = StallGuard(turn_ceiling=3, evidentiary_turn_ceiling=2)

        assert guard.should_advance(Role.USER, Phase.MOTIONS, _messages(Phase.MOTIONS, [Role.USER] * 3))
        assert guard.should_advance(
            Role.USER, Phase.EVIDENCE_REVIEW, _messages(Phase.EVIDENCE_REVIEW, [Role.USER] * 2)
        )

    def test_closed_never_advances(self, guard):
        """The guard has nothing to do once closed."""
        messages = _messages(Phase.CLOSED, [Role.JUDGE] * 20)
        assert not guard.should_advance(Role.JUDGE, Phase.CLOSED, messages)
