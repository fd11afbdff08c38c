"""Tests for session snapshots and persisted messages."""

import json

import pytest

from moot_court.exceptions import SnapshotError
from moot_court.models import Attachment, Message, MessageCategory, Phase, Role
from moot_court.session import PhaseStateMachine, SessionSnapshot


class TestSnapshotSerialization:
    """Tests for SessionSnapshot.to_dict and from_dict."""

    def test_to_dict_shape(self, machine):
        """Snapshots persist the config, transcript, phase and turn."""
        data = machine.snapshot().to_dict()

        assert set(data) == {"id", "title", "config", "messages", "current_phase", "turn", "last_updated"}
        assert data["id"] == "S-001"
        assert data["current_phase"] == "session_open"
        assert data["messages"][0]["category"] == "system"
        assert data["config"]["plaintiff"]["name"] == "شركة البناء الحديث"

    def test_no_timeline_persisted(self, machine):
        """The timeline is always derived, never stored."""
        assert "timeline" not in machine.snapshot().to_dict()

    def test_from_dict_roundtrip(self, machine):
        """A snapshot survives conversion to and from a dictionary."""
        snapshot = machine.snapshot()
        restored = SessionSnapshot.from_dict(snapshot.to_dict())

        assert restored.phase == Phase.SESSION_OPEN
        assert restored.context == machine.context
        assert restored.messages[0].content == machine.messages[0].content

    def test_not_started(self):
        """A missing phase means the session never started."""
        data = {
            "id": "S-9",
            "config": {"court_name": "المحكمة الإدارية", "facts": "و", "requests": "ط"},
            "current_phase": None,
        }
        snapshot = SessionSnapshot.from_dict(data)

        assert snapshot.phase is None
        assert snapshot.messages == []

    @pytest.mark.parametrize(
        "data",
        [
            [],
            {"title": "بلا معرف"},
            {"id": "S-1", "config": {"court_name": "م"}, "current_phase": "recess"},
            {"id": "S-1", "config": {"court_name": "م", "jurisdiction": "maritime"}},
        ],
    )
    def test_malformed(self, data):
        """Malformed snapshots raise SnapshotError."""
        with pytest.raises(SnapshotError):
            SessionSnapshot.from_dict(data)


class TestSnapshotFiles:
    """Tests for saving and loading snapshot files."""

    def test_save_defaults_to_sessions_dir(self, machine, isolated_settings):
        """Without a path the snapshot lands in the sessions directory."""
        path = machine.snapshot().save()

        assert path == isolated_settings.sessions_dir / "S-001.json"
        assert path.exists()

    def test_saved_as_utf8_json(self, machine, tmp_path):
        """Arabic text is written unescaped."""
        path = machine.snapshot().save(tmp_path / "out" / "s.json")
        text = path.read_text(encoding="utf-8")

        assert "افتتاح" in text
        assert json.loads(text)["id"] == "S-001"

    def test_load_missing(self, tmp_path):
        """Loading a missing file raises SnapshotError."""
        with pytest.raises(SnapshotError):
            SessionSnapshot.load(tmp_path / "missing.json")

    def test_load_invalid_json(self, tmp_path):
        """Loading a corrupt file raises SnapshotError."""
        path = tmp_path / "broken.json"
        path.write_text("{not json", encoding="utf-8")

        with pytest.raises(SnapshotError):
            SessionSnapshot.load(path)


class TestPersistedMessages:
    """Tests for message categories and role recovery."""

    def test_categories(self):
        """Messages are categorized by origin."""
        assert Message(role=Role.USER, content="", phase=Phase.MOTIONS).category == MessageCategory.HUMAN
        assert Message(role=Role.SYSTEM, content="", phase=Phase.MOTIONS).category == MessageCategory.SYSTEM
        assert Message(role=Role.WITNESS, content="", phase=Phase.MOTIONS).category == MessageCategory.GENERATED

    def test_unknown_generated_role(self):
        """An unknown generated speaker is attributed to the clerk."""
        message = Message.from_dict({"category": "generated", "role": "bailiff", "content": "قيام"})
        assert message.role == Role.CLERK

    @pytest.mark.parametrize("category,role", [("human", Role.USER), ("system", Role.SYSTEM)])
    def test_role_from_category(self, category, role):
        """Without a known role the category decides."""
        assert Message.from_dict({"category": category, "content": "نص"}).role == role

    def test_attachment_roundtrip(self):
        """Attachments are persisted with the message."""
        message = Message(
            role=Role.USER,
            content="مرفق العقد",
            phase=Phase.EVIDENCE_REVIEW,
            attachment=Attachment(name="contract.png", mime_type="image/png", data="aGVsbG8="),
        )
        restored = Message.from_dict(message.to_dict())

        assert restored == message
        assert restored.attachment.is_image


class TestRestoreNextSpeaker:
    """A restored session resumes with the speaker the live one expects."""

    def _restored(self, machine):
        return PhaseStateMachine.restore(SessionSnapshot.from_dict(machine.snapshot().to_dict()))

    def test_after_force_advance(self, machine):
        """A phase entered by force opens as if the judge just spoke."""
        machine.append_message(Role.JUDGE, "افتتحت الجلسة.")
        machine.advance()
        machine.append_message(Role.USER, "حاضر.")
        machine.advance()
        machine.force_advance()

        restored = self._restored(machine)

        assert machine.next_speaker == Role.USER
        assert restored.phase == Phase.PRELIMINARY_CHECKS
        assert restored.next_speaker == machine.next_speaker

    def test_after_set_phase(self, machine):
        machine.append_message(Role.JUDGE, "افتتحت الجلسة.")
        machine.advance()
        machine.append_message(Role.USER, "حاضر.")
        machine.advance()
        machine.set_phase(Phase.WITNESS_EXAMINATION)

        restored = self._restored(machine)

        assert machine.next_speaker == Role.WITNESS
        assert restored.next_speaker == Role.WITNESS

    def test_after_ceiling_advance(self, machine):
        """The user's slot survives a save right after the turn ceiling."""
        transition = None
        while transition is None or not transition.phase_changed:
            machine.append_message(machine.next_speaker, "نعم.")
            transition = machine.advance()

        restored = self._restored(machine)

        assert transition.forced
        assert restored.next_speaker == machine.next_speaker == Role.USER

    def test_within_phase(self, machine):
        """Mid-phase, the speaker follows the last message."""
        machine.append_message(Role.JUDGE, "افتتحت الجلسة.")
        machine.advance()
        machine.append_message(Role.USER, "حاضر.")
        machine.advance()

        assert self._restored(machine).next_speaker == machine.next_speaker == Role.USER_ADVISOR
