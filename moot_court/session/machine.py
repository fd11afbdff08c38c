"""Phase state machine for a simulated proceeding.

One ``PhaseStateMachine`` owns one session: its phase, transcript, turn
counter and next speaker. Transitions are computed by the pure
``compute_transition`` function so they can be checked in isolation.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Sequence
from uuid import uuid4

from ..models.case import CaseContext
from ..models.message import Attachment, Message
from ..models.roles import Phase, Role, next_phase
from ..models.timeline import TimelineEvent, build_timeline
from ..utils.logging import get_logger
from .guard import StallGuard
from .prompts import display_name as role_display_name
from .snapshot import SessionSnapshot
from .speaker import resolve_next_speaker

logger = get_logger(__name__)

OPENING_MESSAGE = "تم افتتاح الجلسة القضائية، والتحقق من هوية الأطراف."


@dataclass(frozen=True)
class Transition:
    """Result of one transition step."""

    previous_phase: Phase
    phase: Phase
    next_speaker: Optional[Role]
    timeline: list[TimelineEvent]
    forced: bool = False

    @property
    def phase_changed(self) -> bool:
        return self.phase != self.previous_phase


def forced_transition(phase: Phase, context: CaseContext) -> Transition:
    """Advance to the successor phase with a judge-initiated speaker."""
    new_phase = next_phase(phase)
    return Transition(
        previous_phase=phase,
        phase=new_phase,
        next_speaker=resolve_next_speaker(new_phase, Role.JUDGE, context),
        timeline=build_timeline(new_phase),
        forced=True,
    )


def compute_transition(
    phase: Phase,
    messages: Sequence[Message],
    context: CaseContext,
    guard: StallGuard,
) -> Transition:
    """
    Compute the next phase and speaker after a turn.

    Args:
        phase: Current phase
        messages: Full transcript, last turn included
        context: Case context
        guard: Stall guard applied to the computed speaker

    Returns:
        Transition describing the new phase, speaker and timeline
    """
    if phase == Phase.CLOSED:
        return Transition(phase, phase, None, build_timeline(phase))

    last_speaker = messages[-1].role if messages else None
    speaker = resolve_next_speaker(phase, last_speaker, context)

    if guard.should_advance(speaker, phase, messages):
        return forced_transition(phase, context)

    return Transition(phase, phase, speaker, build_timeline(phase))


class PhaseStateMachine:
    """Session object driving one proceeding through its phases."""

    def __init__(
        self,
        context: CaseContext,
        session_id: Optional[str] = None,
        title: Optional[str] = None,
        guard: Optional[StallGuard] = None,
    ):
        """
        Initialize a session that has not started yet.

        Args:
            context: Case context (read-only)
            session_id: Session identifier (generated if omitted)
            title: Session title (defaults to the case title)
            guard: Stall guard (defaults to configured ceilings)
        """
        if guard is None:
            from ..config.settings import get_settings
            session_config = get_settings().session
            guard = StallGuard(
                turn_ceiling=session_config.turn_ceiling,
                evidentiary_turn_ceiling=session_config.evidentiary_turn_ceiling,
                ruling_marker=session_config.ruling_marker,
            )

        self.context = context
        self.session_id = session_id or str(uuid4())[:8]
        self.title = title or context.display_title
        self.guard = guard

        self._messages: list[Message] = []
        self._phase: Optional[Phase] = None
        self.next_speaker: Optional[Role] = None
        self.turn = 0
        self.last_updated = datetime.now()
        # Bumped on every state change; lets callers detect stale work
        self.revision = 0

    @property
    def phase(self) -> Optional[Phase]:
        """Current phase, or None before start."""
        return self._phase

    @property
    def started(self) -> bool:
        return self._phase is not None

    @property
    def messages(self) -> tuple[Message, ...]:
        """Transcript in append order."""
        return tuple(self._messages)

    @property
    def timeline(self) -> list[TimelineEvent]:
        """Timeline derived from the current phase."""
        return build_timeline(self._phase)

    def is_closed(self) -> bool:
        return self._phase == Phase.CLOSED

    def phase_messages(self, phase: Optional[Phase] = None) -> list[Message]:
        """Messages stamped with a phase (default: current phase)."""
        phase = phase or self._phase
        return [m for m in self._messages if m.phase == phase]

    def _touch(self) -> None:
        self.revision += 1
        self.last_updated = datetime.now()

    def start(self) -> Optional[Message]:
        """
        Open the session.

        Returns:
            The opening system message, or None if already started
        """
        if self.started:
            return None

        self._phase = Phase.SESSION_OPEN
        self.turn = 1
        message = Message(
            role=Role.SYSTEM,
            content=OPENING_MESSAGE,
            phase=Phase.SESSION_OPEN,
            display_name=role_display_name(Role.SYSTEM),
        )
        self._messages.append(message)
        self.next_speaker = Role.JUDGE
        self._touch()

        logger.info(f"Session {self.session_id} opened")
        return message

    def append_message(
        self,
        role: Role,
        content: str,
        display_name: Optional[str] = None,
        attachment: Optional[Attachment] = None,
    ) -> Optional[Message]:
        """
        Append a turn stamped with the current phase.

        Returns:
            The appended message, or None before start or once closed
        """
        if not self.started or self.is_closed():
            logger.warning(f"Rejected {role.value} message: session not open")
            return None

        message = Message(
            role=role,
            content=content,
            phase=self._phase,
            display_name=display_name or role_display_name(role, self.context),
            attachment=attachment,
        )
        self._messages.append(message)
        self._touch()
        return message

    def _apply(self, transition: Transition) -> Transition:
        if transition.phase_changed:
            logger.info(
                f"Session {self.session_id}: {transition.previous_phase.value} -> "
                f"{transition.phase.value}{' (forced)' if transition.forced else ''}"
            )
        self._phase = transition.phase
        self.next_speaker = transition.next_speaker
        self.turn += 1
        self._touch()
        return transition

    def advance(self, last_message: Optional[Message] = None) -> Optional[Transition]:
        """
        Compute and apply the transition after a turn.

        Args:
            last_message: Message to append first if not yet in the transcript

        Returns:
            Applied transition, or None before start or once closed
        """
        if not self.started or self.is_closed():
            return None

        if last_message is not None and last_message not in self._messages:
            self._messages.append(last_message)

        transition = compute_transition(self._phase, self._messages, self.context, self.guard)
        return self._apply(transition)

    def allows_turn(self, role: Role) -> bool:
        """Check if the guard lets a role take the next turn in this phase."""
        if not self.started or self.is_closed():
            return False
        return not self.guard.should_advance(role, self._phase, self._messages)

    def force_advance(self) -> Optional[Transition]:
        """Move to the successor phase in place of a rejected turn."""
        if not self.started or self.is_closed():
            return None
        return self._apply(forced_transition(self._phase, self.context))

    def set_phase(self, phase: Phase) -> bool:
        """
        Jump forward to a phase.

        Returns:
            False if the request would regress the phase (no change)
        """
        if not self.started or phase.index < self._phase.index:
            logger.warning(f"Rejected phase change to {phase.value}")
            return False
        if phase == self._phase:
            return True

        self._phase = phase
        self.next_speaker = resolve_next_speaker(phase, Role.JUDGE, self.context)
        self._touch()
        return True

    def close(self) -> Optional[Transition]:
        """Close the session manually."""
        if not self.started or self.is_closed():
            return None

        transition = Transition(
            previous_phase=self._phase,
            phase=Phase.CLOSED,
            next_speaker=None,
            timeline=build_timeline(Phase.CLOSED),
        )
        self._phase = Phase.CLOSED
        self.next_speaker = None
        self._touch()
        logger.info(f"Session {self.session_id} closed")
        return transition

    def snapshot(self) -> SessionSnapshot:
        """Capture the session for persistence."""
        return SessionSnapshot(
            id=self.session_id,
            title=self.title,
            context=self.context,
            messages=list(self._messages),
            phase=self._phase,
            turn=self.turn,
            last_updated=self.last_updated,
        )

    @classmethod
    def restore(
        cls,
        snapshot: SessionSnapshot,
        guard: Optional[StallGuard] = None,
    ) -> "PhaseStateMachine":
        """
        Rebuild a session from a snapshot.

        The timeline is derived from the restored phase. The next speaker is
        recomputed from the last message of the restored phase; when that
        phase has no messages yet it was entered by an advance, so the judge
        counts as having just opened it.
        """
        machine = cls(
            snapshot.context,
            session_id=snapshot.id,
            title=snapshot.title,
            guard=guard,
        )
        machine._messages = list(snapshot.messages)
        machine._phase = snapshot.phase
        machine.turn = snapshot.turn
        machine.last_updated = snapshot.last_updated

        if snapshot.phase is not None:
            last = snapshot.messages[-1] if snapshot.messages else None
            last_speaker = last.role if last is not None and last.phase == snapshot.phase else Role.JUDGE
            machine.next_speaker = resolve_next_speaker(snapshot.phase, last_speaker, snapshot.context)

        return machine
