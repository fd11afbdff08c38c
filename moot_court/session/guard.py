"""Stall and duplicate-turn guard.

Generated turns can loop. The guard inspects the turn history of the
current phase and decides when the phase must be advanced instead of
granting the computed speaker another turn.
"""

from dataclasses import dataclass
from typing import Optional, Sequence

from ..models.message import Message
from ..models.roles import Phase, Role


@dataclass(frozen=True)
class StallGuard:
    """Liveness rules for a phase.

    Attributes:
        turn_ceiling: Turns after which any phase is force-advanced
        evidentiary_turn_ceiling: Turns after which an evidentiary phase
            is force-advanced
        ruling_marker: Text that marks the judge's terminal ruling
    """

    turn_ceiling: int = 15
    evidentiary_turn_ceiling: int = 10
    ruling_marker: str = "حكمت"

    def should_advance(
        self,
        next_speaker: Optional[Role],
        phase: Phase,
        messages: Sequence[Message],
    ) -> bool:
        """
        Decide whether the phase must advance instead of granting a turn.

        Args:
            next_speaker: Speaker computed by the rotation
            phase: Current phase
            messages: Full transcript

        Returns:
            True if the transition must be replaced by a phase advance
        """
        if phase == Phase.CLOSED:
            return False

        phase_messages = [m for m in messages if m.phase == phase]

        if next_speaker == Role.JUDGE and phase_messages:
            if phase == Phase.JUDGMENT and any(
                m.role == Role.JUDGE and self.ruling_marker in m.content
                for m in phase_messages
            ):
                return True
            # Procedural records do not separate two judge turns
            last_turn = next(
                (m for m in reversed(phase_messages) if m.role != Role.SYSTEM),
                None,
            )
            if last_turn is not None and last_turn.role == Role.JUDGE:
                return True

        if phase.is_evidentiary and len(phase_messages) >= self.evidentiary_turn_ceiling:
            return True

        return len(phase_messages) >= self.turn_ceiling
