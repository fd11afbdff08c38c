"""Turn-taking loop.

The driver asks the text-generation service for AI turns, feeds human
turns into the machine, and keeps at most one generation in flight per
session. Results that arrive after the session moved on are discarded.
"""

import threading
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from ..llm.ollama_client import OllamaClient, OllamaResponse
from ..models.message import Attachment, Message
from ..models.roles import Phase, Role
from ..utils.logging import get_logger
from .machine import PhaseStateMachine, Transition
from .prompts import (
    ROLE_PROFILES,
    build_chat_history,
    build_system_prompt,
    build_turn_instruction,
    display_name,
)

logger = get_logger(__name__)


class TurnStatus(str, Enum):
    """Outcome of a turn request."""

    COMPLETED = "completed"
    ADVANCED = "advanced"  # Turn refused by the guard, phase moved on
    AWAITING_HUMAN = "awaiting_human"
    CLOSED = "closed"
    BUSY = "busy"
    REJECTED = "rejected"
    FAILED = "failed"
    DISCARDED = "discarded"


@dataclass
class TurnResult:
    """Result of a turn request."""

    status: TurnStatus
    message: Optional[Message] = None
    transition: Optional[Transition] = None
    error: Optional[str] = None

    @property
    def progressed(self) -> bool:
        """Check if the session state moved forward."""
        return self.status in (TurnStatus.COMPLETED, TurnStatus.ADVANCED)


def evidence_record_text(exhibit: str) -> str:
    """Procedural record for the judge examining an exhibit."""
    return f"إجراء: القاضي يفحص الدليل ({exhibit}) ويناقش وجه الاستدلال به."


def clean_turn_text(text: str, role: Role) -> str:
    """Strip a speaker label the model may echo at the start of its turn."""
    text = text.strip()
    for label in (display_name(role), ROLE_PROFILES[role].display_name.split(" (")[0]):
        for separator in (":", "："):
            prefix = f"{label}{separator}"
            if text.startswith(prefix):
                return text[len(prefix):].strip()
    return text


class SessionDriver:
    """Drives one session against the text-generation service."""

    def __init__(
        self,
        machine: PhaseStateMachine,
        client: Optional[OllamaClient] = None,
        temperature: Optional[float] = None,
        max_auto_turns: Optional[int] = None,
    ):
        """
        Initialize the driver.

        Args:
            machine: Session to drive
            client: Text-generation client (default: global Ollama client)
            temperature: Sampling temperature for turns
            max_auto_turns: Default turn limit for ``run``
        """
        from ..config.settings import get_settings
        session_config = get_settings().session

        if client is None:
            from ..llm.ollama_client import get_ollama_client
            client = get_ollama_client()

        self.machine = machine
        self.client = client
        self.temperature = session_config.turn_temperature if temperature is None else temperature
        self.max_auto_turns = max_auto_turns or session_config.max_auto_turns

        self._lock = threading.Lock()
        self._in_flight = False

    @property
    def in_flight(self) -> bool:
        """Check if a generation is pending."""
        return self._in_flight

    def _generate(self, speaker: Role) -> OllamaResponse:
        machine = self.machine
        history = build_chat_history(machine.messages)
        history.append({
            "role": "user",
            "content": build_turn_instruction(machine.phase, speaker, machine.context),
        })
        return self.client.chat(
            history,
            system=build_system_prompt(speaker, machine.context),
            temperature=self.temperature,
        )

    def _record_evidence(self, text: str) -> None:
        """Record exhibits the judge names for the first time."""
        machine = self.machine
        recorded = " ".join(m.content for m in machine.messages if m.role == Role.SYSTEM)
        for exhibit in machine.context.evidence:
            if exhibit and exhibit in text and f"({exhibit})" not in recorded:
                machine.append_message(Role.SYSTEM, evidence_record_text(exhibit))

    def request_turn(self, role: Optional[Role] = None) -> TurnResult:
        """
        Request the next AI turn.

        Args:
            role: Explicit speaker to activate instead of the computed one

        Returns:
            TurnResult describing what happened
        """
        machine = self.machine

        with self._lock:
            if self._in_flight:
                return TurnResult(TurnStatus.BUSY)
            if machine.is_closed():
                return TurnResult(TurnStatus.CLOSED)
            if not machine.started:
                return TurnResult(TurnStatus.REJECTED, error="Session has not started.")

            speaker = role or machine.next_speaker
            if speaker == Role.USER:
                return TurnResult(TurnStatus.AWAITING_HUMAN)
            if speaker is None or not ROLE_PROFILES[speaker].ai_controlled:
                return TurnResult(TurnStatus.REJECTED, error=f"{speaker} cannot take a generated turn.")

            if not machine.allows_turn(speaker):
                logger.info(f"Turn for {speaker.value} refused in {machine.phase.value}, advancing phase")
                return TurnResult(TurnStatus.ADVANCED, transition=machine.force_advance())

            self._in_flight = True
            revision = machine.revision
            phase = machine.phase

        try:
            logger.debug(f"Generating {speaker.value} turn in {phase.value}")
            response = self._generate(speaker)

            with self._lock:
                if not response.success:
                    logger.error(f"Turn generation failed for {speaker.value}: {response.error}")
                    return TurnResult(TurnStatus.FAILED, error=response.error)

                if machine.revision != revision:
                    logger.info(f"Discarding stale {speaker.value} turn")
                    return TurnResult(TurnStatus.DISCARDED)

                text = clean_turn_text(response.text, speaker)
                if not text:
                    return TurnResult(TurnStatus.FAILED, error="Empty response from model.")

                if speaker == Role.JUDGE and phase == Phase.EVIDENCE_REVIEW:
                    self._record_evidence(text)

                message = machine.append_message(speaker, text)
                transition = machine.advance()
                return TurnResult(TurnStatus.COMPLETED, message=message, transition=transition)
        finally:
            self._in_flight = False

    def submit_human_message(
        self,
        text: str,
        attachment: Optional[Attachment] = None,
    ) -> TurnResult:
        """
        Submit the human participant's turn.

        Accepted only when the user holds the turn.
        """
        machine = self.machine

        with self._lock:
            if machine.is_closed():
                return TurnResult(TurnStatus.CLOSED)
            if machine.next_speaker != Role.USER:
                return TurnResult(TurnStatus.REJECTED, error="It is not the user's turn.")
            if not text.strip() and attachment is None:
                return TurnResult(TurnStatus.REJECTED, error="Empty message.")

            message = machine.append_message(Role.USER, text.strip(), attachment=attachment)
            transition = machine.advance()
            return TurnResult(TurnStatus.COMPLETED, message=message, transition=transition)

    def run(self, max_turns: Optional[int] = None) -> list[TurnResult]:
        """
        Request AI turns until the session needs the user, closes or fails.

        Args:
            max_turns: Upper bound on requests (default from settings)

        Returns:
            Results in order; the last one explains why the loop stopped
        """
        results = []
        for _ in range(max_turns or self.max_auto_turns):
            result = self.request_turn()
            results.append(result)
            if not result.progressed:
                break
        return results

    def close(self) -> TurnResult:
        """Close the session manually."""
        with self._lock:
            transition = self.machine.close()
        return TurnResult(TurnStatus.CLOSED, transition=transition)
