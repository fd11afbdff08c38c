"""Judgment document assembly.

Drafts a judgment bound to a decision, checks it with the quality gates
and allows exactly one repair pass before giving up.
"""

from dataclasses import dataclass, field
from typing import Optional, Sequence

from ..config.settings import DraftingConfig, get_settings
from ..decision.digest import CaseMeta, JudgmentMeta, build_case_digest
from ..decision.engine import DecisionEngine
from ..llm.ollama_client import OllamaClient
from ..models.case import CaseContext
from ..models.decision import DecisionRecord
from ..models.message import Message
from ..utils.arabic import normalize_document
from ..utils.logging import get_logger
from .prompts import build_drafting_prompt, build_outcome_directive
from .qa import run_quality_gates

logger = get_logger(__name__)


def failure_message(decision: DecisionRecord, errors: Sequence[str]) -> str:
    """User-facing message for a judgment that could not be produced."""
    return (
        "عذراً، تعذر توليد الصك بمعايير الجودة الصارمة.\n"
        f"الخطأ: {'، '.join(errors)}\n\n"
        f"قرار المحرك كان: {decision.outcome.value}"
    )


@dataclass
class DraftResult:
    """Result of assembling a judgment.

    Attributes:
        success: Whether a draft passed every gate
        decision: Decision the draft is bound to
        text: Accepted judgment text (empty on failure)
        message: Failure message naming the decision's outcome
        errors: Violations of the last rejected draft
        attempts: Generation requests made (at most two)
        draft: Last generated text, accepted or not
    """

    success: bool
    decision: DecisionRecord
    text: str = ""
    message: str = ""
    errors: list[str] = field(default_factory=list)
    attempts: int = 0
    draft: str = ""

    @property
    def repaired(self) -> bool:
        return self.success and self.attempts > 1


class DocumentAssembler:
    """Turns a validated decision into a checked judgment document."""

    def __init__(
        self,
        client: Optional[OllamaClient] = None,
        config: Optional[DraftingConfig] = None,
    ):
        if client is None:
            from ..llm.ollama_client import get_ollama_client
            client = get_ollama_client()

        self.client = client
        self.config = config or get_settings().drafting

    def _draft(self, prompt: str, temperature: float) -> tuple[Optional[str], Optional[str]]:
        """Generate a draft. Returns (normalized text, error)."""
        response = self.client.generate(prompt, temperature=temperature)
        if not response.success:
            return None, response.error or "تعذر الاتصال بخدمة التوليد"
        return normalize_document(response.text), None

    def assemble(
        self,
        decision: DecisionRecord,
        digest: str,
        judgment_meta: JudgmentMeta,
        current_text: Optional[str] = None,
    ) -> DraftResult:
        """
        Draft, check and, at most once, repair a judgment.

        Args:
            decision: Validated decision the judgment must follow
            digest: Case digest
            judgment_meta: Fixed bench data
            current_text: Existing judgment to correct instead of drafting anew

        Returns:
            DraftResult with the accepted text or a failure message
        """
        directive = build_outcome_directive(decision)
        logger.info(f"Drafting judgment ({directive.kind.value})")

        prompt = build_drafting_prompt(
            directive,
            digest,
            judgment_meta,
            detail_level=self.config.detail_level,
            failing_text=current_text,
        )
        text, error = self._draft(prompt, self.config.temperature)
        if error:
            logger.error(f"Judgment drafting failed: {error}")
            return DraftResult(False, decision, message=failure_message(decision, [error]), errors=[error], attempts=1)

        report = run_quality_gates(text, directive)
        if report.ok:
            return DraftResult(True, decision, text=text, attempts=1, draft=text)

        logger.warning(f"Judgment failed quality gates, repairing: {report.errors}")
        repair_prompt = build_drafting_prompt(
            directive,
            digest,
            judgment_meta,
            detail_level=self.config.detail_level,
            failing_text=text,
            errors=report.errors,
        )
        repaired, error = self._draft(repair_prompt, self.config.repair_temperature)
        if error:
            logger.error(f"Judgment repair failed: {error}")
            return DraftResult(
                False, decision, message=failure_message(decision, [error]), errors=[error], attempts=2, draft=text
            )

        report = run_quality_gates(repaired, directive)
        if report.ok:
            return DraftResult(True, decision, text=repaired, attempts=2, draft=repaired)

        logger.error(f"Repaired judgment still fails quality gates: {report.errors}")
        return DraftResult(
            False,
            decision,
            message=failure_message(decision, report.errors),
            errors=report.errors,
            attempts=2,
            draft=repaired,
        )


def render_judgment(
    context: CaseContext,
    messages: Sequence[Message],
    client: Optional[OllamaClient] = None,
    judgment_meta: Optional[JudgmentMeta] = None,
    case_meta: Optional[CaseMeta] = None,
    current_text: Optional[str] = None,
) -> DraftResult:
    """
    Run the full pipeline: digest, decision, then document assembly.

    Args:
        context: Case context
        messages: Session transcript
        client: Text-generation client (default: global Ollama client)
        judgment_meta: Bench data (default from drafting settings)
        case_meta: Case identification (default from the context)
        current_text: Existing judgment to correct

    Returns:
        DraftResult of the assembly
    """
    judgment_meta = judgment_meta or JudgmentMeta.from_config(context)
    digest = build_case_digest(context, messages, judgment_meta, case_meta)
    decision = DecisionEngine(client).decide(digest)
    return DocumentAssembler(client).assemble(decision, digest, judgment_meta, current_text=current_text)
