"""Case digest for the decision engine and the judgment drafter."""

from dataclasses import dataclass, field
from datetime import date
from typing import Optional, Sequence

from ..config.settings import DecisionConfig, DraftingConfig, get_settings
from ..models.case import CaseContext
from ..models.message import Message
from ..models.roles import Role
from ..session.prompts import display_name
from ..utils.arabic import compact, strip_latin

COUNSEL_ROLES = frozenset({
    Role.USER,
    Role.USER_ADVISOR,
    Role.OPPONENT_GOVERNMENT,
    Role.OPPONENT_PRIVATE,
})


@dataclass(frozen=True)
class JudgmentMeta:
    """Fixed bench data printed on the judgment."""

    judge_name: str
    clerk_name: str
    court_name: str
    court_city: str
    circuit_name: str

    @classmethod
    def from_config(cls, context: CaseContext, config: Optional[DraftingConfig] = None) -> "JudgmentMeta":
        """Build bench data from drafting settings and the case's court."""
        config = config or get_settings().drafting
        return cls(
            judge_name=config.judge_name,
            clerk_name=config.clerk_name,
            court_name=context.court_name,
            court_city=config.court_city,
            circuit_name=config.circuit_name,
        )


@dataclass(frozen=True)
class CaseMeta:
    """Case identification printed on the judgment."""

    case_type: str
    case_title: str
    plaintiff: str
    defendants: list[str] = field(default_factory=list)
    hijri_date: str = ""
    gregorian_date: str = ""
    case_number: Optional[str] = None
    defendants_rep: Optional[str] = None

    @classmethod
    def from_context(
        cls,
        context: CaseContext,
        case_number: Optional[str] = None,
        hijri_date: str = "",
        gregorian_date: Optional[str] = None,
    ) -> "CaseMeta":
        """Build case identification from a case context."""
        return cls(
            case_type=context.case_type_label,
            case_title=context.display_title,
            plaintiff=context.plaintiff.name,
            defendants=[context.defendant.name],
            hijri_date=hijri_date,
            gregorian_date=gregorian_date or date.today().isoformat(),
            case_number=case_number,
        )


def _speaker(message: Message) -> str:
    return strip_latin(message.display_name).strip() or display_name(message.role)


def build_case_digest(
    context: CaseContext,
    messages: Sequence[Message],
    judgment_meta: JudgmentMeta,
    case_meta: Optional[CaseMeta] = None,
    config: Optional[DecisionConfig] = None,
) -> str:
    """
    Condense a session into the digest read by the decision engine.

    Args:
        context: Case context
        messages: Session transcript
        judgment_meta: Bench data
        case_meta: Case identification (derived from the context if omitted)
        config: Excerpt counts and caps (default from settings)

    Returns:
        Sectioned digest text
    """
    config = config or get_settings().decision
    case_meta = case_meta or CaseMeta.from_context(context)
    limit = config.excerpt_chars

    judge_lines = [
        f"- القاضي: {compact(m.content, limit)}"
        for m in messages if m.role == Role.JUDGE
    ]
    counsel_lines = [
        f"- {_speaker(m)}: {compact(m.content, limit)}"
        for m in messages if m.role in COUNSEL_ROLES
    ]
    expert_lines = [f"- الخبير: {compact(m.content, limit)}" for m in messages if m.role == Role.EXPERT]
    witness_lines = [f"- الشاهد: {compact(m.content, limit)}" for m in messages if m.role == Role.WITNESS]

    # Negative slicing with a zero count would keep everything
    judge_lines = judge_lines[-config.judge_excerpts:] if config.judge_excerpts else []
    counsel_lines = counsel_lines[-config.counsel_excerpts:] if config.counsel_excerpts else []

    sections = [
        "[بيانات المحكمة]",
        f"- المحكمة: {judgment_meta.court_name} {judgment_meta.court_city}",
        f"- الدائرة: {judgment_meta.circuit_name}",
        f"- القاضي: {judgment_meta.judge_name}",
        f"- أمين السر: {judgment_meta.clerk_name}",
        "",
        "[بيانات الدعوى]",
        f"- نوع القضية: {case_meta.case_type}",
        f"- عنوان الدعوى: {case_meta.case_title}",
        f"- رقم القضية: {case_meta.case_number or 'غير مدون'}",
        f"- التاريخ: {case_meta.hijri_date} الموافق {case_meta.gregorian_date}",
        f"- المدعي: {case_meta.plaintiff}",
        f"- المدعى عليهم: {'، '.join(case_meta.defendants)}",
        f"- الوقائع: {compact(context.facts, limit * 4)}",
        f"- الطلبات: {compact(context.requests, limit * 2)}",
        "",
        "[الشهادات والخبرة الفنية]",
        "\n".join(expert_lines) if expert_lines else "- لا يوجد تقرير خبرة",
        "\n".join(witness_lines) if witness_lines else "- لا يوجد شهود",
        "",
        "[خلاصة المداولة وسير الجلسة]",
        "\n".join(judge_lines),
        "",
        "[مرافعات الأطراف]",
        "\n".join(counsel_lines),
    ]
    return "\n".join(sections).strip()
