"""Quality gates for rendered judgments.

Three gates run over a draft: language hygiene, document structure and
binding to the decision. The gates collect every violation so a repair
request can name all of them at once.
"""

import re
from dataclasses import dataclass, field

from ..utils.arabic import LATIN_PATTERN, format_amount, normalize_digits
from .prompts import REMAINDER_REJECTION, RULING_LEAD_IN, OutcomeDirective

FORBIDDEN_PHRASES = (
    "ما طالب به",
    "بما طالب به",
    "حسب طلب المدعي",
    "وفق ما جاء في دعواه",
    "هو:",
    "طلبات المدعي",
)

# (anchor alternatives, error label)
REQUIRED_ANCHORS = (
    (("بسم الله الرحمن الرحيم",), "الاستهلال بالبسملة"),
    (("المملكة العربية السعودية",), "اسم الدولة"),
    (("ديوان المظالم", "المحكمة"), "جهة القضاء"),
    (("أولاً",), "البند الأول من المنطوق"),
    (("أمين السر",), "توقيع أمين السر"),
    (("القاضي", "قاضي"), "توقيع القاضي"),
)

RULING_HEADING = "منطوق الحكم"
MONEY_MARKERS = ("ريال", "مبلغ")


@dataclass
class QAReport:
    """Violations found in a draft."""

    errors: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors


def extract_ruling_section(text: str) -> str:
    """
    Return the operative part of a judgment.

    The section starts at the last ruling heading, or at the first
    operative lead-in when there is no heading. Empty if neither exists.
    """
    heading = text.rfind(RULING_HEADING)
    if heading >= 0:
        return text[heading:]
    lead_in = text.find(RULING_LEAD_IN)
    if lead_in >= 0:
        return text[lead_in:]
    return ""


def check_hygiene(text: str) -> list[str]:
    """Latin letters and vague referral phrases."""
    errors = []
    if match := LATIN_PATTERN.search(text):
        start = max(match.start() - 15, 0)
        errors.append(f"تسرب حروف لاتينية داخل الصك: ...{text[start:match.end() + 15]}...")
    for phrase in FORBIDDEN_PHRASES:
        if phrase in text:
            errors.append(f"عبارة ممنوعة أو ركيكة داخل الصك: {phrase}")
    return errors


def check_structure(text: str) -> list[str]:
    """Mandatory anchors of a judgment deed."""
    errors = [
        f"ناقص عنصر أساسي: {label}"
        for alternatives, label in REQUIRED_ANCHORS
        if not any(anchor in text for anchor in alternatives)
    ]
    if RULING_HEADING in text and RULING_LEAD_IN not in text:
        errors.append(f"المنطوق غير محكم: يجب صياغته كقضاء ({RULING_LEAD_IN} بما يلي).")
    return errors


def check_decision_binding(text: str, directive: OutcomeDirective) -> list[str]:
    """Check that the ruling section carries out the decision."""
    ruling = extract_ruling_section(text)
    if not ruling:
        return ["لم يعثر على منطوق الحكم."]

    errors = [
        f"المنطوق لا يتضمن العبارة الملزمة: {phrase}"
        for phrase in directive.required_phrases
        if phrase not in ruling
    ]

    if directive.forbids_money:
        if any(marker in ruling for marker in MONEY_MARKERS):
            errors.append("المنطوق يتضمن مبلغاً مالياً مع أن القرار لا يقضي بأي تعويض.")
        return errors

    normalized = normalize_digits(ruling)
    amount = format_amount(directive.amount)
    match = re.search(rf"(?<![\d.]){re.escape(amount)}(?!\d|\.\d)", normalized)
    if match is None:
        errors.append(f"المنطوق لا يذكر مبلغ التعويض المقضي به ({amount}).")
    elif directive.requires_remainder_rejection and normalized.find(REMAINDER_REJECTION, match.end()) < 0:
        errors.append(f"المنطوق لا يتضمن عبارة ({REMAINDER_REJECTION} من طلبات) بعد المبلغ.")

    return errors


def run_quality_gates(text: str, directive: OutcomeDirective) -> QAReport:
    """
    Run every gate over a draft.

    Args:
        text: Normalized draft text
        directive: Outcome directive the draft must follow

    Returns:
        QAReport with all violations
    """
    return QAReport(
        errors=check_hygiene(text) + check_structure(text) + check_decision_binding(text, directive)
    )
