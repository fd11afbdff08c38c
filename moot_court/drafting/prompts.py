"""Drafting instructions and outcome directives.

The outcome directive turns a validated decision into the binding
operative clause the drafter must reproduce, and into the phrases the
ruling section is later checked for.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from ..decision.digest import JudgmentMeta
from ..models.decision import DecisionRecord, Outcome
from ..utils.arabic import format_arabic_amount

RULING_LEAD_IN = "حكمت الدائرة"
REMAINDER_REJECTION = "رفض ما عدا ذلك"

GOLDEN_JUDGMENT_TEXT = """بسم الله الرحمن الرحيم

المملكة العربية السعودية
ديوان المظالم
المحكمة الإدارية بالرياض
الدائرة الإدارية الثالثة

رقم القضية: ١٤٤٥/١/ق لعام ١٤٤٥هـ
في يوم الأربعاء الموافق ١٤٤٥/٠٥/٠٨هـ
أصدرت الدائرة المكونة من:
القاضي/ [الاسم] رئيساً
وبحضور أمين السر/ [الاسم]

المدعي: شركة [الاسم] سجل تجاري رقم (...)
المدعى عليها: [اسم الجهة الحكومية]

(الوقائع)
تتلخص وقائع هذه الدعوى بالقدر اللازم لإصدار هذا الحكم، في أن وكيل المدعية تقدم بصحيفة دعوى قيدت قضية إدارية بالرقم المشار إليه أعلاه، ذكر فيها أن موكلته تعاقدت مع الجهة المدعى عليها لتنفيذ مشروع (...)، وقد نفذت التزاماتها وسلمت الأعمال بموجب محاضر الاستلام، إلا أن المدعى عليها تأخرت في صرف المستخلص الختامي دون مسوغ نظامي، وانتهى إلى طلب إلزامها بصرف مبلغ وقدره (...) ريال، والتعويض عن أضرار التأخير.
وبإحالة القضية إلى هذه الدائرة باشرت نظرها في جلسات المرافعة الموثقة بمحاضر الضبط، وفي جلسة هذا اليوم قرر الأطراف الاكتفاء، ولصلاحية القضية للفصل فيها قررت الدائرة رفع الجلسة للمداولة وإصدار الحكم.

(الأسباب)
تأسيساً على ما تقدم، وبما أن المدعية تهدف من دعواها إلى إلزام المدعى عليها بصرف بقية مستحقاتها عن العقد المبرم بينهما، فإن هذه الدعوى تندرج ضمن منازعات العقود الإدارية التي تختص محاكم ديوان المظالم بنظرها.
وعن موضوع الدعوى؛ فإنه من المقرر فقهاً وقضاءً أن العقد شريعة المتعاقدين، وحيث ثبت للدائرة بموجب محضر الاستلام النهائي أن المدعية أنجزت الأعمال المتعاقد عليها، وحيث إن المدعى عليها لم تقدم ما يدحض صحة هذا المستند، الأمر الذي تنتهي معه الدائرة إلى استحقاق المدعية للمبلغ.
أما عن طلب التعويض، فبما أن المدعية لم تقدم ما يثبت وقوع ضرر فعلي ومباشر ناتج عن تأخر الصرف، فإن الدائرة تنتهي إلى رفض هذا الشق من الطلب.

(منطوق الحكم)
حكمت الدائرة بما يلي:
أولاً: إلزام المدعى عليها ([اسم الجهة]) بأن تدفع للمدعية (شركة [الاسم]) مبلغاً وقدره (٥٠٠٬٠٠٠) خمسمائة ألف ريال سعودي.
ثانياً: رفض ما عدا ذلك من طلبات."""

STRICT_RULES = """أنت "مستشار صكوك الأحكام".
المهمة: إصدار صك حكم قضائي ابتدائي مطابق لصيغة وأسلوب الأحكام الصادرة عن المحاكم السعودية.

القواعد الإلزامية:
1. اللغة العربية الفصحى فقط، ويمنع أي حرف لاتيني.
2. يمنع نسخ المذكرات أو الطلبات حرفياً داخل الحكم.
3. يجب الالتزام الحرفي بالقرار القضائي الملزم أدناه، ويمنع مخالفة اتجاه الحكم المحدد فيه.
4. القاضي محايد ولا ينحاز.
5. يمنع منعاً باتاً استخدام عبارات الإحالة المبهمة في المنطوق مثل: "ما طالب به".
6. يجب أن يكون المنطوق محدداً وقاطعاً، مبتدئاً بعبارة "حكمت الدائرة"."""


class DirectiveKind(str, Enum):
    """Branch of the operative ruling."""

    INCOMPETENT = "incompetent"
    INADMISSIBLE = "inadmissible"
    DENIAL = "denial"
    GRANT_WITH_COMPENSATION = "grant_with_compensation"
    GRANT = "grant"


@dataclass(frozen=True)
class OutcomeDirective:
    """Binding instruction derived from a decision.

    Attributes:
        kind: Branch of the ruling
        outcome: Decision outcome the directive was built from
        operative_clause: Clause the ruling section must reproduce
        guidance: Additional drafting guidance (reasoning, claims)
        required_phrases: Phrases the ruling section must contain
        amount: Awarded amount, for the compensation branch
        requires_remainder_rejection: Whether the remaining claims must be
            rejected after the award
    """

    kind: DirectiveKind
    outcome: Outcome
    operative_clause: str
    guidance: list[str] = field(default_factory=list)
    required_phrases: tuple[str, ...] = ()
    amount: Optional[float] = None
    requires_remainder_rejection: bool = False

    @property
    def forbids_money(self) -> bool:
        """Check if the ruling must not carry any monetary figure."""
        return self.kind != DirectiveKind.GRANT_WITH_COMPENSATION

    def render(self) -> str:
        """Render as the binding block of the drafting prompt."""
        lines = [f"قيد ملزم: {self.outcome.value}."]
        lines.extend(f"- {line}" for line in self.guidance)
        lines.append("صيغة المنطوق المطلوبة:")
        lines.append(self.operative_clause)
        return "\n".join(lines)


def build_outcome_directive(decision: DecisionRecord) -> OutcomeDirective:
    """
    Translate a decision into its binding operative directive.

    Branches are checked in order: incompetence, inadmissibility, denial,
    grant with compensation, grant without compensation.
    """
    reasons = "، ".join(decision.reasoning)

    if not decision.jurisdiction_competent:
        return OutcomeDirective(
            kind=DirectiveKind.INCOMPETENT,
            outcome=decision.outcome,
            operative_clause=f"{RULING_LEAD_IN} بما يلي:\nأولاً: عدم اختصاص الدائرة ولائياً بنظر الدعوى.",
            guidance=[f"التسبيب: {reasons}.", "لا تحكم بأي تعويض أو طلبات موضوعية."],
            required_phrases=(RULING_LEAD_IN, "عدم اختصاص"),
        )

    if not decision.formally_admissible:
        cause = "، ".join(decision.procedural_notes) or "لفوات الميعاد أو انعدام الصفة"
        return OutcomeDirective(
            kind=DirectiveKind.INADMISSIBLE,
            outcome=decision.outcome,
            operative_clause=f"{RULING_LEAD_IN} بما يلي:\nأولاً: عدم قبول الدعوى.",
            guidance=[f"السبب: {cause}.", "لا تدخل في الموضوع."],
            required_phrases=(RULING_LEAD_IN, "عدم قبول الدعوى"),
        )

    if decision.outcome == Outcome.DENIAL:
        return OutcomeDirective(
            kind=DirectiveKind.DENIAL,
            outcome=decision.outcome,
            operative_clause=f"{RULING_LEAD_IN} بما يلي:\nأولاً: رفض الدعوى.",
            guidance=[f"التكييف: {decision.legal_characterization}.", f"الأسباب: {reasons}."],
            required_phrases=(RULING_LEAD_IN, "رفض الدعوى"),
        )

    remainder = bool(decision.rejected_claims) or decision.outcome == Outcome.PARTIAL_GRANT
    guidance = [
        f"التكييف: {decision.legal_characterization}.",
        f"الطلبات المقبولة: {'، '.join(decision.accepted_claims) or 'لا يوجد'}.",
        f"الطلبات المرفوضة: {'، '.join(decision.rejected_claims) or 'لا يوجد'}.",
        f"التسبيب: {reasons}.",
    ]

    if decision.compensation is not None:
        compensation = decision.compensation
        amount = format_arabic_amount(compensation.amount)
        clause = [
            f"{RULING_LEAD_IN} بما يلي:",
            f"أولاً: إلزام المدعى عليه بأن يدفع للمدعي مبلغاً وقدره ({amount}) ريال سعودي "
            f"تعويضاً عن {compensation.basis}.",
        ]
        if remainder:
            clause.append(f"ثانياً: {REMAINDER_REJECTION} من طلبات.")
        guidance.append(f"طريقة الاحتساب: {compensation.method or 'تقدير الدائرة'}.")
        return OutcomeDirective(
            kind=DirectiveKind.GRANT_WITH_COMPENSATION,
            outcome=decision.outcome,
            operative_clause="\n".join(clause),
            guidance=guidance,
            required_phrases=(RULING_LEAD_IN, "إلزام"),
            amount=compensation.amount,
            requires_remainder_rejection=remainder,
        )

    clause = [
        f"{RULING_LEAD_IN} بما يلي:",
        "أولاً: [الإجراء المحكوم به محدداً تحديداً نافياً للجهالة دون الحكم بتعويض].",
    ]
    if remainder:
        clause.append(f"ثانياً: {REMAINDER_REJECTION} من طلبات.")
    guidance.append("لا تحكم بأي مبلغ مالي أو تعويض.")
    return OutcomeDirective(
        kind=DirectiveKind.GRANT,
        outcome=decision.outcome,
        operative_clause="\n".join(clause),
        guidance=guidance,
        required_phrases=(RULING_LEAD_IN,) + ((REMAINDER_REJECTION,) if remainder else ()),
        requires_remainder_rejection=remainder,
    )


def build_drafting_prompt(
    directive: OutcomeDirective,
    digest: str,
    judgment_meta: JudgmentMeta,
    detail_level: str = "متوسط",
    failing_text: Optional[str] = None,
    errors: Optional[list[str]] = None,
) -> str:
    """
    Build the drafting request.

    Args:
        directive: Binding outcome directive
        digest: Case digest
        judgment_meta: Fixed bench data
        detail_level: Requested level of detail
        failing_text: Text to correct (repair or correction mode)
        errors: Violated rules of the failing text

    Returns:
        Prompt text
    """
    parts = [
        STRICT_RULES,
        "[المرجع الأسلوبي الملزم]\nحاكِ هذا النص في الترتيب والنبرة فقط، وليس المحتوى:\n"
        f"--- بداية النص المرجعي ---\n{GOLDEN_JUDGMENT_TEXT}\n--- نهاية النص المرجعي ---",
        "بيانات ثابتة للحكم الجديد:\n"
        f"- المحكمة: {judgment_meta.court_name} {judgment_meta.court_city}\n"
        f"- الدائرة: {judgment_meta.circuit_name}\n"
        f"- القاضي: فضيلة الشيخ/ {judgment_meta.judge_name}\n"
        f"- أمين السر: {judgment_meta.clerk_name}",
        f"مستوى التفصيل: {detail_level}",
        directive.render(),
    ]

    if failing_text is None:
        parts.append("أصدر صك حكم جديد من الصفر، ملتزماً بالقيد الملزم.")
    else:
        parts.append("قم بتصحيح الحكم الحالي ليطابق الأسلوب المرجعي والقيد الملزم.")
    if errors:
        parts.append(f"تم رفض النسخة السابقة بسبب الأخطاء التالية، ويجب إصلاحها: {'، '.join(errors)}")

    parts.append(f"مادة القضية الحالية:\n{digest}")
    if failing_text is not None:
        parts.append(f"[النص المراد تصحيحه]\n{failing_text}")
    parts.append("اكتب الصك الآن.")

    return "\n\n".join(parts)
