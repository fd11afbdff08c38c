"""Role behaviour descriptors and turn instructions.

Every role maps to exactly one descriptor; adding a role to ``Role``
without a descriptor here fails at import time.
"""

from dataclasses import dataclass
from typing import Any, Optional, Sequence

from ..models.case import CaseContext, Jurisdiction
from ..models.message import Message, MessageCategory
from ..models.roles import Phase, Role, UserSide


@dataclass(frozen=True)
class RoleProfile:
    """How a role speaks in the simulated session."""

    display_name: str
    instructions: str
    ai_controlled: bool = True


STRICT_ARABIC_INSTRUCTION = """تعليمات لغوية صارمة:
1. المخرجات باللغة العربية الفصحى حصراً.
2. يمنع استخدام أي جملة أو كلمة بحروف لاتينية.
3. المصطلحات القانونية يجب أن توافق الأنظمة السعودية."""

GLOBAL_SYSTEM_PROMPT = """أنت مشارك في محاكاة قضائية لجلسة مرافعة أمام محكمة سعودية.
التزم بدورك المحدد فقط، ولا تتحدث بلسان غيرك، ولا تكتب أسماء المتحدثين الآخرين.
كن موجزاً ومهنياً وبما يخدم سير الجلسة الإجرائي."""

ROLE_PROFILES: dict[Role, RoleProfile] = {
    Role.JUDGE: RoleProfile(
        display_name="الشيخ معاذ العريشي (رئيس الجلسة)",
        instructions="""أنت القاضي رئيس الدائرة. تدير الجلسة بحياد تام، وتوجه الأسئلة
للأطراف، وتضبط النظام، ولا تبدي رأياً في الموضوع قبل المداولة.""",
    ),
    Role.CLERK: RoleProfile(
        display_name="الشيخ حاوي الكيلاني (أمين السر)",
        instructions="أنت أمين السر. تدون محضر الجلسة بعبارات إجرائية موجزة ولا تناقش الموضوع.",
    ),
    Role.USER: RoleProfile(
        display_name="المستخدم",
        instructions="الطرف الذي يمثله المستخدم.",
        ai_controlled=False,
    ),
    Role.USER_ADVISOR: RoleProfile(
        display_name="المستشار البروفيسور اليوسفكو (وكيل)",
        instructions="""أنت الوكيل الشرعي للمستخدم. تدعم موقف موكلك بدفوع نظامية محكمة،
وتستند إلى الوقائع والمستندات، وتنبه إلى الدفوع الشكلية عند الحاجة.""",
    ),
    Role.OPPONENT_GOVERNMENT: RoleProfile(
        display_name="الممثل النظامي للجهة الحكومية",
        instructions="""أنت ممثل الجهة الحكومية. تدافع عن مشروعية قرارات الجهة، وتتمسك
بالنظام والإجراءات الشكلية ومواعيد التظلم، وتدفع بعدم الاختصاص إن وجد له وجه.""",
    ),
    Role.OPPONENT_PRIVATE: RoleProfile(
        display_name="المستشار أبو عواجي (محامي الخصم)",
        instructions="""أنت محامي الخصم. تدافع عن موكلك بقوة، وتفند أدلة الطرف الآخر،
وتطالب بإثبات كل واقعة يدعيها.""",
    ),
    Role.WITNESS: RoleProfile(
        display_name="الشاهد",
        instructions="""أنت شاهد في القضية. أجب على الأسئلة بصدق واختصار شديد، ولا تتبرع
بمعلومات لم تسأل عنها. تحدث كشخص عادي وليس كقانوني.""",
    ),
    Role.EXPERT: RoleProfile(
        display_name="الخبير الفني المختص",
        instructions="قدم رأيك الفني بموضوعية وحياد ومصطلحات مهنية دقيقة.",
    ),
    Role.SYSTEM: RoleProfile(
        display_name="النظام",
        instructions="سجل إجرائي آلي.",
        ai_controlled=False,
    ),
}

if set(ROLE_PROFILES) != set(Role):
    raise RuntimeError(f"Roles without a profile: {set(Role) - set(ROLE_PROFILES)}")

EXPERT_PERSONAS = {
    "criminal": "أنت الخبير الجنائي. تحلل الأدلة المادية والتقارير الجنائية بدقة علمية.",
    "medical": "أنت الخبير الطبي. تقيم التقارير الطبية والأضرار الجسدية ونسبة العجز.",
    "general": "أنت الخبير الفني المنتدب. تحلل المستندات الفنية والمحاسبية وتقدر الأضرار.",
}


def expert_persona(context: CaseContext) -> str:
    """Pick the expert persona that fits the case type."""
    if context.jurisdiction == Jurisdiction.CRIMINAL or "جزائية" in context.case_type:
        return EXPERT_PERSONAS["criminal"]
    if "طب" in context.case_type:
        return EXPERT_PERSONAS["medical"]
    return EXPERT_PERSONAS["general"]


def display_name(role: Role, context: Optional[CaseContext] = None) -> str:
    """Display name of a role in the transcript."""
    if role == Role.USER and context is not None:
        party = context.plaintiff if context.user_side == UserSide.CLAIMANT else context.defendant
        if party.name:
            return party.name
    return ROLE_PROFILES[role].display_name


def build_system_prompt(role: Role, context: CaseContext) -> str:
    """Assemble the system-level instructions for a role."""
    parts = [GLOBAL_SYSTEM_PROMPT, ROLE_PROFILES[role].instructions]
    if role == Role.EXPERT:
        parts.append(expert_persona(context))
    parts.append(STRICT_ARABIC_INSTRUCTION)
    return "\n\n".join(parts)


def phase_instruction(phase: Phase, role: Role, context: CaseContext) -> str:
    """Phase-specific guidance for a turn, or an empty string."""
    if role == Role.JUDGE:
        if phase == Phase.SESSION_OPEN:
            return "افتتح الجلسة رسمياً وتحقق من حضور الأطراف وصفاتهم باختصار."
        if phase in (Phase.QUESTIONS_TO_CLAIMANT, Phase.QUESTIONS_TO_DEFENDANT):
            return "اطرح سؤالاً جوهرياً واحداً للاستيضاح."
        if phase == Phase.EVIDENCE_REVIEW:
            exhibits = "، ".join(context.evidence) or "لا توجد مستندات مرفقة"
            return f"""أنت الآن في مرحلة فحص الأدلة. الأدلة المتاحة في ملف القضية: [{exhibits}].
1. استعرض الأدلة واحداً تلو الآخر، وراجع سجل الحوار لتعرف ما نوقش منها.
2. قدم تعليقاً قضائياً أولياً على كل دليل جديد مع ذكر اسمه.
3. اطلب من الطرف المعني توضيح وجه الاستدلال بالدليل.
4. لا تنتقل للدليل التالي حتى يكتمل النقاش حول الدليل الحالي."""
        if phase == Phase.WITNESS_EXAMINATION:
            return "وجه سؤالاً مباشراً للشاهد للتحقق من واقعة معينة."
        if phase == Phase.EXPERT_REPORT:
            return "اطلب رأي الخبير الفني في نقطة محددة."
        if phase == Phase.DELIBERATION:
            return "لخص الموقف القضائي قبل الحكم دون إعلان النتيجة."
        if phase == Phase.JUDGMENT:
            return "انطق بمنطوق الحكم النهائي مبتدئاً بعبارة: حكمت الدائرة."
        return ""

    if role == Role.WITNESS and phase == Phase.WITNESS_EXAMINATION:
        return f"أجب على أسئلة القاضي أو الأطراف بناءً على سياق الوقائع: ({context.facts})."

    if role == Role.EXPERT and phase == Phase.EXPERT_REPORT:
        return f"قدم تقريرك الشفوي المختصر للمحكمة حول النقاط الفنية في القضية: ({context.facts})."

    if role.is_opponent or role == Role.USER_ADVISOR:
        return "قدم دفوعك المتعلقة بهذه المرحلة فقط دون استباق المراحل التالية."

    return ""


def build_turn_instruction(phase: Phase, role: Role, context: CaseContext) -> str:
    """Build the current-turn instruction sent after the history."""
    lines = [
        "[سياق الجلسة]",
        f"المحكمة: {context.court_name} | القضية: {context.display_title}",
        f"المدعي: {context.plaintiff.name} | المدعى عليه: {context.defendant.name}",
        f"المرحلة: {phase.label}",
        f"الوقائع: {context.facts}",
        f"الطلبات: {context.requests}",
    ]
    guidance = phase_instruction(phase, role, context)
    if guidance:
        lines.extend(["", guidance])
    lines.extend([
        "",
        f"أنت الآن تتحدث بلسان ({display_name(role)}). قم بالرد بمهنية وواقعية.",
    ])
    return "\n".join(lines)


def build_chat_history(messages: Sequence[Message]) -> list[dict[str, Any]]:
    """
    Convert the transcript into role-tagged chat messages.

    Generated turns become assistant messages; human and system turns
    become user messages. Image attachments are passed through untouched.
    """
    history = []
    for message in messages:
        content = f"{message.display_name or display_name(message.role)}: {message.content}"
        entry: dict[str, Any] = {
            "role": "assistant" if message.category == MessageCategory.GENERATED else "user",
        }
        if message.attachment:
            content += f" [مرفق مستند: {message.attachment.name}]"
            if message.attachment.is_image:
                entry["images"] = [message.attachment.data]
        entry["content"] = content
        history.append(entry)
    return history
