"""Prompts for the decision engine."""

from ..models.decision import (
    ADMISSIBLE,
    DEFAULT_CURRENCY,
    INADMISSIBLE,
    JURISDICTION_COMPETENT,
    JURISDICTION_INCOMPETENT,
    REQUIRED_WIRE_FIELDS,
    Outcome,
)

DECISION_SYSTEM = """أنت "محرك القرار القضائي" لمحكمة ابتدائية بالمملكة العربية السعودية.
مهمتك إصدار قرار قضائي في صورة كائن واحد بصيغة جيسون فقط وفق الوقائع والمرافعات.
لا تكتب أي نص خارج الكائن. اللغة العربية الفصحى حصراً في جميع القيم النصية."""

DECISION_USER = """المدخلات (ملخص القضية):
{digest}

قيود صارمة:
1. الاختصاص: إذا كانت الدعوى مرفوعة ضد جهة حكومية أمام محكمة غير إدارية، أو العكس، فالقيمة "{incompetent}".
2. القبول الشكلي: إذا انقضت مدد التظلم (ستون يوماً في القرارات الإدارية) أو رفعت الدعوى من غير ذي صفة، فالقيمة "{inadmissible}".
3. الموضوع:
   - "{full}": إذا ثبت حق المدعي كاملاً.
   - "{partial}": إذا ثبت بعض الحق.
   - "{denial}": إذا عجز المدعي عن الإثبات.
4. التعويض:
   - إذا كانت النتيجة "{denial}" أو المحكمة "{incompetent}" أو الدعوى "{inadmissible}" فلا تعويض.
   - إذا كان القبول كلياً أو جزئياً وثبت الضرر فضع رقماً تقديرياً للتعويض.
5. أسباب الحكم إلزامية ولو في نقطة واحدة."""

DECISION_SCHEMA = {
    "type": "object",
    "properties": {
        "jurisdiction": {"type": "string", "enum": [JURISDICTION_COMPETENT, JURISDICTION_INCOMPETENT]},
        "admissibility": {"type": "string", "enum": [ADMISSIBLE, INADMISSIBLE]},
        "outcome": {"type": "string", "enum": [o.value for o in Outcome]},
        "acceptedClaims": {"type": "array", "items": {"type": "string"}},
        "rejectedClaims": {"type": "array", "items": {"type": "string"}},
        "legalCharacterization": {"type": "string"},
        "reliesOnExpert": {"type": "boolean"},
        "reasoningBullets": {"type": "array", "items": {"type": "string"}},
        "proceduralNotes": {"type": "array", "items": {"type": "string"}},
        "compensation": {
            "type": ["object", "null"],
            "properties": {
                "basis": {"type": "string"},
                "amount": {"type": "number"},
                "currency": {"type": "string", "enum": [DEFAULT_CURRENCY]},
                "method": {"type": "string"},
            },
        },
    },
    "required": list(REQUIRED_WIRE_FIELDS),
}


def build_decision_prompt(digest: str) -> str:
    """Fill the decision request with a case digest."""
    return DECISION_USER.format(
        digest=digest,
        incompetent=JURISDICTION_INCOMPETENT,
        inadmissible=INADMISSIBLE,
        full=Outcome.FULL_GRANT.value,
        partial=Outcome.PARTIAL_GRANT.value,
        denial=Outcome.DENIAL.value,
    )
