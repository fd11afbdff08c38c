"""Shared pytest fixtures for Moot Court tests."""

import json
from pathlib import Path
from unittest.mock import MagicMock

import pytest


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path: Path):
    """Fresh settings per test, with sessions stored under tmp_path."""
    from moot_court.config.settings import Settings, configure

    settings = Settings()
    settings.sessions_dir = tmp_path / "sessions"
    configure(settings)
    yield settings
    configure(None)


@pytest.fixture
def case_context():
    """A compensation claim against a government body, user as claimant."""
    from moot_court.models import CaseContext, CaseNature, Jurisdiction, Party, PartyType

    return CaseContext(
        title="دعوى تعويض عن تأخير صرف المستحقات",
        court_name="المحكمة الإدارية",
        jurisdiction=Jurisdiction.ADMINISTRATIVE,
        case_nature=CaseNature.COMPENSATION,
        case_type="إدارية",
        plaintiff=Party(name="شركة البناء الحديث", type=PartyType.ORGANIZATION),
        defendant=Party(name="وزارة النقل", type=PartyType.GOVERNMENT),
        facts="تعاقدت المدعية مع الوزارة لتنفيذ مشروع طريق، وتأخرت الوزارة في صرف المستخلص الختامي.",
        requests="إلزام المدعى عليها بصرف المستخلص الختامي والتعويض عن التأخير.",
        damage_date="2024-03-01",
        evidence=("العقد", "محضر الاستلام"),
    )


@pytest.fixture
def respondent_context(case_context):
    """Same case with the user defending against a private claimant."""
    from dataclasses import replace

    from moot_court.models import Party, PartyType, UserSide

    return replace(
        case_context,
        plaintiff=Party(name="مؤسسة النور", type=PartyType.ORGANIZATION),
        defendant=Party(name="شركة البناء الحديث", type=PartyType.ORGANIZATION),
        user_side=UserSide.RESPONDENT,
    )


@pytest.fixture
def expert_context(case_context):
    """Case with the expert track enabled."""
    from dataclasses import replace

    return replace(case_context, experts_enabled=True)


@pytest.fixture
def guard():
    from moot_court.session import StallGuard

    return StallGuard()


@pytest.fixture
def machine(case_context, guard):
    """A started session."""
    from moot_court.session import PhaseStateMachine

    machine = PhaseStateMachine(case_context, session_id="S-001", guard=guard)
    machine.start()
    return machine


@pytest.fixture
def ok_response():
    """Factory for successful generation responses."""
    from moot_court.llm import OllamaResponse

    return lambda text: OllamaResponse(text=text, model="test-model")


@pytest.fixture
def failed_response():
    """A failed generation response."""
    from moot_court.llm import OllamaResponse

    return OllamaResponse(text="", model="test-model", success=False, error="HTTP 500: boom")


@pytest.fixture
def mock_client(ok_response):
    """Mock text-generation client that answers every turn."""
    client = MagicMock()
    client.is_available.return_value = True
    client.chat.return_value = ok_response("نعم، أصحاب الفضيلة.")
    return client


@pytest.fixture
def grant_decision_wire() -> dict:
    """Partial grant with compensation, in the wire shape."""
    return {
        "jurisdiction": "مختصة",
        "admissibility": "مقبولة شكلاً",
        "outcome": "قبول جزئي",
        "acceptedClaims": ["صرف المستخلص الختامي"],
        "rejectedClaims": ["التعويض عن الأضرار المعنوية"],
        "legalCharacterization": "منازعة عقد إداري",
        "reliesOnExpert": False,
        "compensation": {
            "basis": "التأخير في صرف المستخلص",
            "amount": 500000,
            "currency": "SAR",
            "method": "تقدير الدائرة",
        },
        "reasoningBullets": ["ثبوت إنجاز الأعمال بمحضر الاستلام", "العقد شريعة المتعاقدين"],
    }


@pytest.fixture
def grant_decision(grant_decision_wire):
    from moot_court.models import DecisionRecord

    return DecisionRecord.from_wire(grant_decision_wire)


@pytest.fixture
def denial_decision():
    from moot_court.models import DecisionRecord, Outcome

    return DecisionRecord(
        jurisdiction_competent=True,
        formally_admissible=True,
        outcome=Outcome.DENIAL,
        legal_characterization="منازعة عقد إداري",
        reasoning=["عدم كفاية الأدلة"],
        rejected_claims=["جميع الطلبات"],
    )


@pytest.fixture
def judgment_text():
    """Factory for structurally complete judgments with a given ruling."""
    return lambda ruling: "\n".join([
        "بسم الله الرحمن الرحيم",
        "",
        "المملكة العربية السعودية",
        "ديوان المظالم",
        "المحكمة الإدارية بجازان",
        "",
        "(الوقائع)",
        "تتلخص وقائع هذه الدعوى في أن المدعية تعاقدت مع المدعى عليها لتنفيذ مشروع.",
        "",
        "(الأسباب)",
        "وحيث ثبت للدائرة إنجاز الأعمال بموجب محضر الاستلام النهائي.",
        "",
        "(منطوق الحكم)",
        ruling,
        "",
        "أمين السر: حاوي عبد الله كيلاني",
        "القاضي: معاذ علي العريشي",
    ])


@pytest.fixture
def grant_ruling() -> str:
    return "\n".join([
        "حكمت الدائرة بما يلي:",
        "أولاً: إلزام المدعى عليها بأن تدفع للمدعية مبلغاً وقدره (٥٠٠٬٠٠٠) ريال سعودي.",
        "ثانياً: رفض ما عدا ذلك من طلبات.",
    ])


@pytest.fixture
def denial_ruling() -> str:
    return "حكمت الدائرة بما يلي:\nأولاً: رفض الدعوى."


@pytest.fixture
def decision_json(grant_decision_wire) -> str:
    return json.dumps(grant_decision_wire, ensure_ascii=False)
