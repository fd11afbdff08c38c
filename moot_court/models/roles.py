"""Role and phase vocabulary for a simulated proceeding."""

from enum import Enum
from typing import Optional


class Role(str, Enum):
    """Participant role attributed to a turn."""

    JUDGE = "judge"
    CLERK = "clerk"
    USER = "user"  # The human participant
    USER_ADVISOR = "user_advisor"
    OPPONENT_GOVERNMENT = "opponent_government"
    OPPONENT_PRIVATE = "opponent_private"
    WITNESS = "witness"
    EXPERT = "expert"
    SYSTEM = "system"

    @property
    def is_opponent(self) -> bool:
        """Check if this role is one of the opposing counsel variants."""
        return self in (Role.OPPONENT_GOVERNMENT, Role.OPPONENT_PRIVATE)


class UserSide(str, Enum):
    """Which party the human participant represents."""

    CLAIMANT = "claimant"
    RESPONDENT = "respondent"


class PartyType(str, Enum):
    """Legal nature of a party."""

    INDIVIDUAL = "individual"
    ORGANIZATION = "organization"
    GOVERNMENT = "government"


class Phase(str, Enum):
    """Stage of the proceeding, declared in procedural order."""

    SESSION_OPEN = "session_open"
    PRELIMINARY_CHECKS = "preliminary_checks"
    CLAIM_PRESENTATION = "claim_presentation"
    QUESTIONS_TO_CLAIMANT = "questions_to_claimant"
    DEFENSE_RESPONSE = "defense_response"
    QUESTIONS_TO_DEFENDANT = "questions_to_defendant"
    EVIDENCE_REVIEW = "evidence_review"
    WITNESS_EXAMINATION = "witness_examination"
    EXPERT_REPORT = "expert_report"
    MOTIONS = "motions"
    FINAL_PLEADINGS = "final_pleadings"
    DELIBERATION = "deliberation"
    JUDGMENT = "judgment"
    CLOSED = "closed"

    @property
    def index(self) -> int:
        """Position in the fixed phase ordering."""
        return PHASE_ORDER.index(self)

    @property
    def label(self) -> str:
        """Arabic display label."""
        return PHASE_LABELS[self]

    @property
    def is_evidentiary(self) -> bool:
        """Phases that admit a third, non-adversarial participant."""
        return self in EVIDENTIARY_PHASES


PHASE_ORDER: tuple[Phase, ...] = tuple(Phase)

EVIDENTIARY_PHASES = frozenset({
    Phase.EVIDENCE_REVIEW,
    Phase.WITNESS_EXAMINATION,
    Phase.EXPERT_REPORT,
})

# Phases where the respondent side addresses the court first
RESPONDENT_LED_PHASES = frozenset({
    Phase.DEFENSE_RESPONSE,
    Phase.QUESTIONS_TO_DEFENDANT,
})

PHASE_LABELS: dict[Phase, str] = {
    Phase.SESSION_OPEN: "افتتاح الجلسة",
    Phase.PRELIMINARY_CHECKS: "التحقق الأولي",
    Phase.CLAIM_PRESENTATION: "تقديم الدعوى",
    Phase.QUESTIONS_TO_CLAIMANT: "سؤال المدعي",
    Phase.DEFENSE_RESPONSE: "جواب المدعى عليه",
    Phase.QUESTIONS_TO_DEFENDANT: "سؤال المدعى عليه",
    Phase.EVIDENCE_REVIEW: "فحص ومناقشة الأدلة",
    Phase.WITNESS_EXAMINATION: "سماع الشهود واستجوابهم",
    Phase.EXPERT_REPORT: "مناقشة تقرير الخبير",
    Phase.MOTIONS: "الطلبات العارضة",
    Phase.FINAL_PLEADINGS: "المرافعة الختامية",
    Phase.DELIBERATION: "المداولة",
    Phase.JUDGMENT: "النطق بالحكم",
    Phase.CLOSED: "انتهت الجلسة",
}


def next_phase(phase: Phase) -> Phase:
    """Return the fixed successor of a phase. CLOSED is absorbing."""
    if phase == Phase.CLOSED:
        return Phase.CLOSED
    return PHASE_ORDER[phase.index + 1]


def resolve_opponent_role(
    user_side: UserSide,
    plaintiff_type: PartyType,
    defendant_type: PartyType,
) -> Role:
    """
    Pick the concrete opposing-counsel role.

    The opponent is government-represented when the party opposite the
    user is a government party.
    """
    opposing_type = defendant_type if user_side == UserSide.CLAIMANT else plaintiff_type
    if opposing_type == PartyType.GOVERNMENT:
        return Role.OPPONENT_GOVERNMENT
    return Role.OPPONENT_PRIVATE


def parse_role(value: Optional[str]) -> Optional[Role]:
    """Parse a role tag, returning None for unknown or missing values."""
    if not value:
        return None
    try:
        return Role(value)
    except ValueError:
        return None
