"""Speaker resolution.

Picks the next turn owner from the current phase and the previous
speaker. Resolution is a pure branch over its inputs so that a restored
session resolves exactly as the live one did.
"""

from typing import Optional

from ..models.case import CaseContext
from ..models.roles import RESPONDENT_LED_PHASES, Phase, Role, UserSide


def user_leads(phase: Phase, context: CaseContext) -> bool:
    """Check if the user's side addresses the court first in a default phase."""
    claimant_leads = phase not in RESPONDENT_LED_PHASES
    return claimant_leads == (context.user_side == UserSide.CLAIMANT)


def _default_rotation(phase: Phase, last: Role, context: CaseContext) -> Role:
    opponent = context.opponent_role

    if user_leads(phase, context):
        # JUDGE -> USER -> USER_ADVISOR -> OPPONENT -> JUDGE
        if last == Role.JUDGE:
            return Role.USER
        if last == Role.USER:
            return Role.USER_ADVISOR
        if last == Role.USER_ADVISOR:
            return opponent
        return Role.JUDGE

    # JUDGE -> OPPONENT -> USER -> USER_ADVISOR -> JUDGE
    if last == Role.JUDGE:
        return opponent
    if last == opponent:
        return Role.USER
    if last == Role.USER:
        return Role.USER_ADVISOR
    return Role.JUDGE


def _evidence_review(last: Role, context: CaseContext) -> Role:
    if last == Role.JUDGE:
        return Role.EXPERT if context.experts_enabled else Role.USER
    if last == Role.EXPERT:
        return Role.USER
    if last == Role.USER:
        return Role.USER_ADVISOR
    if last == Role.USER_ADVISOR:
        return context.opponent_role
    return Role.JUDGE


def _witness_examination(last: Role, context: CaseContext) -> Role:
    # Judge calls the witness, witness answers, both sides question, judge closes
    if last == Role.JUDGE:
        return Role.WITNESS
    if last == Role.WITNESS:
        return Role.USER
    if last == Role.USER:
        return context.opponent_role
    return Role.JUDGE


def _expert_report(last: Role, context: CaseContext) -> Role:
    if last == Role.JUDGE:
        return Role.EXPERT
    if last == Role.EXPERT:
        return Role.USER_ADVISOR
    if last == Role.USER_ADVISOR:
        return context.opponent_role
    return Role.JUDGE


def resolve_next_speaker(
    phase: Phase,
    last_speaker: Optional[Role],
    context: CaseContext,
) -> Optional[Role]:
    """
    Resolve who speaks next.

    Args:
        phase: Current phase
        last_speaker: Role of the immediately preceding speaker, if any
        context: Case context (user side, opponent type, expert track)

    Returns:
        Next role to speak, or None once the session is closed
    """
    if phase == Phase.CLOSED:
        return None

    # Session just opened, or the previous turn is not part of any rotation
    if last_speaker is None or last_speaker in (Role.SYSTEM, Role.CLERK):
        return Role.JUDGE

    if phase == Phase.EVIDENCE_REVIEW:
        return _evidence_review(last_speaker, context)

    if phase == Phase.WITNESS_EXAMINATION:
        return _witness_examination(last_speaker, context)

    if phase == Phase.EXPERT_REPORT and context.experts_enabled:
        return _expert_report(last_speaker, context)

    return _default_rotation(phase, last_speaker, context)
