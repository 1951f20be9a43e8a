"""Debate-Level Rules — creation, admission of defeat, removal, invitations.

Invariants:
    - All functions are PURE: no IO, no async, no DB, no side effects
    - Return error dict on violation, None on success
    - A debate always has two distinct participants
    - Admitting defeat: active -> completed, opponent gets ADMIT_DEFEAT_BONUS,
      independent of evidence states
    - Invitations move pending -> accepted | declined exactly once

Design Decisions:
    - Separated from enforce_evidence: evidence checks guard single items,
      debate checks guard the container and its invitations
"""

from dataclasses import dataclass
from uuid import UUID

from arguably.core.domain_types import DebateStatus, InvitationStatus
from arguably.core.enforce_evidence import DebateSnapshot, check_participant
from arguably.core.scoring import ADMIT_DEFEAT_BONUS


@dataclass(frozen=True)
class DefeatPlan:
    winner_id: UUID
    winner_slot: int
    points: int


# --- Creation -----------------------------------------------------------------

def validate_new_debate(initiator_id: UUID, opponent_id: UUID) -> dict | None:
    """Both participants must differ (existence is checked by the shell)."""
    if initiator_id == opponent_id:
        return _error("SELF_DEBATE", "You cannot start a debate with yourself.")
    return None


# --- Admission of defeat --------------------------------------------------------

def validate_admit_defeat(debate: DebateSnapshot, actor_id: UUID) -> dict | None:
    error = check_participant(debate, actor_id)
    if error:
        return error
    if debate.deleted:
        return _error("DEBATE_CLOSED", "This debate has been removed.")
    if debate.status != DebateStatus.ACTIVE:
        return _error("DEBATE_CLOSED", "This debate is already completed.")
    return None


def plan_admit_defeat(debate: DebateSnapshot, actor_id: UUID) -> DefeatPlan:
    """The non-admitting participant receives the flat bonus."""
    winner_id = debate.opponent_of(actor_id)
    return DefeatPlan(
        winner_id=winner_id,
        winner_slot=debate.slot_of(winner_id),
        points=ADMIT_DEFEAT_BONUS,
    )


# --- Soft delete --------------------------------------------------------------

def validate_soft_delete(debate: DebateSnapshot, actor_id: UUID) -> dict | None:
    error = check_participant(debate, actor_id)
    if error:
        return error
    if debate.deleted:
        return _error("ALREADY_DELETED", "This debate was already removed.")
    return None


# --- Invitations (DebateChallenge) ----------------------------------------------

def validate_invitation(challenger_id: UUID, challenged_id: UUID) -> dict | None:
    if challenger_id == challenged_id:
        return _error("SELF_CHALLENGE", "You cannot challenge yourself to a debate.")
    return None


def validate_invitation_response(
    challenged_id: UUID, status: InvitationStatus, actor_id: UUID,
) -> dict | None:
    """Only the invited user may answer, and only once."""
    if actor_id != challenged_id:
        return _error(
            "NOT_PARTICIPANT", "Only the challenged user can respond to this invitation.",
        )
    if status != InvitationStatus.PENDING:
        return _error(
            "INVITATION_CLOSED", f"This invitation was already {status.value}.",
        )
    return None


# --- Helper -------------------------------------------------------------------

def _error(code: str, message: str) -> dict:
    """Construct a standard error dict."""
    return {
        "status": "error",
        "error_code": code,
        "message": message,
    }
