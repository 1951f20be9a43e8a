"""Debate-level rule tests — creation, defeat, removal, invitations."""

from uuid import uuid4

from arguably.core.domain_types import DebateStatus, InvitationStatus
from arguably.core.enforce_debate import (
    plan_admit_defeat,
    validate_admit_defeat,
    validate_invitation,
    validate_invitation_response,
    validate_new_debate,
    validate_soft_delete,
)
from arguably.core.enforce_evidence import DebateSnapshot

A = uuid4()
B = uuid4()


def _debate(**overrides) -> DebateSnapshot:
    fields = {"id": uuid4(), "participant1_id": A, "participant2_id": B}
    fields.update(overrides)
    return DebateSnapshot(**fields)


def test_self_debate_rejected():
    assert validate_new_debate(A, A)["error_code"] == "SELF_DEBATE"
    assert validate_new_debate(A, B) is None


def test_admit_defeat_awards_opponent():
    assert validate_admit_defeat(_debate(), B) is None
    plan = plan_admit_defeat(_debate(), B)
    assert plan.winner_id == A
    assert plan.winner_slot == 1
    assert plan.points == 15


def test_admit_defeat_by_outsider_rejected():
    assert validate_admit_defeat(_debate(), uuid4())["error_code"] == "NOT_PARTICIPANT"


def test_admit_defeat_twice_rejected():
    error = validate_admit_defeat(_debate(status=DebateStatus.COMPLETED), A)
    assert error["error_code"] == "DEBATE_CLOSED"


def test_soft_delete_rules():
    assert validate_soft_delete(_debate(), A) is None
    assert validate_soft_delete(_debate(deleted=True), A)["error_code"] == "ALREADY_DELETED"
    assert validate_soft_delete(_debate(), uuid4())["error_code"] == "NOT_PARTICIPANT"


def test_completed_debate_can_still_be_removed():
    assert validate_soft_delete(_debate(status=DebateStatus.COMPLETED), B) is None


def test_self_invitation_rejected():
    assert validate_invitation(A, A)["error_code"] == "SELF_CHALLENGE"
    assert validate_invitation(A, B) is None


def test_only_challenged_user_responds_once():
    assert validate_invitation_response(B, InvitationStatus.PENDING, B) is None
    error = validate_invitation_response(B, InvitationStatus.PENDING, A)
    assert error["error_code"] == "NOT_PARTICIPANT"
    error = validate_invitation_response(B, InvitationStatus.ACCEPTED, B)
    assert error["error_code"] == "INVITATION_CLOSED"
