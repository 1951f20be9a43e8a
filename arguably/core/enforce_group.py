"""Group Discussion Rules — membership, the respond-before-resubmit gate, responses.

Invariants:
    - All functions are PURE: no IO, no async, no DB, no side effects
    - Return error dict on violation, None on success
    - Only members act inside a discussion; only the creator closes it
    - A member's first submission is free; every later one requires a response
      to every other member's evidence
    - Members never respond to their own evidence, and respond at most once per item

Design Decisions:
    - Pending responses computed from (evidence id -> author) plus the actor's
      answered ids, so the gate compares identities rather than counts
"""

from dataclasses import dataclass
from uuid import UUID

from arguably.core.domain_types import GroupDiscussionStatus


@dataclass(frozen=True)
class GroupSnapshot:
    id: UUID
    created_by: UUID
    status: GroupDiscussionStatus = GroupDiscussionStatus.ACTIVE


@dataclass(frozen=True)
class MemberSnapshot:
    user_id: UUID
    has_submitted_evidence: bool = False


# --- Individual checks ----------------------------------------------------------

def check_group_open(group: GroupSnapshot) -> dict | None:
    if group.status != GroupDiscussionStatus.ACTIVE:
        return _error("DISCUSSION_CLOSED", "This discussion is closed.")
    return None


def check_member(member: MemberSnapshot | None) -> dict | None:
    if member is None:
        return _error(
            "NOT_PARTICIPANT", "Join the discussion before taking part in it.",
        )
    return None


def pending_responses(
    actor_id: UUID,
    evidence_authors: dict[UUID, UUID],
    answered: set[UUID],
) -> list[UUID]:
    """Other members' evidence ids the actor has not answered yet."""
    return [
        evidence_id for evidence_id, author in evidence_authors.items()
        if author != actor_id and evidence_id not in answered
    ]


def check_submission_gate(member: MemberSnapshot, pending: list[UUID]) -> dict | None:
    if member.has_submitted_evidence and pending:
        return _error(
            "RESPOND_FIRST",
            f"Respond to all other evidence first ({len(pending)} remaining).",
        )
    return None


# --- Composite validators ----------------------------------------------------------

def validate_group_submission(
    group: GroupSnapshot, member: MemberSnapshot | None, pending: list[UUID],
) -> dict | None:
    return (
        check_member(member)
        or check_group_open(group)
        or check_submission_gate(member, pending)
    )


def validate_group_response(
    group: GroupSnapshot,
    member: MemberSnapshot | None,
    evidence_author: UUID,
    already_responded: bool,
) -> dict | None:
    error = check_member(member) or check_group_open(group)
    if error:
        return error
    if evidence_author == member.user_id:
        return _error("OWN_EVIDENCE", "You cannot respond to your own evidence.")
    if already_responded:
        return _error("ALREADY_RESPONDED", "You already responded to this evidence.")
    return None


def validate_join(group: GroupSnapshot, member: MemberSnapshot | None) -> dict | None:
    error = check_group_open(group)
    if error:
        return error
    if member is not None:
        return _error("ALREADY_JOINED", "You already joined this discussion.")
    return None


def can_submit(
    group: GroupSnapshot, member: MemberSnapshot | None, pending: list[UUID],
) -> bool:
    return validate_group_submission(group, member, pending) is None


# --- Helper -------------------------------------------------------------------

def _error(code: str, message: str) -> dict:
    """Construct a standard error dict."""
    return {
        "status": "error",
        "error_code": code,
        "message": message,
    }
