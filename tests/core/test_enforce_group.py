"""Group discussion rules — membership, resubmission gate, responses."""

from uuid import uuid4

from arguably.core.domain_types import GroupDiscussionStatus
from arguably.core.enforce_group import (
    GroupSnapshot,
    MemberSnapshot,
    can_submit,
    pending_responses,
    validate_group_response,
    validate_group_submission,
    validate_join,
)

ALICE, BOB, CAROL = uuid4(), uuid4(), uuid4()
OPEN = GroupSnapshot(id=uuid4(), created_by=ALICE)
CLOSED = GroupSnapshot(id=OPEN.id, created_by=ALICE, status=GroupDiscussionStatus.CLOSED)


def _code(error):
    return error["error_code"] if error else None


def test_pending_lists_only_unanswered_evidence_of_others():
    e1, e2, e3 = uuid4(), uuid4(), uuid4()
    authors = {e1: ALICE, e2: BOB, e3: CAROL}
    assert pending_responses(ALICE, authors, answered={e2}) == [e3]
    assert pending_responses(ALICE, authors, answered={e2, e3}) == []


def test_first_submission_is_free_even_with_pending():
    member = MemberSnapshot(user_id=ALICE)
    assert validate_group_submission(OPEN, member, [uuid4()]) is None


def test_later_submission_requires_all_responses():
    member = MemberSnapshot(user_id=ALICE, has_submitted_evidence=True)
    assert _code(validate_group_submission(OPEN, member, [uuid4()])) == "RESPOND_FIRST"
    assert validate_group_submission(OPEN, member, []) is None


def test_non_member_cannot_submit():
    assert _code(validate_group_submission(OPEN, None, [])) == "NOT_PARTICIPANT"
    assert can_submit(OPEN, None, []) is False


def test_closed_discussion_rejects_everything():
    member = MemberSnapshot(user_id=BOB)
    assert _code(validate_group_submission(CLOSED, member, [])) == "DISCUSSION_CLOSED"
    assert _code(validate_group_response(CLOSED, member, ALICE, False)) == "DISCUSSION_CLOSED"
    assert _code(validate_join(CLOSED, None)) == "DISCUSSION_CLOSED"


def test_response_rules():
    member = MemberSnapshot(user_id=BOB)
    assert validate_group_response(OPEN, member, ALICE, False) is None
    assert _code(validate_group_response(OPEN, member, BOB, False)) == "OWN_EVIDENCE"
    assert _code(validate_group_response(OPEN, member, ALICE, True)) == "ALREADY_RESPONDED"
    assert _code(validate_group_response(OPEN, None, ALICE, False)) == "NOT_PARTICIPANT"


def test_join_once():
    assert validate_join(OPEN, None) is None
    assert _code(validate_join(OPEN, MemberSnapshot(user_id=BOB))) == "ALREADY_JOINED"
