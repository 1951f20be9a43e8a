"""Domain type tests — enum values match the stored strings."""

from arguably.core.domain_types import (
    EvidenceStatus, DebateStatus, TopicCategory, InvitationStatus, SourceType,
)


def test_evidence_status_has_exactly_five_members():
    assert {s.value for s in EvidenceStatus} == {
        "pending", "agreed", "challenged", "validated", "evidence_requested",
    }


def test_str_enum_compares_equal_to_db_string():
    assert EvidenceStatus.PENDING == "pending"
    assert DebateStatus("completed") is DebateStatus.COMPLETED


def test_topic_categories():
    assert [c.value for c in TopicCategory] == ["Politics", "Religion", "Finance"]


def test_invitation_and_source_type_values():
    assert InvitationStatus.DECLINED.value == "declined"
    assert SourceType("opinionated") is SourceType.OPINIONATED
