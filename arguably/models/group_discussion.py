"""Group Discussion ORM — many-member discussions of one weekly topic.

Invariants:
    - A discussion belongs to one ControversialTopic; status is active | closed
    - At most one membership per (discussion, user); stance is agree | disagree
    - At most one response per (evidence, respondent); type is agree | disagree
    - A member's score only grows, one point per "agree" on their evidence
    - GroupEvidence AI fields are nullable; absence means "not rated (yet)"

Design Decisions:
    - Membership carries evidence_count as the compare-and-swap counter for
      submissions (has_submitted_evidence is kept for readers)
    - Members, evidence and responses loaded eagerly (selectin): the detail view
      always renders all of them
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import (
    String, Text, Integer, Boolean, DateTime, ForeignKey, JSON,
    CheckConstraint, UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.dialects.postgresql import UUID

from arguably.db.base import Base


def _now() -> datetime:
    return datetime.now(timezone.utc)


class GroupDiscussion(Base):
    __tablename__ = "group_discussions"
    __table_args__ = (
        CheckConstraint(
            "status IN ('active', 'closed')", name="ck_group_discussions_status",
        ),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    topic_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("controversial_topics.id"),
        nullable=False, index=True,
    )
    created_by: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("profiles.id"), nullable=False,
    )
    status: Mapped[str] = mapped_column(String(10), nullable=False, default="active")
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_now,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_now, onupdate=_now,
    )

    # Relationships
    topic: Mapped["ControversialTopic"] = relationship(
        "ControversialTopic", lazy="selectin",
    )
    members: Mapped[list["GroupDiscussionParticipant"]] = relationship(
        "GroupDiscussionParticipant", back_populates="discussion",
        order_by="GroupDiscussionParticipant.joined_at", lazy="selectin",
    )
    evidence: Mapped[list["GroupEvidence"]] = relationship(
        "GroupEvidence", back_populates="discussion",
        order_by="GroupEvidence.created_at", lazy="selectin",
    )


class GroupDiscussionParticipant(Base):
    __tablename__ = "group_discussion_participants"
    __table_args__ = (
        UniqueConstraint("discussion_id", "user_id", name="uq_group_participants_member"),
        CheckConstraint(
            "stance IN ('agree', 'disagree')", name="ck_group_participants_stance",
        ),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    discussion_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("group_discussions.id", ondelete="CASCADE"),
        nullable=False, index=True,
    )
    user_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("profiles.id"), nullable=False,
    )
    stance: Mapped[str] = mapped_column(String(10), nullable=False)
    score: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    has_submitted_evidence: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False,
    )
    evidence_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    joined_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_now,
    )

    discussion: Mapped["GroupDiscussion"] = relationship(
        "GroupDiscussion", back_populates="members",
    )
    profile: Mapped["Profile"] = relationship("Profile", lazy="selectin")


class GroupEvidence(Base):
    __tablename__ = "group_evidence"
    __table_args__ = (
        CheckConstraint(
            "source_rating IS NULL OR (source_rating BETWEEN 1 AND 5)",
            name="ck_group_evidence_source_rating",
        ),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    discussion_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("group_discussions.id", ondelete="CASCADE"),
        nullable=False, index=True,
    )
    user_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("profiles.id"), nullable=False,
    )
    claim: Mapped[str] = mapped_column(Text, nullable=False)
    source_url: Mapped[str | None] = mapped_column(String(2000), nullable=True)
    source_type: Mapped[str | None] = mapped_column(String(20), nullable=True)

    # AI rating fields
    source_rating: Mapped[int | None] = mapped_column(Integer, nullable=True)
    source_confidence: Mapped[str | None] = mapped_column(String(10), nullable=True)
    source_reasoning: Mapped[list | None] = mapped_column(JSON, nullable=True)
    source_warning: Mapped[str | None] = mapped_column(Text, nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_now,
    )

    discussion: Mapped["GroupDiscussion"] = relationship(
        "GroupDiscussion", back_populates="evidence",
    )
    responses: Mapped[list["GroupEvidenceResponse"]] = relationship(
        "GroupEvidenceResponse", order_by="GroupEvidenceResponse.created_at",
        lazy="selectin",
    )


class GroupEvidenceResponse(Base):
    __tablename__ = "group_evidence_responses"
    __table_args__ = (
        UniqueConstraint(
            "evidence_id", "respondent_id", name="uq_group_responses_respondent",
        ),
        CheckConstraint(
            "response_type IN ('agree', 'disagree')",
            name="ck_group_responses_type",
        ),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    evidence_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("group_evidence.id", ondelete="CASCADE"),
        nullable=False, index=True,
    )
    respondent_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("profiles.id"), nullable=False,
    )
    response_type: Mapped[str] = mapped_column(String(10), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_now,
    )
