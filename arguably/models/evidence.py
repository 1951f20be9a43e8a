"""Evidence ORM — one claim submitted by one participant within one debate.

Invariants:
    - status is one of the five EvidenceStatus values (CHECK constraint mirrors the enum)
    - Never deleted: evidence is permanent debate history
    - AI fields are nullable; absence means "not rated (yet)"
    - source_reasoning is an ordered list of strings (JSON array), never a packed string

Design Decisions:
    - Status changes only through compare-and-swap UPDATEs (services/evidence_workflow.py)
    - Challenges loaded eagerly (selectin): the timeline view always renders them
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import (
    String, Text, Integer, Boolean, DateTime, ForeignKey, JSON, CheckConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.dialects.postgresql import UUID

from arguably.core.domain_types import EvidenceStatus
from arguably.db.base import Base

_STATUS_VALUES = ", ".join(f"'{s.value}'" for s in EvidenceStatus)


class Evidence(Base):
    """Evidence entity — a claim, optionally backed by a rated source."""
    __tablename__ = "evidence"
    __table_args__ = (
        CheckConstraint(f"status IN ({_STATUS_VALUES})", name="ck_evidence_status"),
        CheckConstraint(
            "source_rating IS NULL OR (source_rating BETWEEN 1 AND 5)",
            name="ck_evidence_source_rating",
        ),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    debate_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("debates.id", ondelete="CASCADE"),
        nullable=False, index=True,
    )
    participant_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("profiles.id"), nullable=False,
    )
    claim: Mapped[str] = mapped_column(Text, nullable=False)
    source_url: Mapped[str | None] = mapped_column(String(2000), nullable=True)
    source_type: Mapped[str | None] = mapped_column(String(20), nullable=True)
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=EvidenceStatus.PENDING.value,
    )

    # AI rating fields
    source_rating: Mapped[int | None] = mapped_column(Integer, nullable=True)
    source_confidence: Mapped[str | None] = mapped_column(String(10), nullable=True)
    source_reasoning: Mapped[list | None] = mapped_column(JSON, nullable=True)
    source_warning: Mapped[str | None] = mapped_column(Text, nullable=True)
    claim_evaluation: Mapped[str | None] = mapped_column(String(20), nullable=True)
    suggested_correction: Mapped[str | None] = mapped_column(Text, nullable=True)
    quote_example: Mapped[str | None] = mapped_column(Text, nullable=True)
    content_analyzed: Mapped[bool | None] = mapped_column(Boolean, nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    # Relationships
    debate: Mapped["Debate"] = relationship("Debate", back_populates="evidence")
    challenges: Mapped[list["Challenge"]] = relationship(
        "Challenge", back_populates="evidence",
        order_by="Challenge.created_at", lazy="selectin",
    )
