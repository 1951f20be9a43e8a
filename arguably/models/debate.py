"""Debate ORM — the 1v1 container holding two participants, a topic and their scores.

Invariants:
    - participant1_id != participant2_id (CHECK constraint)
    - status is one of: active, completed (CHECK constraint)
    - Scores only ever grow, via atomic `score = score + points` updates
    - Soft delete only: deleted_at/deleted_by set, row never removed, scores preserved

Design Decisions:
    - Two score columns instead of a scores table: exactly two participants, and the
      increment lands in the same UPDATE as nothing else (no read-modify-write)
    - Evidence relationship ordered by created_at: the timeline is read oldest-first
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import (
    String, Text, Integer, DateTime, ForeignKey, CheckConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.dialects.postgresql import UUID

from arguably.db.base import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Debate(Base):
    """Debate aggregate root — owns its evidence timeline."""
    __tablename__ = "debates"
    __table_args__ = (
        CheckConstraint(
            "participant1_id <> participant2_id",
            name="ck_debates_distinct_participants",
        ),
        CheckConstraint(
            "status IN ('active', 'completed')", name="ck_debates_status",
        ),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    topic: Mapped[str] = mapped_column(Text, nullable=False)
    participant1_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("profiles.id"), nullable=False, index=True,
    )
    participant2_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("profiles.id"), nullable=False, index=True,
    )
    participant1_score: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0,
    )
    participant2_score: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0,
    )
    # bumped by compare-and-swap on every submission; serializes the turn check
    evidence_count: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0,
    )
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default="active",
    )
    timer_expires_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True,
    )
    deleted_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True,
    )
    deleted_by: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True), ForeignKey("profiles.id"), nullable=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow,
    )

    # Relationships
    evidence: Mapped[list["Evidence"]] = relationship(
        "Evidence", back_populates="debate",
        order_by="Evidence.created_at", lazy="selectin",
    )
