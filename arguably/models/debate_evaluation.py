"""DebateEvaluation ORM — persisted AI moderator summaries of a debate."""

import uuid
from datetime import datetime, timezone

from sqlalchemy import Text, Integer, DateTime, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.dialects.postgresql import UUID

from arguably.db.base import Base


class DebateEvaluation(Base):
    __tablename__ = "debate_evaluations"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    debate_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("debates.id", ondelete="CASCADE"),
        nullable=False, index=True,
    )
    evaluation: Mapped[str] = mapped_column(Text, nullable=False)
    # evidence items the moderator saw; lets clients tell stale summaries apart
    evidence_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
