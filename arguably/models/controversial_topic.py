"""ControversialTopic ORM — the weekly AI-generated debate prompts.

Invariants:
    - One row per (week_start, category); week_start is always a Sunday
    - category is one of: Politics, Religion, Finance
"""

import uuid
from datetime import date, datetime, timezone

from sqlalchemy import (
    String, Text, Date, DateTime, UniqueConstraint, CheckConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.dialects.postgresql import UUID

from arguably.db.base import Base


class ControversialTopic(Base):
    __tablename__ = "controversial_topics"
    __table_args__ = (
        UniqueConstraint("week_start", "category", name="uq_topics_week_category"),
        CheckConstraint(
            "category IN ('Politics', 'Religion', 'Finance')",
            name="ck_topics_category",
        ),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    category: Mapped[str] = mapped_column(String(20), nullable=False)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    question: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    controversy: Mapped[str] = mapped_column(Text, nullable=False, default="")
    week_start: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
