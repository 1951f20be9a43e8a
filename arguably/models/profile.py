"""Profile ORM — a user identity, created at sign-up and mutated only by its owner.

Invariants:
    - id equals the externally authenticated user id (no server default)
    - username unique case-insensitively (functional index on lower(username)),
      3-30 chars (length enforced at the schema boundary)
    - beliefs is an ordered list of "#tag" strings

Design Decisions:
    - JSON column for beliefs: small ordered list, always read whole
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import String, Text, DateTime, JSON, Index, func
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.dialects.postgresql import UUID

from arguably.db.base import Base


class Profile(Base):
    __tablename__ = "profiles"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True,
    )
    username: Mapped[str] = mapped_column(
        String(30), nullable=False,
    )
    avatar_url: Mapped[str | None] = mapped_column(String(2000), nullable=True)
    political_view: Mapped[str | None] = mapped_column(String(100), nullable=True)
    religion: Mapped[str | None] = mapped_column(String(100), nullable=True)
    university_degree: Mapped[str | None] = mapped_column(String(200), nullable=True)
    beliefs: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    phone_number: Mapped[str | None] = mapped_column(String(32), nullable=True)
    about_me: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )


Index("uq_profiles_username_lower", func.lower(Profile.username), unique=True)
