"""Debate Schemas — debate creation, views, invitations and evaluations.

Invariants:
    - topic: 1-500 chars, stripped, non-empty
    - timer_minutes, when given, is 1-10080 (one week)
"""

from datetime import datetime, timezone
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator

from arguably.schemas.evidence import EvidenceResponse

MAX_TIMER_MINUTES = 7 * 24 * 60


def _clean_topic(v: str) -> str:
    v = v.strip()
    if not v:
        raise ValueError("topic cannot be empty or whitespace")
    return v


class DebateCreate(BaseModel):
    opponent_id: UUID
    topic: str = Field(min_length=1, max_length=500)
    timer_minutes: int | None = Field(None, ge=1, le=MAX_TIMER_MINUTES)

    @field_validator("topic")
    @classmethod
    def strip_topic(cls, v: str) -> str:
        return _clean_topic(v)


class DebateResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    topic: str
    participant1_id: UUID
    participant2_id: UUID
    participant1_score: int
    participant2_score: int
    evidence_count: int = 0
    status: str
    timer_expires_at: datetime | None = None
    deleted_at: datetime | None = None
    created_at: datetime
    updated_at: datetime

    @computed_field
    @property
    def expired(self) -> bool:
        if self.timer_expires_at is None:
            return False
        expires = self.timer_expires_at
        if expires.tzinfo is None:
            # SQLite drops tzinfo; stored values are always UTC
            expires = expires.replace(tzinfo=timezone.utc)
        return expires <= datetime.now(timezone.utc)


class DebateDetailResponse(DebateResponse):
    """Debate with its evidence timeline (oldest first)."""
    evidence: list[EvidenceResponse] = []
    can_submit: bool | None = None


class AdmitDefeatResponse(BaseModel):
    debate: DebateResponse
    winner_id: UUID
    points_awarded: int


class InvitationCreate(BaseModel):
    challenged_id: UUID
    topic: str = Field(min_length=1, max_length=500)
    post_id: UUID | None = None

    @field_validator("topic")
    @classmethod
    def strip_topic(cls, v: str) -> str:
        return _clean_topic(v)


class InvitationResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    challenger_id: UUID
    challenged_id: UUID
    topic: str
    post_id: UUID | None = None
    status: str
    debate_id: UUID | None = None
    created_at: datetime
    responded_at: datetime | None = None


class InvitationListResponse(BaseModel):
    incoming: list[InvitationResponse]
    outgoing: list[InvitationResponse]


class EvaluationResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    debate_id: UUID
    evaluation: str
    evidence_count: int
    created_at: datetime
