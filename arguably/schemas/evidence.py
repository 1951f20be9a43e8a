"""Evidence Schemas — submissions, transitions, counter-challenges and their views.

Invariants:
    - claim: 1-5000 chars, stripped, non-empty
    - source_url, when given, is an absolute http(s) URL
    - Transition responses echo the points awarded by that transition
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from arguably.core.domain_types import EvidenceAction, SourceType

MAX_CLAIM_CHARS = 5000


def _clean_claim(v: str) -> str:
    v = v.strip()
    if not v:
        raise ValueError("claim cannot be empty or whitespace")
    return v


def _clean_url(v: str | None) -> str | None:
    if v is None:
        return None
    v = v.strip()
    if not v:
        return None
    if not v.lower().startswith(("http://", "https://")):
        raise ValueError("source_url must start with http:// or https://")
    return v


class EvidenceCreate(BaseModel):
    claim: str = Field(min_length=1, max_length=MAX_CLAIM_CHARS)
    source_url: str | None = Field(None, max_length=2000)
    source_type: SourceType | None = None

    @field_validator("claim")
    @classmethod
    def strip_claim(cls, v: str) -> str:
        return _clean_claim(v)

    @field_validator("source_url")
    @classmethod
    def check_url(cls, v: str | None) -> str | None:
        return _clean_url(v)


class SourceSupply(BaseModel):
    """Submitter answers a source request."""
    source_url: str = Field(min_length=1, max_length=2000)
    source_type: SourceType = SourceType.FACTUAL

    @field_validator("source_url")
    @classmethod
    def check_url(cls, v: str) -> str:
        cleaned = _clean_url(v)
        if cleaned is None:
            raise ValueError("source_url is required")
        return cleaned


class ChallengeCreate(BaseModel):
    """Counter-evidence attached to a challenged item."""
    claim: str = Field(min_length=1, max_length=MAX_CLAIM_CHARS)
    source_url: str = Field(min_length=1, max_length=2000)
    source_type: SourceType

    @field_validator("claim")
    @classmethod
    def strip_claim(cls, v: str) -> str:
        return _clean_claim(v)

    @field_validator("source_url")
    @classmethod
    def check_url(cls, v: str) -> str:
        cleaned = _clean_url(v)
        if cleaned is None:
            raise ValueError("source_url is required")
        return cleaned


class RerateRequest(BaseModel):
    """Optional extra context (e.g. a quote from the source) for a manual re-rate."""
    context: str | None = Field(None, max_length=2000)


class ChallengeResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    evidence_id: UUID
    participant_id: UUID
    claim: str
    source_url: str
    source_type: str
    created_at: datetime


class EvidenceResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    debate_id: UUID
    participant_id: UUID
    claim: str
    source_url: str | None = None
    source_type: str | None = None
    status: str
    source_rating: int | None = None
    source_confidence: str | None = None
    source_reasoning: list[str] | None = None
    source_warning: str | None = None
    claim_evaluation: str | None = None
    suggested_correction: str | None = None
    quote_example: str | None = None
    content_analyzed: bool | None = None
    created_at: datetime
    challenges: list[ChallengeResponse] = []
    allowed_actions: list[EvidenceAction] = []


class TransitionResponse(BaseModel):
    """Result of one evidence transition, with the debate's scores after it."""
    evidence: EvidenceResponse
    points_awarded: int
    participant1_score: int
    participant2_score: int
    rating_scheduled: bool = False


class RerateResponse(BaseModel):
    """rated=False means the collaborator failed; AI fields are left unchanged."""
    evidence: EvidenceResponse
    rated: bool
    warning: str | None = None
