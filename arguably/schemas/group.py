"""Group Discussion Schemas — creation, membership, group evidence and responses.

Invariants:
    - Group evidence submissions reuse EvidenceCreate (same claim/url rules)
    - Detail views carry the actor's view: stance, can_submit, pending responses
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict

from arguably.core.domain_types import GroupResponseType, GroupStance


class GroupDiscussionCreate(BaseModel):
    topic_id: UUID
    stance: GroupStance


class GroupJoin(BaseModel):
    stance: GroupStance


class GroupResponseCreate(BaseModel):
    response_type: GroupResponseType


class GroupDiscussionResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    topic_id: UUID
    created_by: UUID
    status: str
    created_at: datetime
    updated_at: datetime


class GroupMemberResponse(BaseModel):
    user_id: UUID
    username: str
    stance: str
    score: int
    has_submitted_evidence: bool
    joined_at: datetime


class GroupEvidenceResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    discussion_id: UUID
    user_id: UUID
    claim: str
    source_url: str | None = None
    source_type: str | None = None
    source_rating: int | None = None
    source_confidence: str | None = None
    source_reasoning: list[str] | None = None
    source_warning: str | None = None
    created_at: datetime
    agree_count: int = 0
    disagree_count: int = 0
    responded: bool = False


class GroupDiscussionDetail(GroupDiscussionResponse):
    topic_title: str
    topic_question: str
    members: list[GroupMemberResponse]
    evidence: list[GroupEvidenceResponse]
    my_stance: str | None = None
    can_submit: bool = False
    pending_responses: int = 0


class GroupSubmissionResponse(BaseModel):
    evidence: GroupEvidenceResponse
    rating_scheduled: bool


class GroupRespondResponse(BaseModel):
    evidence_id: UUID
    response_type: str
    author_score: int
