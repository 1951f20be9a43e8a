"""Group Discussion Routes — topic discussions with many members.

Invariants:
    - Mutations commit before the response; source rating of group evidence runs
      afterwards as a background task
    - Detail views are computed for the acting user (stance, can_submit, pending)
"""

from uuid import UUID

from fastapi import APIRouter, BackgroundTasks, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from arguably.api.deps import get_actor_id, get_source_rater
from arguably.infrastructure.database import get_db
from arguably.models.group_discussion import GroupEvidence
from arguably.schemas.evidence import EvidenceCreate
from arguably.schemas.group import (
    GroupDiscussionCreate,
    GroupDiscussionDetail,
    GroupDiscussionResponse,
    GroupEvidenceResponse,
    GroupJoin,
    GroupMemberResponse,
    GroupRespondResponse,
    GroupResponseCreate,
    GroupSubmissionResponse,
)
from arguably.services import group_discussions
from arguably.services.group_discussions import GroupView
from arguably.services.rating_jobs import rate_group_evidence_in_background
from arguably.services.source_rater import SourceRater

router = APIRouter(prefix="/api/v1/group-discussions", tags=["group-discussions"])


def _evidence_view(evidence: GroupEvidence, actor_id: UUID) -> GroupEvidenceResponse:
    view = GroupEvidenceResponse.model_validate(evidence)
    types = [r.response_type for r in evidence.responses]
    return view.model_copy(update={
        "agree_count": types.count("agree"),
        "disagree_count": types.count("disagree"),
        "responded": any(r.respondent_id == actor_id for r in evidence.responses),
    })


def _detail(view: GroupView, actor_id: UUID) -> GroupDiscussionDetail:
    discussion = view.discussion
    return GroupDiscussionDetail(
        **GroupDiscussionResponse.model_validate(discussion).model_dump(),
        topic_title=discussion.topic.title,
        topic_question=discussion.topic.question,
        members=[
            GroupMemberResponse(
                user_id=m.user_id,
                username=m.profile.username,
                stance=m.stance,
                score=m.score,
                has_submitted_evidence=m.has_submitted_evidence,
                joined_at=m.joined_at,
            )
            for m in discussion.members
        ],
        evidence=[_evidence_view(e, actor_id) for e in discussion.evidence],
        my_stance=view.member.stance if view.member else None,
        can_submit=view.can_submit,
        pending_responses=len(view.pending),
    )


@router.post(
    "", response_model=GroupDiscussionDetail, status_code=status.HTTP_201_CREATED,
)
async def create_discussion(
    body: GroupDiscussionCreate,
    actor_id: UUID = Depends(get_actor_id),
    db: AsyncSession = Depends(get_db),
):
    view = await group_discussions.create_discussion(db, actor_id, body)
    return _detail(view, actor_id)


@router.get("", response_model=list[GroupDiscussionResponse])
async def list_discussions(
    topic_id: UUID | None = Query(None),
    db: AsyncSession = Depends(get_db),
):
    return await group_discussions.list_discussions(db, topic_id)


@router.get("/{discussion_id}", response_model=GroupDiscussionDetail)
async def get_discussion(
    discussion_id: UUID,
    actor_id: UUID = Depends(get_actor_id),
    db: AsyncSession = Depends(get_db),
):
    view = await group_discussions.get_discussion_view(db, discussion_id, actor_id)
    return _detail(view, actor_id)


@router.post(
    "/{discussion_id}/members", response_model=GroupDiscussionDetail,
    status_code=status.HTTP_201_CREATED,
)
async def join_discussion(
    discussion_id: UUID,
    body: GroupJoin,
    actor_id: UUID = Depends(get_actor_id),
    db: AsyncSession = Depends(get_db),
):
    view = await group_discussions.join_discussion(db, discussion_id, actor_id, body)
    return _detail(view, actor_id)


@router.post(
    "/{discussion_id}/evidence", response_model=GroupSubmissionResponse,
    status_code=status.HTTP_201_CREATED,
)
async def submit_evidence(
    discussion_id: UUID,
    body: EvidenceCreate,
    background_tasks: BackgroundTasks,
    actor_id: UUID = Depends(get_actor_id),
    db: AsyncSession = Depends(get_db),
    rater: SourceRater = Depends(get_source_rater),
):
    submission = await group_discussions.submit_group_evidence(
        db, discussion_id, actor_id, body,
    )
    if submission.rating_scheduled:
        background_tasks.add_task(
            rate_group_evidence_in_background, submission.evidence.id, rater,
        )
    return GroupSubmissionResponse(
        evidence=_evidence_view(submission.evidence, actor_id),
        rating_scheduled=submission.rating_scheduled,
    )


@router.post(
    "/evidence/{evidence_id}/responses", response_model=GroupRespondResponse,
    status_code=status.HTTP_201_CREATED,
)
async def respond(
    evidence_id: UUID,
    body: GroupResponseCreate,
    actor_id: UUID = Depends(get_actor_id),
    db: AsyncSession = Depends(get_db),
):
    outcome = await group_discussions.respond_to_evidence(db, evidence_id, actor_id, body)
    return GroupRespondResponse(
        evidence_id=outcome.evidence_id,
        response_type=outcome.response_type.value,
        author_score=outcome.author_score,
    )


@router.post("/{discussion_id}/close", response_model=GroupDiscussionResponse)
async def close_discussion(
    discussion_id: UUID,
    actor_id: UUID = Depends(get_actor_id),
    db: AsyncSession = Depends(get_db),
):
    return await group_discussions.close_discussion(db, discussion_id, actor_id)
