"""Group Discussions — the imperative shell around core/enforce_group.py.

Invariants:
    - Every mutation: load rows -> pure validation -> one transaction -> commit
    - Submissions CAS on the member's evidence_count; a lost race raises
      ConcurrencyError and nothing is written
    - An "agree" response and the author's score increment commit together
    - Duplicate joins/responses that slip past validation hit the unique
      constraints and surface as ConflictError
    - AI rating is NOT performed here: callers schedule it after commit
"""

import logging
from dataclasses import dataclass
from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from arguably.core.domain_types import GroupDiscussionStatus, GroupResponseType
from arguably.core.enforce_group import (
    GroupSnapshot,
    MemberSnapshot,
    can_submit,
    check_group_open,
    pending_responses,
    validate_group_response,
    validate_group_submission,
    validate_join,
)
from arguably.core.errors import (
    ConcurrencyError,
    ConflictError,
    ErrorContext,
    PermissionDeniedError,
    ResourceNotFoundError,
    raise_for_rule,
)
from arguably.core.scoring import GROUP_AGREE_POINTS
from arguably.models.controversial_topic import ControversialTopic
from arguably.models.group_discussion import (
    GroupDiscussion,
    GroupDiscussionParticipant,
    GroupEvidence,
    GroupEvidenceResponse,
)
from arguably.schemas.evidence import EvidenceCreate
from arguably.schemas.group import GroupDiscussionCreate, GroupJoin, GroupResponseCreate
from arguably.services.records import load_profile

logger = logging.getLogger(__name__)


@dataclass
class GroupView:
    """A discussion as seen by one actor."""
    discussion: GroupDiscussion
    member: GroupDiscussionParticipant | None
    pending: list[UUID]
    can_submit: bool


@dataclass
class GroupSubmission:
    evidence: GroupEvidence
    rating_scheduled: bool


@dataclass
class GroupResponseOutcome:
    evidence_id: UUID
    response_type: GroupResponseType
    author_score: int


# --- Loading --------------------------------------------------------------------

async def load_discussion(
    db: AsyncSession, discussion_id: UUID, *, fresh: bool = False,
) -> GroupDiscussion:
    stmt = select(GroupDiscussion).where(GroupDiscussion.id == discussion_id)
    if fresh:
        stmt = stmt.execution_options(populate_existing=True)
    discussion = (await db.execute(stmt)).scalar_one_or_none()
    if discussion is None:
        raise ResourceNotFoundError("Group discussion", str(discussion_id))
    return discussion


async def load_group_evidence(
    db: AsyncSession, evidence_id: UUID, *, fresh: bool = False,
) -> GroupEvidence:
    stmt = select(GroupEvidence).where(GroupEvidence.id == evidence_id)
    if fresh:
        stmt = stmt.execution_options(populate_existing=True)
    evidence = (await db.execute(stmt)).scalar_one_or_none()
    if evidence is None:
        raise ResourceNotFoundError(
            "Group evidence", str(evidence_id), ErrorContext(evidence_id=str(evidence_id)),
        )
    return evidence


def group_snapshot(discussion: GroupDiscussion) -> GroupSnapshot:
    return GroupSnapshot(
        id=discussion.id,
        created_by=discussion.created_by,
        status=GroupDiscussionStatus(discussion.status),
    )


def member_of(
    discussion: GroupDiscussion, user_id: UUID,
) -> GroupDiscussionParticipant | None:
    return next((m for m in discussion.members if m.user_id == user_id), None)


def member_snapshot(member: GroupDiscussionParticipant | None) -> MemberSnapshot | None:
    if member is None:
        return None
    return MemberSnapshot(
        user_id=member.user_id, has_submitted_evidence=member.has_submitted_evidence,
    )


def pending_for(discussion: GroupDiscussion, actor_id: UUID) -> list[UUID]:
    authors = {e.id: e.user_id for e in discussion.evidence}
    answered = {
        e.id for e in discussion.evidence
        if any(r.respondent_id == actor_id for r in e.responses)
    }
    return pending_responses(actor_id, authors, answered)


# --- Reads ----------------------------------------------------------------------

async def list_discussions(
    db: AsyncSession, topic_id: UUID | None = None,
) -> list[GroupDiscussion]:
    """Newest first, optionally only those about one topic."""
    stmt = select(GroupDiscussion).order_by(GroupDiscussion.created_at.desc())
    if topic_id is not None:
        stmt = stmt.where(GroupDiscussion.topic_id == topic_id)
    return list((await db.execute(stmt)).scalars().all())


async def get_discussion_view(
    db: AsyncSession, discussion_id: UUID, actor_id: UUID,
) -> GroupView:
    discussion = await load_discussion(db, discussion_id, fresh=True)
    member = member_of(discussion, actor_id)
    pending = pending_for(discussion, actor_id) if member else []
    return GroupView(
        discussion=discussion,
        member=member,
        pending=pending,
        can_submit=can_submit(
            group_snapshot(discussion), member_snapshot(member), pending,
        ),
    )


# --- Mutations --------------------------------------------------------------------

async def create_discussion(
    db: AsyncSession, actor_id: UUID, data: GroupDiscussionCreate,
) -> GroupView:
    """Open a discussion on a weekly topic; the creator joins with their stance."""
    await load_profile(db, actor_id)
    if await db.get(ControversialTopic, data.topic_id) is None:
        raise ResourceNotFoundError("Topic", str(data.topic_id))

    discussion = GroupDiscussion(
        topic_id=data.topic_id,
        created_by=actor_id,
        status=GroupDiscussionStatus.ACTIVE.value,
    )
    db.add(discussion)
    await db.flush()
    db.add(GroupDiscussionParticipant(
        discussion_id=discussion.id, user_id=actor_id, stance=data.stance.value,
    ))
    await db.commit()

    logger.info(
        "Group discussion created",
        extra={"actor_id": str(actor_id), "discussion_id": str(discussion.id)},
    )
    return await get_discussion_view(db, discussion.id, actor_id)


async def join_discussion(
    db: AsyncSession, discussion_id: UUID, actor_id: UUID, data: GroupJoin,
) -> GroupView:
    ctx = ErrorContext(actor_id=str(actor_id))
    await load_profile(db, actor_id)
    discussion = await load_discussion(db, discussion_id)
    raise_for_rule(
        validate_join(
            group_snapshot(discussion), member_snapshot(member_of(discussion, actor_id)),
        ),
        ctx,
    )

    db.add(GroupDiscussionParticipant(
        discussion_id=discussion.id, user_id=actor_id, stance=data.stance.value,
    ))
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise ConflictError("You already joined this discussion.", ctx)

    logger.info(
        "Group discussion joined",
        extra={"actor_id": str(actor_id), "discussion_id": str(discussion.id)},
    )
    return await get_discussion_view(db, discussion.id, actor_id)


async def submit_group_evidence(
    db: AsyncSession, discussion_id: UUID, actor_id: UUID, data: EvidenceCreate,
) -> GroupSubmission:
    ctx = ErrorContext(actor_id=str(actor_id))
    discussion = await load_discussion(db, discussion_id)
    member = member_of(discussion, actor_id)
    raise_for_rule(
        validate_group_submission(
            group_snapshot(discussion),
            member_snapshot(member),
            pending_for(discussion, actor_id) if member else [],
        ),
        ctx,
    )

    result = await db.execute(
        update(GroupDiscussionParticipant)
        .where(
            GroupDiscussionParticipant.id == member.id,
            GroupDiscussionParticipant.evidence_count == member.evidence_count,
        )
        .values(
            evidence_count=GroupDiscussionParticipant.evidence_count + 1,
            has_submitted_evidence=True,
        ),
    )
    if result.rowcount != 1:
        raise ConcurrencyError(
            "You submitted from another session meanwhile. Reload and try again.", ctx,
        )

    evidence = GroupEvidence(
        discussion_id=discussion.id,
        user_id=actor_id,
        claim=data.claim,
        source_url=data.source_url,
        source_type=data.source_type.value if data.source_type else None,
    )
    db.add(evidence)
    await db.commit()

    logger.info(
        "Group evidence submitted",
        extra={
            "actor_id": str(actor_id),
            "discussion_id": str(discussion.id),
            "evidence_id": str(evidence.id),
        },
    )
    return GroupSubmission(
        evidence=await load_group_evidence(db, evidence.id, fresh=True),
        rating_scheduled=bool(evidence.source_url),
    )


async def respond_to_evidence(
    db: AsyncSession, evidence_id: UUID, actor_id: UUID, data: GroupResponseCreate,
) -> GroupResponseOutcome:
    ctx = ErrorContext(evidence_id=str(evidence_id), actor_id=str(actor_id))
    evidence = await load_group_evidence(db, evidence_id)
    discussion = await load_discussion(db, evidence.discussion_id)
    raise_for_rule(
        validate_group_response(
            group_snapshot(discussion),
            member_snapshot(member_of(discussion, actor_id)),
            evidence.user_id,
            any(r.respondent_id == actor_id for r in evidence.responses),
        ),
        ctx,
    )

    try:
        db.add(GroupEvidenceResponse(
            evidence_id=evidence.id,
            respondent_id=actor_id,
            response_type=data.response_type.value,
        ))
        if data.response_type == GroupResponseType.AGREE:
            await db.execute(
                update(GroupDiscussionParticipant)
                .where(
                    GroupDiscussionParticipant.discussion_id == discussion.id,
                    GroupDiscussionParticipant.user_id == evidence.user_id,
                )
                .values(score=GroupDiscussionParticipant.score + GROUP_AGREE_POINTS),
            )
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise ConflictError("You already responded to this evidence.", ctx)

    author_score = (await db.execute(
        select(GroupDiscussionParticipant.score).where(
            GroupDiscussionParticipant.discussion_id == discussion.id,
            GroupDiscussionParticipant.user_id == evidence.user_id,
        ),
    )).scalar_one()
    logger.info(
        f"Group evidence {data.response_type.value}d",
        extra={"actor_id": str(actor_id), "evidence_id": str(evidence.id)},
    )
    return GroupResponseOutcome(
        evidence_id=evidence.id,
        response_type=data.response_type,
        author_score=author_score,
    )


async def close_discussion(
    db: AsyncSession, discussion_id: UUID, actor_id: UUID,
) -> GroupDiscussion:
    """Creator-only; a closed discussion accepts no joins, evidence or responses."""
    ctx = ErrorContext(actor_id=str(actor_id))
    discussion = await load_discussion(db, discussion_id)
    if discussion.created_by != actor_id:
        raise PermissionDeniedError("Only the creator can close this discussion.", ctx)
    raise_for_rule(check_group_open(group_snapshot(discussion)), ctx)

    result = await db.execute(
        update(GroupDiscussion)
        .where(
            GroupDiscussion.id == discussion.id,
            GroupDiscussion.status == GroupDiscussionStatus.ACTIVE.value,
        )
        .values(status=GroupDiscussionStatus.CLOSED.value),
    )
    if result.rowcount != 1:
        raise ConcurrencyError("The discussion changed meanwhile. Reload and try again.", ctx)
    await db.commit()
    logger.info(
        "Group discussion closed",
        extra={"actor_id": str(actor_id), "discussion_id": str(discussion.id)},
    )
    return await load_discussion(db, discussion.id, fresh=True)
