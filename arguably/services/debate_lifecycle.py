"""Debate Lifecycle — creation, listing, admission of defeat, soft delete.

Invariants:
    - Debates are never hard-deleted; soft-deleted debates keep their scores
    - Admit defeat is one UPDATE: CAS active -> completed plus the winner's bonus
    - Listing excludes soft-deleted debates; detail views still show them
"""

import logging
import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from uuid import UUID

from sqlalchemy import or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from arguably.core.domain_types import DebateStatus, NotificationKind
from arguably.core.enforce_debate import (
    plan_admit_defeat,
    validate_admit_defeat,
    validate_new_debate,
    validate_soft_delete,
)
from arguably.core.enforce_evidence import allowed_actions, can_submit
from arguably.core.errors import ConcurrencyError, ErrorContext, raise_for_rule
from arguably.models.debate import Debate
from arguably.schemas.debate import DebateDetailResponse
from arguably.schemas.evidence import EvidenceResponse
from arguably.services.notifications import make_notification
from arguably.services.records import (
    debate_snapshot, evidence_snapshot, load_debate, load_profile,
)

logger = logging.getLogger(__name__)


@dataclass
class DefeatOutcome:
    debate: Debate
    winner_id: UUID
    points: int


def new_debate(
    participant1_id: UUID,
    participant2_id: UUID,
    topic: str,
    timer_minutes: int | None = None,
) -> Debate:
    """Build (not persist) a fresh active debate."""
    now = datetime.now(timezone.utc)
    return Debate(
        id=uuid.uuid4(),
        topic=topic,
        participant1_id=participant1_id,
        participant2_id=participant2_id,
        participant1_score=0,
        participant2_score=0,
        evidence_count=0,
        status=DebateStatus.ACTIVE.value,
        timer_expires_at=(
            now + timedelta(minutes=timer_minutes) if timer_minutes else None
        ),
        created_at=now,
        updated_at=now,
    )


async def create_debate(
    db: AsyncSession,
    actor_id: UUID,
    opponent_id: UUID,
    topic: str,
    timer_minutes: int | None = None,
) -> Debate:
    """Actor invites opponent; actor becomes participant1."""
    raise_for_rule(
        validate_new_debate(actor_id, opponent_id),
        ErrorContext(actor_id=str(actor_id)),
    )
    await load_profile(db, actor_id)
    await load_profile(db, opponent_id)

    debate = new_debate(actor_id, opponent_id, topic, timer_minutes)
    db.add(debate)
    db.add(make_notification(
        NotificationKind.DEBATE_INVITE, opponent_id, actor_id,
        debate_id=debate.id, topic=topic,
    ))
    await db.commit()
    logger.info(
        "Debate created",
        extra={"debate_id": str(debate.id), "actor_id": str(actor_id)},
    )
    return await load_debate(db, debate.id, fresh=True)


async def list_debates(db: AsyncSession, actor_id: UUID) -> list[Debate]:
    """Actor's debates, newest first, soft-deleted excluded."""
    result = await db.execute(
        select(Debate)
        .where(
            or_(
                Debate.participant1_id == actor_id,
                Debate.participant2_id == actor_id,
            ),
            Debate.deleted_at.is_(None),
        )
        .order_by(Debate.created_at.desc()),
    )
    return list(result.scalars().all())


async def get_debate_detail(
    db: AsyncSession, debate_id: UUID, actor_id: UUID | None = None,
) -> DebateDetailResponse:
    """Debate + timeline; with an actor, also what that actor may do next."""
    debate = await load_debate(db, debate_id)
    detail = DebateDetailResponse.model_validate(debate)
    if actor_id is None:
        return detail

    snap = debate_snapshot(debate)
    timeline = []
    for item in debate.evidence:
        view = EvidenceResponse.model_validate(item)
        view.allowed_actions = allowed_actions(snap, evidence_snapshot(item), actor_id)
        timeline.append(view)
    latest = debate.evidence[-1] if debate.evidence else None
    detail.evidence = timeline
    detail.can_submit = can_submit(
        snap, evidence_snapshot(latest) if latest else None, actor_id,
    )
    return detail


async def admit_defeat(
    db: AsyncSession, debate_id: UUID, actor_id: UUID,
) -> DefeatOutcome:
    debate = await load_debate(db, debate_id)
    ctx = ErrorContext(debate_id=str(debate.id), actor_id=str(actor_id))
    snap = debate_snapshot(debate)
    raise_for_rule(validate_admit_defeat(snap, actor_id), ctx)
    plan = plan_admit_defeat(snap, actor_id)

    column = (
        Debate.participant1_score if plan.winner_slot == 1
        else Debate.participant2_score
    )
    result = await db.execute(
        update(Debate)
        .where(
            Debate.id == debate.id,
            Debate.status == DebateStatus.ACTIVE.value,
            Debate.deleted_at.is_(None),
        )
        .values({
            Debate.status: DebateStatus.COMPLETED.value,
            column: column + plan.points,
        }),
    )
    if result.rowcount != 1:
        raise ConcurrencyError(
            "This debate was already closed by someone else.", ctx,
        )
    db.add(make_notification(
        NotificationKind.DEFEAT_ADMITTED, plan.winner_id, actor_id,
        debate_id=debate.id,
    ))
    await db.commit()

    logger.info(
        "Defeat admitted",
        extra={
            "debate_id": ctx.debate_id, "actor_id": ctx.actor_id,
            "points": plan.points,
        },
    )
    return DefeatOutcome(
        debate=await load_debate(db, debate.id, fresh=True),
        winner_id=plan.winner_id,
        points=plan.points,
    )


async def soft_delete_debate(
    db: AsyncSession, debate_id: UUID, actor_id: UUID,
) -> Debate:
    debate = await load_debate(db, debate_id)
    ctx = ErrorContext(debate_id=str(debate.id), actor_id=str(actor_id))
    raise_for_rule(validate_soft_delete(debate_snapshot(debate), actor_id), ctx)

    result = await db.execute(
        update(Debate)
        .where(Debate.id == debate.id, Debate.deleted_at.is_(None))
        .values(deleted_at=datetime.now(timezone.utc), deleted_by=actor_id),
    )
    if result.rowcount != 1:
        raise ConcurrencyError("This debate was already removed.", ctx)
    await db.commit()
    logger.info(
        "Debate soft-deleted",
        extra={"debate_id": ctx.debate_id, "actor_id": ctx.actor_id},
    )
    return await load_debate(db, debate.id, fresh=True)
