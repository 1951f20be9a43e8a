"""Row Access Helpers — load-or-404, ORM-to-snapshot conversion, atomic score increments.

Invariants:
    - load_* raise ResourceNotFoundError, never return None
    - fresh=True re-reads the row even if the session already holds it
      (sessions use expire_on_commit=False)
    - Score increments are single UPDATE statements (`score = score + n`), never
      read-modify-write
"""

from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from arguably.core.domain_types import DebateStatus, EvidenceStatus
from arguably.core.enforce_evidence import DebateSnapshot, EvidenceSnapshot
from arguably.core.errors import ErrorContext, ResourceNotFoundError
from arguably.models.debate import Debate
from arguably.models.evidence import Evidence
from arguably.models.profile import Profile


async def load_debate(
    db: AsyncSession, debate_id: UUID, *, fresh: bool = False,
) -> Debate:
    stmt = select(Debate).where(Debate.id == debate_id)
    if fresh:
        stmt = stmt.execution_options(populate_existing=True)
    debate = (await db.execute(stmt)).scalar_one_or_none()
    if debate is None:
        raise ResourceNotFoundError(
            "Debate", str(debate_id), ErrorContext(debate_id=str(debate_id)),
        )
    return debate


async def load_evidence(
    db: AsyncSession, evidence_id: UUID, *, fresh: bool = False,
) -> Evidence:
    stmt = select(Evidence).where(Evidence.id == evidence_id)
    if fresh:
        stmt = stmt.execution_options(populate_existing=True)
    evidence = (await db.execute(stmt)).scalar_one_or_none()
    if evidence is None:
        raise ResourceNotFoundError(
            "Evidence", str(evidence_id), ErrorContext(evidence_id=str(evidence_id)),
        )
    return evidence


async def load_profile(db: AsyncSession, profile_id: UUID) -> Profile:
    profile = await db.get(Profile, profile_id)
    if profile is None:
        raise ResourceNotFoundError("Profile", str(profile_id))
    return profile


async def latest_evidence(db: AsyncSession, debate_id: UUID) -> Evidence | None:
    """Most recently created evidence item of a debate (the turn-taking anchor)."""
    result = await db.execute(
        select(Evidence)
        .where(Evidence.debate_id == debate_id)
        .order_by(Evidence.created_at.desc())
        .limit(1),
    )
    return result.scalar_one_or_none()


def debate_snapshot(debate: Debate) -> DebateSnapshot:
    return DebateSnapshot(
        id=debate.id,
        participant1_id=debate.participant1_id,
        participant2_id=debate.participant2_id,
        status=DebateStatus(debate.status),
        deleted=debate.deleted_at is not None,
    )


def evidence_snapshot(evidence: Evidence) -> EvidenceSnapshot:
    return EvidenceSnapshot(
        id=evidence.id,
        participant_id=evidence.participant_id,
        status=EvidenceStatus(evidence.status),
        source_url=evidence.source_url,
        source_rating=evidence.source_rating,
    )


async def add_points_if_open(
    db: AsyncSession, debate_id: UUID, slot: int, points: int,
) -> bool:
    """Atomically add points to participant1 (slot 1) or participant2 (slot 2).

    Guarded on the debate still being active and not deleted; returns False when
    the guard fails (the debate was closed concurrently). points may be 0.
    """
    column = Debate.participant1_score if slot == 1 else Debate.participant2_score
    result = await db.execute(
        update(Debate)
        .where(
            Debate.id == debate_id,
            Debate.status == DebateStatus.ACTIVE.value,
            Debate.deleted_at.is_(None),
        )
        .values({column: column + points}),
    )
    return result.rowcount == 1
