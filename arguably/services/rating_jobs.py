"""Rating Jobs — attach AI source ratings to debate and group evidence, after the fact.

Invariants:
    - Only AI fields are written; scores and status are never touched
    - The write is guarded on source_url: a rating for a URL the submitter has
      since replaced is discarded
    - Background runs use their own session (db_manager) and never raise
"""

import logging
from collections.abc import Awaitable, Callable
from uuid import UUID

from sqlalchemy import update
from sqlalchemy.ext.asyncio import AsyncSession

import arguably.infrastructure.database as db_module
from arguably.core.enforce_evidence import check_participant
from arguably.core.errors import (
    ArguablyError, ErrorContext, TransitionRejectedError, raise_for_rule,
)
from arguably.db.base import Base
from arguably.models.evidence import Evidence
from arguably.models.group_discussion import GroupEvidence
from arguably.services.group_discussions import load_discussion, load_group_evidence
from arguably.services.records import debate_snapshot, load_debate, load_evidence
from arguably.services.source_rater import (
    RatingFailure, RatingResult, RatingSuccess, SourceRater,
)

logger = logging.getLogger(__name__)


async def rate_evidence(
    db: AsyncSession,
    evidence_id: UUID,
    rater: SourceRater,
    context: str | None = None,
    actor_id: UUID | None = None,
) -> RatingResult:
    """Rate the evidence's current source and store the verdict on success.

    With an actor (manual re-rate), only debate participants may trigger it.
    """
    evidence = await load_evidence(db, evidence_id)
    ctx = ErrorContext(debate_id=str(evidence.debate_id), evidence_id=str(evidence.id))
    if actor_id is not None:
        ctx.actor_id = str(actor_id)
        debate = await load_debate(db, evidence.debate_id)
        raise_for_rule(check_participant(debate_snapshot(debate), actor_id), ctx)
    if not evidence.source_url:
        raise TransitionRejectedError(
            "NO_SOURCE", "This evidence has no source to rate.", ctx,
        )
    source_url = evidence.source_url

    result = await rater.rate(evidence.claim, source_url, context, error_context=ctx)
    if isinstance(result, RatingFailure):
        logger.warning(
            f"Rating left unset: {result.reason}",
            extra={"evidence_id": ctx.evidence_id},
        )
        return result

    if not await _store_if_source_unchanged(
        db, Evidence, evidence.id, source_url, result.evidence_fields(), ctx,
    ):
        return RatingFailure("source changed while rating")
    logger.info(
        "Evidence rated",
        extra={"evidence_id": ctx.evidence_id, "debate_id": ctx.debate_id},
    )
    return result


async def rate_evidence_in_background(evidence_id: UUID, rater: SourceRater) -> None:
    """BackgroundTasks entry point — runs after the response was sent."""
    await _run_in_background(rate_evidence, evidence_id, rater)


async def rate_group_evidence_in_background(evidence_id: UUID, rater: SourceRater) -> None:
    await _run_in_background(rate_group_evidence, evidence_id, rater)


async def _run_in_background(
    rate: Callable[[AsyncSession, UUID, SourceRater], Awaitable[RatingResult]],
    evidence_id: UUID,
    rater: SourceRater,
) -> None:
    manager = db_module.db_manager
    if manager is None:
        logger.error("Background rating skipped: database not initialized")
        return
    try:
        async with manager.session() as db:
            result = await rate(db, evidence_id, rater)
    except ArguablyError as e:
        logger.warning(
            f"Background rating failed: {e.message}",
            extra={"evidence_id": str(evidence_id), "error_code": e.code},
        )
        return
    if isinstance(result, RatingSuccess):
        logger.info(
            f"Background rating stored ({result.payload.rating}/5)",
            extra={"evidence_id": str(evidence_id)},
        )


async def rate_group_evidence(
    db: AsyncSession, evidence_id: UUID, rater: SourceRater,
) -> RatingResult:
    """Rate a group evidence item's source, with the topic question as context."""
    evidence = await load_group_evidence(db, evidence_id)
    ctx = ErrorContext(evidence_id=str(evidence.id))
    if not evidence.source_url:
        raise TransitionRejectedError(
            "NO_SOURCE", "This evidence has no source to rate.", ctx,
        )
    source_url = evidence.source_url
    discussion = await load_discussion(db, evidence.discussion_id)

    result = await rater.rate(
        evidence.claim, source_url, discussion.topic.question, error_context=ctx,
    )
    if isinstance(result, RatingFailure):
        logger.warning(
            f"Group rating left unset: {result.reason}",
            extra={"evidence_id": ctx.evidence_id},
        )
        return result

    if not await _store_if_source_unchanged(
        db, GroupEvidence, evidence.id, source_url, result.source_fields(), ctx,
    ):
        return RatingFailure("source changed while rating")
    logger.info("Group evidence rated", extra={"evidence_id": ctx.evidence_id})
    return result


async def _store_if_source_unchanged(
    db: AsyncSession,
    model: type[Base],
    evidence_id: UUID,
    source_url: str,
    values: dict,
    ctx: ErrorContext,
) -> bool:
    updated = await db.execute(
        update(model)
        .where(model.id == evidence_id, model.source_url == source_url)
        .values(**values),
    )
    if updated.rowcount != 1:
        await db.rollback()
        logger.info(
            "Source changed during rating; result discarded",
            extra={"evidence_id": ctx.evidence_id},
        )
        return False
    await db.commit()
    return True
