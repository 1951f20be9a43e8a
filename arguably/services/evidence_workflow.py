"""Evidence Workflow — the imperative shell around the evidence state machine.

Invariants:
    - Every operation: load rows -> pure validation (core/enforce_evidence.py) ->
      one transaction (CAS status update + guarded score increment + notification) -> commit
    - A CAS that matches zero rows raises ConcurrencyError; nothing is committed
    - Points are computed from the row's rating at transition time and never revisited
    - AI rating is NOT performed here: callers schedule it after commit
      (outcome.rating_scheduled tells them when)

Design Decisions:
    - Status guard in the UPDATE's WHERE clause instead of SELECT ... FOR UPDATE:
      works on PostgreSQL and SQLite alike and never holds locks across awaits
    - Score increment guarded on debate status: a transition racing an
      admit-defeat or soft delete loses instead of scoring on a closed debate
"""

import logging
from dataclasses import dataclass
from uuid import UUID

from sqlalchemy import update
from sqlalchemy.ext.asyncio import AsyncSession

from arguably.core.domain_types import EvidenceAction, EvidenceStatus
from arguably.core.enforce_evidence import (
    TransitionPlan, plan_transition, validate_submission, validate_transition,
)
from arguably.core.errors import ConcurrencyError, ErrorContext, raise_for_rule
from arguably.models.challenge import Challenge
from arguably.models.debate import Debate
from arguably.models.evidence import Evidence
from arguably.schemas.evidence import ChallengeCreate, EvidenceCreate, SourceSupply
from arguably.services.notifications import make_notification
from arguably.services.records import (
    add_points_if_open,
    debate_snapshot,
    evidence_snapshot,
    latest_evidence,
    load_debate,
    load_evidence,
)

logger = logging.getLogger(__name__)

# AI fields cleared when the source changes: the old verdict rated another URL
_CLEARED_RATING = {
    "source_rating": None,
    "source_confidence": None,
    "source_reasoning": None,
    "source_warning": None,
    "claim_evaluation": None,
    "suggested_correction": None,
    "quote_example": None,
    "content_analyzed": None,
}

# Transitions driven by a single button press (no request body)
SIMPLE_ACTIONS = frozenset({
    EvidenceAction.AGREE,
    EvidenceAction.CHALLENGE,
    EvidenceAction.REQUEST_SOURCE,
    EvidenceAction.VALIDATE,
})


@dataclass
class TransitionOutcome:
    """Committed result: fresh rows plus what the transition awarded."""
    evidence: Evidence
    debate: Debate
    points: int = 0
    rating_scheduled: bool = False


# --- Submission ---------------------------------------------------------------

async def submit_evidence(
    db: AsyncSession, debate_id: UUID, actor_id: UUID, data: EvidenceCreate,
) -> TransitionOutcome:
    """Create a new `pending` evidence item, subject to the turn-taking rule."""
    ctx = ErrorContext(debate_id=str(debate_id), actor_id=str(actor_id))
    debate = await load_debate(db, debate_id)
    latest = await latest_evidence(db, debate.id)
    raise_for_rule(
        validate_submission(
            debate_snapshot(debate),
            evidence_snapshot(latest) if latest else None,
            actor_id,
        ),
        ctx,
    )

    # CAS on the evidence counter: two submissions validated against the same
    # timeline cannot both land
    result = await db.execute(
        update(Debate)
        .where(
            Debate.id == debate.id,
            Debate.evidence_count == debate.evidence_count,
        )
        .values(evidence_count=Debate.evidence_count + 1),
    )
    if result.rowcount != 1:
        raise ConcurrencyError(
            "The debate changed while you were submitting. Reload and try again.",
            ctx,
        )

    evidence = Evidence(
        debate_id=debate.id,
        participant_id=actor_id,
        claim=data.claim,
        source_url=data.source_url,
        source_type=data.source_type.value if data.source_type else None,
        status=EvidenceStatus.PENDING.value,
    )
    db.add(evidence)
    await db.commit()

    logger.info(
        "Evidence submitted",
        extra={
            "debate_id": str(debate.id),
            "evidence_id": str(evidence.id),
            "actor_id": str(actor_id),
        },
    )
    return TransitionOutcome(
        evidence=await load_evidence(db, evidence.id, fresh=True),
        debate=await load_debate(db, debate.id, fresh=True),
        rating_scheduled=bool(evidence.source_url),
    )


# --- Transitions --------------------------------------------------------------

async def apply_transition(
    db: AsyncSession, evidence_id: UUID, actor_id: UUID, action: EvidenceAction,
) -> TransitionOutcome:
    """agree / challenge / request_source / validate."""
    if action not in SIMPLE_ACTIONS:
        raise ValueError(f"{action.value} needs a request body")
    return await _transition(db, evidence_id, actor_id, action)


async def add_counter_challenge(
    db: AsyncSession, evidence_id: UUID, actor_id: UUID, data: ChallengeCreate,
) -> TransitionOutcome:
    """Attach counter-evidence to a challenged item; status stays `challenged`."""
    challenge = Challenge(
        evidence_id=evidence_id,
        participant_id=actor_id,
        claim=data.claim,
        source_url=data.source_url,
        source_type=data.source_type.value,
    )
    return await _transition(
        db, evidence_id, actor_id, EvidenceAction.COUNTER_CHALLENGE,
        extra_rows=[challenge],
    )


async def supply_source(
    db: AsyncSession, evidence_id: UUID, actor_id: UUID, data: SourceSupply,
) -> TransitionOutcome:
    """Answer a source request: attach the source and send the item back to `pending`."""
    outcome = await _transition(
        db, evidence_id, actor_id, EvidenceAction.SUPPLY_SOURCE,
        values={
            "source_url": data.source_url,
            "source_type": data.source_type.value,
            **_CLEARED_RATING,
        },
    )
    outcome.rating_scheduled = True
    return outcome


async def _transition(
    db: AsyncSession,
    evidence_id: UUID,
    actor_id: UUID,
    action: EvidenceAction,
    *,
    values: dict | None = None,
    extra_rows: list | None = None,
) -> TransitionOutcome:
    evidence = await load_evidence(db, evidence_id)
    debate = await load_debate(db, evidence.debate_id)
    ctx = ErrorContext(
        debate_id=str(debate.id),
        evidence_id=str(evidence.id),
        actor_id=str(actor_id),
    )
    debate_snap = debate_snapshot(debate)
    evidence_snap = evidence_snapshot(evidence)
    raise_for_rule(
        validate_transition(debate_snap, evidence_snap, actor_id, action), ctx,
    )
    plan = plan_transition(debate_snap, evidence_snap, actor_id, action)

    await _swap_status(db, plan, evidence.id, values or {}, ctx)
    if not await add_points_if_open(
        db, debate.id, plan.beneficiary_slot, plan.points,
    ):
        raise ConcurrencyError(
            "The debate was closed while you were acting on it.", ctx,
        )
    for row in extra_rows or []:
        db.add(row)
    db.add(make_notification(
        plan.notification, plan.notify_id, actor_id,
        debate_id=debate.id, evidence_id=evidence.id,
    ))
    await db.commit()

    logger.info(
        f"Evidence {action.value}: {plan.from_status.value} -> {plan.to_status.value}",
        extra={
            "debate_id": ctx.debate_id,
            "evidence_id": ctx.evidence_id,
            "actor_id": ctx.actor_id,
            "points": plan.points,
        },
    )
    return TransitionOutcome(
        evidence=await load_evidence(db, evidence.id, fresh=True),
        debate=await load_debate(db, debate.id, fresh=True),
        points=plan.points,
    )


async def _swap_status(
    db: AsyncSession,
    plan: TransitionPlan,
    evidence_id: UUID,
    values: dict,
    ctx: ErrorContext,
) -> None:
    """UPDATE evidence SET status = <to> WHERE id = ? AND status = <from>."""
    result = await db.execute(
        update(Evidence)
        .where(
            Evidence.id == evidence_id,
            Evidence.status == plan.from_status.value,
        )
        .values(status=plan.to_status.value, **values),
    )
    if result.rowcount != 1:
        raise ConcurrencyError(
            "This evidence was updated by someone else. Reload and try again.",
            ctx,
        )
