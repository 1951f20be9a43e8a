"""Evidence Routes — submission and every state-machine transition.

Invariants:
    - Transitions commit before the response; AI rating runs afterwards as a
      background task and never affects the response status
    - Re-rate is synchronous and reports collaborator failure as a warning
"""

import logging
from uuid import UUID

from fastapi import APIRouter, BackgroundTasks, Body, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from arguably.api.deps import get_actor_id, get_source_rater
from arguably.core.domain_types import EvidenceAction
from arguably.infrastructure.database import get_db
from arguably.schemas.evidence import (
    ChallengeCreate,
    EvidenceCreate,
    EvidenceResponse,
    RerateRequest,
    RerateResponse,
    SourceSupply,
    TransitionResponse,
)
from arguably.services import evidence_workflow
from arguably.services.evidence_workflow import TransitionOutcome
from arguably.services.rating_jobs import rate_evidence, rate_evidence_in_background
from arguably.services.records import load_evidence
from arguably.services.source_rater import RatingFailure, SourceRater

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1", tags=["evidence"])


def _respond(
    outcome: TransitionOutcome,
    background_tasks: BackgroundTasks,
    rater: SourceRater,
) -> TransitionResponse:
    if outcome.rating_scheduled:
        background_tasks.add_task(
            rate_evidence_in_background, outcome.evidence.id, rater,
        )
    return TransitionResponse(
        evidence=EvidenceResponse.model_validate(outcome.evidence),
        points_awarded=outcome.points,
        participant1_score=outcome.debate.participant1_score,
        participant2_score=outcome.debate.participant2_score,
        rating_scheduled=outcome.rating_scheduled,
    )


@router.post(
    "/debates/{debate_id}/evidence", response_model=TransitionResponse,
    status_code=status.HTTP_201_CREATED,
)
async def submit_evidence(
    debate_id: UUID,
    body: EvidenceCreate,
    background_tasks: BackgroundTasks,
    actor_id: UUID = Depends(get_actor_id),
    db: AsyncSession = Depends(get_db),
    rater: SourceRater = Depends(get_source_rater),
):
    outcome = await evidence_workflow.submit_evidence(db, debate_id, actor_id, body)
    return _respond(outcome, background_tasks, rater)


async def _simple(
    action: EvidenceAction,
    evidence_id: UUID,
    actor_id: UUID,
    db: AsyncSession,
    background_tasks: BackgroundTasks,
    rater: SourceRater,
) -> TransitionResponse:
    outcome = await evidence_workflow.apply_transition(db, evidence_id, actor_id, action)
    return _respond(outcome, background_tasks, rater)


@router.post("/evidence/{evidence_id}/agree", response_model=TransitionResponse)
async def agree(
    evidence_id: UUID,
    background_tasks: BackgroundTasks,
    actor_id: UUID = Depends(get_actor_id),
    db: AsyncSession = Depends(get_db),
    rater: SourceRater = Depends(get_source_rater),
):
    return await _simple(
        EvidenceAction.AGREE, evidence_id, actor_id, db, background_tasks, rater,
    )


@router.post("/evidence/{evidence_id}/challenge", response_model=TransitionResponse)
async def challenge(
    evidence_id: UUID,
    background_tasks: BackgroundTasks,
    actor_id: UUID = Depends(get_actor_id),
    db: AsyncSession = Depends(get_db),
    rater: SourceRater = Depends(get_source_rater),
):
    return await _simple(
        EvidenceAction.CHALLENGE, evidence_id, actor_id, db, background_tasks, rater,
    )


@router.post("/evidence/{evidence_id}/request-source", response_model=TransitionResponse)
async def request_source(
    evidence_id: UUID,
    background_tasks: BackgroundTasks,
    actor_id: UUID = Depends(get_actor_id),
    db: AsyncSession = Depends(get_db),
    rater: SourceRater = Depends(get_source_rater),
):
    return await _simple(
        EvidenceAction.REQUEST_SOURCE, evidence_id, actor_id, db, background_tasks, rater,
    )


@router.post("/evidence/{evidence_id}/validate", response_model=TransitionResponse)
async def validate(
    evidence_id: UUID,
    background_tasks: BackgroundTasks,
    actor_id: UUID = Depends(get_actor_id),
    db: AsyncSession = Depends(get_db),
    rater: SourceRater = Depends(get_source_rater),
):
    return await _simple(
        EvidenceAction.VALIDATE, evidence_id, actor_id, db, background_tasks, rater,
    )


@router.post(
    "/evidence/{evidence_id}/counter-challenges", response_model=TransitionResponse,
    status_code=status.HTTP_201_CREATED,
)
async def add_counter_challenge(
    evidence_id: UUID,
    body: ChallengeCreate,
    background_tasks: BackgroundTasks,
    actor_id: UUID = Depends(get_actor_id),
    db: AsyncSession = Depends(get_db),
    rater: SourceRater = Depends(get_source_rater),
):
    outcome = await evidence_workflow.add_counter_challenge(db, evidence_id, actor_id, body)
    return _respond(outcome, background_tasks, rater)


@router.post("/evidence/{evidence_id}/source", response_model=TransitionResponse)
async def supply_source(
    evidence_id: UUID,
    body: SourceSupply,
    background_tasks: BackgroundTasks,
    actor_id: UUID = Depends(get_actor_id),
    db: AsyncSession = Depends(get_db),
    rater: SourceRater = Depends(get_source_rater),
):
    outcome = await evidence_workflow.supply_source(db, evidence_id, actor_id, body)
    return _respond(outcome, background_tasks, rater)


@router.post("/evidence/{evidence_id}/rating", response_model=RerateResponse)
async def rerate(
    evidence_id: UUID,
    body: RerateRequest | None = Body(None),
    actor_id: UUID = Depends(get_actor_id),
    db: AsyncSession = Depends(get_db),
    rater: SourceRater = Depends(get_source_rater),
):
    """Manual re-rate. Updates AI fields only; awarded points never change."""
    result = await rate_evidence(
        db, evidence_id, rater,
        context=body.context if body else None, actor_id=actor_id,
    )
    evidence = await load_evidence(db, evidence_id, fresh=True)
    return RerateResponse(
        evidence=EvidenceResponse.model_validate(evidence),
        rated=result.ok,
        warning=result.reason if isinstance(result, RatingFailure) else None,
    )
