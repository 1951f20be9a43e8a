"""Debate Routes — create, list, view, admit defeat, soft delete, AI evaluations."""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from arguably.api.deps import get_actor_id, get_debate_evaluator, get_optional_actor_id
from arguably.infrastructure.database import get_db
from arguably.schemas.debate import (
    AdmitDefeatResponse,
    DebateCreate,
    DebateDetailResponse,
    DebateResponse,
    EvaluationResponse,
)
from arguably.services import debate_lifecycle
from arguably.services.debate_evaluator import (
    DebateEvaluator, evaluate_debate, list_evaluations,
)

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/debates", tags=["debates"])


@router.post(
    "", response_model=DebateResponse, status_code=status.HTTP_201_CREATED,
)
async def create_debate(
    body: DebateCreate,
    actor_id: UUID = Depends(get_actor_id),
    db: AsyncSession = Depends(get_db),
):
    """Invite an opponent to a new debate on a topic."""
    return await debate_lifecycle.create_debate(
        db, actor_id, body.opponent_id, body.topic, body.timer_minutes,
    )


@router.get("", response_model=list[DebateResponse])
async def list_debates(
    actor_id: UUID = Depends(get_actor_id),
    db: AsyncSession = Depends(get_db),
):
    return await debate_lifecycle.list_debates(db, actor_id)


@router.get("/{debate_id}", response_model=DebateDetailResponse)
async def get_debate(
    debate_id: UUID,
    actor_id: UUID | None = Depends(get_optional_actor_id),
    db: AsyncSession = Depends(get_db),
):
    """Debate with its evidence timeline; with X-User-Id, the actor's allowed moves."""
    return await debate_lifecycle.get_debate_detail(db, debate_id, actor_id)


@router.post("/{debate_id}/admit-defeat", response_model=AdmitDefeatResponse)
async def admit_defeat(
    debate_id: UUID,
    actor_id: UUID = Depends(get_actor_id),
    db: AsyncSession = Depends(get_db),
):
    outcome = await debate_lifecycle.admit_defeat(db, debate_id, actor_id)
    return AdmitDefeatResponse(
        debate=DebateResponse.model_validate(outcome.debate),
        winner_id=outcome.winner_id,
        points_awarded=outcome.points,
    )


@router.delete("/{debate_id}", response_model=DebateResponse)
async def delete_debate(
    debate_id: UUID,
    actor_id: UUID = Depends(get_actor_id),
    db: AsyncSession = Depends(get_db),
):
    """Soft delete: hidden from listings, history and scores preserved."""
    return await debate_lifecycle.soft_delete_debate(db, debate_id, actor_id)


@router.post(
    "/{debate_id}/evaluation", response_model=EvaluationResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_evaluation(
    debate_id: UUID,
    actor_id: UUID = Depends(get_actor_id),
    db: AsyncSession = Depends(get_db),
    evaluator: DebateEvaluator = Depends(get_debate_evaluator),
):
    return await evaluate_debate(db, debate_id, actor_id, evaluator)


@router.get("/{debate_id}/evaluations", response_model=list[EvaluationResponse])
async def get_evaluations(debate_id: UUID, db: AsyncSession = Depends(get_db)):
    return await list_evaluations(db, debate_id)
