"""Debate Evaluator — neutral AI moderator summary of a debate's current state.

Invariants:
    - Only participants may request an evaluation
    - Empty model output is a failure (AIProviderError, 503); nothing is stored
    - Successful evaluations are persisted with the evidence count they covered
"""

import logging
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from arguably.core.debate_digest import (
    EVALUATION_SYSTEM_PROMPT, DebateDigest, DigestEvidence, build_evaluation_prompt,
)
from arguably.core.enforce_evidence import check_participant
from arguably.core.errors import AIProviderError, ErrorContext, raise_for_rule
from arguably.infrastructure.anthropic_client import ResilientAnthropicClient
from arguably.models.debate_evaluation import DebateEvaluation
from arguably.models.profile import Profile
from arguably.services.records import debate_snapshot, load_debate

logger = logging.getLogger(__name__)


class DebateEvaluator:
    def __init__(
        self, client: ResilientAnthropicClient, model: str, max_tokens: int = 300,
    ):
        self.client = client
        self.model = model
        self.max_tokens = max_tokens

    async def evaluate(
        self, digest: DebateDigest, error_context: ErrorContext | None = None,
    ) -> str:
        text = await self.client.complete_text(
            model=self.model,
            max_tokens=self.max_tokens,
            system=EVALUATION_SYSTEM_PROMPT,
            user_message=build_evaluation_prompt(digest),
            context=error_context,
        )
        if not text:
            raise AIProviderError(
                "Model returned no evaluation", "empty_response",
                context=error_context,
            )
        return text


async def evaluate_debate(
    db: AsyncSession, debate_id: UUID, actor_id: UUID, evaluator: DebateEvaluator,
) -> DebateEvaluation:
    debate = await load_debate(db, debate_id)
    ctx = ErrorContext(debate_id=str(debate.id), actor_id=str(actor_id))
    raise_for_rule(check_participant(debate_snapshot(debate), actor_id), ctx)

    names = await _usernames(db, [debate.participant1_id, debate.participant2_id])
    digest = DebateDigest(
        topic=debate.topic,
        participant1_id=debate.participant1_id,
        participant2_id=debate.participant2_id,
        participant1_name=names.get(debate.participant1_id, "Participant 1"),
        participant2_name=names.get(debate.participant2_id, "Participant 2"),
        evidence=[
            DigestEvidence(e.participant_id, e.claim, e.status)
            for e in debate.evidence
        ],
    )
    text = await evaluator.evaluate(digest, error_context=ctx)

    evaluation = DebateEvaluation(
        debate_id=debate.id,
        evaluation=text,
        evidence_count=len(digest.evidence),
    )
    db.add(evaluation)
    await db.commit()
    logger.info("Debate evaluated", extra={"debate_id": ctx.debate_id})
    return evaluation


async def list_evaluations(db: AsyncSession, debate_id: UUID) -> list[DebateEvaluation]:
    """Evaluations for a debate, newest first."""
    await load_debate(db, debate_id)
    result = await db.execute(
        select(DebateEvaluation)
        .where(DebateEvaluation.debate_id == debate_id)
        .order_by(DebateEvaluation.created_at.desc()),
    )
    return list(result.scalars().all())


async def _usernames(db: AsyncSession, ids: list[UUID]) -> dict[UUID, str]:
    result = await db.execute(
        select(Profile.id, Profile.username).where(Profile.id.in_(ids)),
    )
    return {row.id: row.username for row in result}
