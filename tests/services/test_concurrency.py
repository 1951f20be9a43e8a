"""Compare-and-swap guards — a stale writer loses with 409 and writes nothing.

Design Decisions:
    - A session that loaded rows before another request committed plays the
      losing writer (identity map keeps its stale view)
"""

from uuid import UUID

import pytest

from arguably.core.domain_types import EvidenceAction, EvidenceStatus
from arguably.core.enforce_evidence import EvidenceSnapshot, plan_transition
from arguably.core.errors import ConcurrencyError, ErrorContext
from arguably.schemas.evidence import EvidenceCreate
from arguably.services.evidence_workflow import _swap_status, submit_evidence
from arguably.services.records import (
    add_points_if_open, debate_snapshot, load_debate, load_evidence,
)
from tests.services.conftest import as_user


async def _submit_and_agree(client, debate_id, author, opponent, claim):
    res = await client.post(
        f"/api/v1/debates/{debate_id}/evidence", json={"claim": claim},
        headers=as_user(author),
    )
    evidence_id = res.json()["evidence"]["id"]
    await client.post(f"/api/v1/evidence/{evidence_id}/agree", headers=as_user(opponent))
    return UUID(evidence_id)


async def test_stale_status_swap_rejected(client, test_session_factory, debate_id, alice, bob):
    evidence_id = await _submit_and_agree(client, debate_id, alice, bob, "first")

    async with test_session_factory() as db:
        debate = await load_debate(db, debate_id)
        evidence = await load_evidence(db, evidence_id)
        stale = EvidenceSnapshot(
            id=evidence.id, participant_id=alice, status=EvidenceStatus.PENDING,
        )
        plan = plan_transition(debate_snapshot(debate), stale, bob, EvidenceAction.AGREE)
        with pytest.raises(ConcurrencyError):
            await _swap_status(db, plan, evidence.id, {}, ErrorContext())
        await db.rollback()

    detail = (await client.get(f"/api/v1/debates/{debate_id}")).json()
    assert detail["participant1_score"] == 2


async def test_stale_submission_loses(client, test_session_factory, debate_id, alice, bob):
    await _submit_and_agree(client, debate_id, alice, bob, "first")

    async with test_session_factory() as db:
        await load_debate(db, debate_id)   # caches evidence_count == 1
        await _submit_and_agree(client, debate_id, bob, alice, "second")

        with pytest.raises(ConcurrencyError):
            await submit_evidence(db, debate_id, alice, EvidenceCreate(claim="third"))
        await db.rollback()

    detail = (await client.get(f"/api/v1/debates/{debate_id}")).json()
    assert [e["claim"] for e in detail["evidence"]] == ["first", "second"]
    assert detail["evidence_count"] == 2


async def test_points_not_added_to_closed_debate(client, test_session_factory, debate_id, bob):
    await client.post(f"/api/v1/debates/{debate_id}/admit-defeat", headers=as_user(bob))

    async with test_session_factory() as db:
        assert await add_points_if_open(db, debate_id, 1, 5) is False
        await db.rollback()

    detail = (await client.get(f"/api/v1/debates/{debate_id}")).json()
    assert detail["participant1_score"] == 15
