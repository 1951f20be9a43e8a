"""Debate evaluation — AI moderator summaries, persisted per request."""

from arguably.core.errors import AIProviderError
from tests.services.conftest import as_user


async def test_evaluation_persisted(client, fake_ai, debate_id, alice):
    await client.post(
        f"/api/v1/debates/{debate_id}/evidence",
        json={"claim": "Commutes waste time"}, headers=as_user(alice),
    )
    fake_ai.queue("Both sides should focus on productivity data.")

    res = await client.post(
        f"/api/v1/debates/{debate_id}/evaluation", headers=as_user(alice),
    )
    assert res.status_code == 201
    assert res.json()["evaluation"] == "Both sides should focus on productivity data."
    assert res.json()["evidence_count"] == 1

    prompt = fake_ai.calls[-1]["user_message"]
    assert '"Is remote work better?"' in prompt
    assert "alice has made 1 rebuttals." in prompt
    assert "1. [pending] Commutes waste time" in prompt

    listing = await client.get(f"/api/v1/debates/{debate_id}/evaluations")
    assert len(listing.json()) == 1


async def test_empty_evaluation_is_503_and_not_stored(client, fake_ai, debate_id, bob):
    fake_ai.queue("")
    res = await client.post(
        f"/api/v1/debates/{debate_id}/evaluation", headers=as_user(bob),
    )
    assert res.status_code == 503
    assert res.json()["error"]["code"] == "AI_PROVIDER_ERROR"

    listing = await client.get(f"/api/v1/debates/{debate_id}/evaluations")
    assert listing.json() == []


async def test_provider_failure_surfaces(client, fake_ai, debate_id, alice):
    fake_ai.queue(AIProviderError("overloaded", "connection_error"))
    res = await client.post(
        f"/api/v1/debates/{debate_id}/evaluation", headers=as_user(alice),
    )
    assert res.status_code == 503


async def test_outsider_cannot_request_evaluation(client, fake_ai, debate_id, carol):
    res = await client.post(
        f"/api/v1/debates/{debate_id}/evaluation", headers=as_user(carol),
    )
    assert res.status_code == 403
    assert fake_ai.calls == []
