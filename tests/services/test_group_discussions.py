"""Group discussions — membership, evidence with background rating, responses, scores."""

import uuid
from datetime import date

import pytest

import arguably.services.group_discussions as group_service
from arguably.models.controversial_topic import ControversialTopic
from tests.services.conftest import SOURCE_URL, as_user
from tests.services.mock_anthropic import rating_json

BASE = "/api/v1/group-discussions"


@pytest.fixture
async def topic_id(test_session_factory) -> uuid.UUID:
    async with test_session_factory() as session:
        topic = ControversialTopic(
            category="Finance", title="Wealth taxes",
            question="Should billionaires pay a wealth tax?",
            week_start=date(2026, 10, 18),
        )
        session.add(topic)
        await session.commit()
        return topic.id


@pytest.fixture
async def discussion_id(client, topic_id, alice, bob, carol) -> str:
    """Alice created it (agree); bob (disagree) and carol (agree) joined."""
    res = await client.post(
        BASE, json={"topic_id": str(topic_id), "stance": "agree"}, headers=as_user(alice),
    )
    assert res.status_code == 201, res.text
    discussion_id = res.json()["id"]
    for user, stance in ((bob, "disagree"), (carol, "agree")):
        res = await client.post(
            f"{BASE}/{discussion_id}/members", json={"stance": stance},
            headers=as_user(user),
        )
        assert res.status_code == 201, res.text
    return discussion_id


async def _submit(client, discussion_id, user, claim, source_url=None):
    body = {"claim": claim}
    if source_url:
        body["source_url"] = source_url
    return await client.post(
        f"{BASE}/{discussion_id}/evidence", json=body, headers=as_user(user),
    )


async def _respond(client, evidence_id, user, response_type):
    return await client.post(
        f"{BASE}/evidence/{evidence_id}/responses",
        json={"response_type": response_type}, headers=as_user(user),
    )


async def _detail(client, discussion_id, user):
    res = await client.get(f"{BASE}/{discussion_id}", headers=as_user(user))
    assert res.status_code == 200, res.text
    return res.json()


async def test_creator_joins_with_stance(client, topic_id, alice):
    res = await client.post(
        BASE, json={"topic_id": str(topic_id), "stance": "disagree"}, headers=as_user(alice),
    )
    body = res.json()
    assert body["topic_title"] == "Wealth taxes"
    assert body["topic_question"] == "Should billionaires pay a wealth tax?"
    assert body["my_stance"] == "disagree"
    assert body["can_submit"] is True
    assert [m["username"] for m in body["members"]] == ["alice"]


async def test_unknown_topic_is_404(client, alice):
    res = await client.post(
        BASE, json={"topic_id": str(uuid.uuid4()), "stance": "agree"}, headers=as_user(alice),
    )
    assert res.status_code == 404


async def test_invalid_stance_rejected(client, topic_id, alice):
    res = await client.post(
        BASE, json={"topic_id": str(topic_id), "stance": "maybe"}, headers=as_user(alice),
    )
    assert res.status_code == 400


async def test_join_twice_rejected(client, discussion_id, bob):
    res = await client.post(
        f"{BASE}/{discussion_id}/members", json={"stance": "agree"}, headers=as_user(bob),
    )
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "ALREADY_JOINED"


async def test_non_member_cannot_submit(client, discussion_id):
    outsider = uuid.uuid4()
    res = await _submit(client, discussion_id, outsider, "claim")
    assert res.status_code == 403
    assert res.json()["error"]["code"] == "NOT_PARTICIPANT"

    detail = await _detail(client, discussion_id, outsider)
    assert detail["my_stance"] is None
    assert detail["can_submit"] is False


async def test_submission_is_rated_in_background(client, fake_ai, discussion_id, alice):
    fake_ai.queue(rating_json(rating=5, warning="Paywalled"))
    res = await _submit(client, discussion_id, alice, "Wealth taxes raised revenue", SOURCE_URL)
    assert res.status_code == 201
    assert res.json()["rating_scheduled"] is True

    evidence = (await _detail(client, discussion_id, alice))["evidence"][0]
    assert evidence["source_rating"] == 5
    assert evidence["source_warning"] == "Paywalled"
    assert evidence["source_reasoning"]
    assert "billionaires" in fake_ai.calls[0]["user_message"]


async def test_failed_rating_leaves_fields_unset(client, fake_ai, discussion_id, alice):
    fake_ai.queue("not json at all")
    await _submit(client, discussion_id, alice, "claim", SOURCE_URL)
    evidence = (await _detail(client, discussion_id, alice))["evidence"][0]
    assert evidence["source_rating"] is None


async def test_agree_scores_author_and_disagree_does_not(
    client, discussion_id, alice, bob, carol,
):
    evidence_id = (await _submit(client, discussion_id, alice, "claim")).json()["evidence"]["id"]

    res = await _respond(client, evidence_id, bob, "agree")
    assert res.status_code == 201
    assert res.json()["author_score"] == 1
    res = await _respond(client, evidence_id, carol, "disagree")
    assert res.json()["author_score"] == 1

    detail = await _detail(client, discussion_id, bob)
    scores = {m["username"]: m["score"] for m in detail["members"]}
    assert scores == {"alice": 1, "bob": 0, "carol": 0}
    item = detail["evidence"][0]
    assert (item["agree_count"], item["disagree_count"]) == (1, 1)
    assert item["responded"] is True


async def test_response_rules(client, discussion_id, alice, bob):
    evidence_id = (await _submit(client, discussion_id, alice, "claim")).json()["evidence"]["id"]

    res = await _respond(client, evidence_id, alice, "agree")
    assert res.json()["error"]["code"] == "OWN_EVIDENCE"

    await _respond(client, evidence_id, bob, "agree")
    res = await _respond(client, evidence_id, bob, "disagree")
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "ALREADY_RESPONDED"


async def test_duplicate_response_caught_by_constraint(
    client, discussion_id, alice, bob, monkeypatch,
):
    evidence_id = (await _submit(client, discussion_id, alice, "claim")).json()["evidence"]["id"]
    await _respond(client, evidence_id, bob, "agree")

    monkeypatch.setattr(group_service, "validate_group_response", lambda *args: None)
    res = await _respond(client, evidence_id, bob, "agree")
    assert res.status_code == 409
    assert res.json()["error"]["code"] == "CONFLICT"

    detail = await _detail(client, discussion_id, alice)
    assert detail["members"][0]["score"] == 1


async def test_resubmission_requires_responding_to_others(client, discussion_id, alice, bob):
    await _submit(client, discussion_id, alice, "first")
    bob_evidence = (await _submit(client, discussion_id, bob, "counter")).json()["evidence"]["id"]

    detail = await _detail(client, discussion_id, alice)
    assert detail["can_submit"] is False
    assert detail["pending_responses"] == 1

    res = await _submit(client, discussion_id, alice, "second")
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "RESPOND_FIRST"

    await _respond(client, bob_evidence, alice, "disagree")
    res = await _submit(client, discussion_id, alice, "second")
    assert res.status_code == 201

    detail = await _detail(client, discussion_id, alice)
    assert [e["claim"] for e in detail["evidence"]] == ["first", "counter", "second"]
    alice_row = next(m for m in detail["members"] if m["username"] == "alice")
    assert alice_row["has_submitted_evidence"] is True


async def test_close_is_creator_only(client, discussion_id, alice, bob, carol):
    res = await client.post(f"{BASE}/{discussion_id}/close", headers=as_user(bob))
    assert res.status_code == 403
    assert res.json()["error"]["code"] == "FORBIDDEN"

    res = await client.post(f"{BASE}/{discussion_id}/close", headers=as_user(alice))
    assert res.status_code == 200
    assert res.json()["status"] == "closed"

    res = await _submit(client, discussion_id, carol, "late claim")
    assert res.json()["error"]["code"] == "DISCUSSION_CLOSED"
    res = await client.post(f"{BASE}/{discussion_id}/close", headers=as_user(alice))
    assert res.json()["error"]["code"] == "DISCUSSION_CLOSED"


async def test_list_filters_by_topic(client, discussion_id, topic_id):
    listed = (await client.get(BASE, params={"topic_id": str(topic_id)})).json()
    assert [d["id"] for d in listed] == [discussion_id]
    assert (await client.get(BASE, params={"topic_id": str(uuid.uuid4())})).json() == []
