"""Notification inbox — created alongside workflow events, recipient-only access."""

from uuid import uuid4

from tests.services.conftest import as_user


async def _inbox(client, user, **params):
    res = await client.get("/api/v1/notifications", params=params, headers=as_user(user))
    assert res.status_code == 200
    return res.json()


async def test_debate_invite_reaches_opponent(client, debate_id, alice, bob):
    inbox = await _inbox(client, bob)
    assert len(inbox) == 1
    assert inbox[0]["kind"] == "debate_invite"
    assert inbox[0]["actor_id"] == str(alice)
    assert inbox[0]["debate_id"] == str(debate_id)
    assert "Is remote work better?" in inbox[0]["message"]
    assert await _inbox(client, alice) == []


async def test_defeat_notifies_winner(client, debate_id, alice, bob):
    await client.post(f"/api/v1/debates/{debate_id}/admit-defeat", headers=as_user(bob))
    kinds = [n["kind"] for n in await _inbox(client, alice)]
    assert kinds == ["defeat_admitted"]


async def test_mark_read(client, debate_id, bob):
    notification = (await _inbox(client, bob))[0]
    res = await client.post(
        f"/api/v1/notifications/{notification['id']}/read", headers=as_user(bob),
    )
    assert res.status_code == 200
    assert res.json()["read"] is True
    assert await _inbox(client, bob, unread_only=True) == []
    assert len(await _inbox(client, bob)) == 1


async def test_cannot_read_someone_elses(client, debate_id, alice, bob):
    notification = (await _inbox(client, bob))[0]
    res = await client.post(
        f"/api/v1/notifications/{notification['id']}/read", headers=as_user(alice),
    )
    assert res.status_code == 403


async def test_unknown_notification_is_404(client, alice):
    res = await client.post(
        f"/api/v1/notifications/{uuid4()}/read", headers=as_user(alice),
    )
    assert res.status_code == 404
