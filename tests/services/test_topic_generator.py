"""Weekly topics — admin refresh via the AI collaborator, weekly reads."""

from datetime import date

import pytest

from arguably.core.errors import AIProviderError
from arguably.core.weekly_topics import week_start
from arguably.models.controversial_topic import ControversialTopic
from arguably.services.topic_generator import (
    get_weekly_topics, parse_topics_response, today_utc,
)
from tests.services.conftest import as_user
from tests.services.mock_anthropic import topics_json


def test_parse_accepts_fenced_json():
    payload = parse_topics_response(f"```json\n{topics_json()}\n```")
    assert [t.category.value for t in payload.topics] == ["Politics", "Religion", "Finance"]


def test_parse_rejects_missing_category():
    with pytest.raises(AIProviderError) as exc:
        parse_topics_response(topics_json(("Politics", "Finance")))
    assert exc.value.api_error_type == "invalid_response"


def test_parse_rejects_prose():
    with pytest.raises(AIProviderError):
        parse_topics_response("Here are this week's topics: ...")


async def test_empty_before_first_refresh(client):
    res = await client.get("/api/v1/topics/weekly")
    assert res.status_code == 200
    assert res.json()["topics"] == []
    assert res.json()["week_start"] == week_start(today_utc()).isoformat()


async def test_admin_refresh_stores_three_topics(client, fake_ai, alice, make_admin):
    await make_admin(alice)
    fake_ai.queue(topics_json())

    res = await client.post("/api/v1/topics/weekly/refresh", headers=as_user(alice))
    assert res.status_code == 200
    categories = [t["category"] for t in res.json()["topics"]]
    assert sorted(categories) == ["Finance", "Politics", "Religion"]

    weekly = (await client.get("/api/v1/topics/weekly")).json()
    assert len(weekly["topics"]) == 3
    assert weekly["topics"][0]["question"].startswith("Should")


async def test_refresh_replaces_current_week(client, fake_ai, alice, make_admin):
    await make_admin(alice)
    fake_ai.queue(topics_json(), topics_json())
    await client.post("/api/v1/topics/weekly/refresh", headers=as_user(alice))
    await client.post("/api/v1/topics/weekly/refresh", headers=as_user(alice))

    weekly = (await client.get("/api/v1/topics/weekly")).json()
    assert len(weekly["topics"]) == 3


async def test_non_admin_refresh_forbidden(client, fake_ai, bob):
    fake_ai.queue(topics_json())
    res = await client.post("/api/v1/topics/weekly/refresh", headers=as_user(bob))
    assert res.status_code == 403
    assert fake_ai.calls == []


async def test_invalid_ai_output_stores_nothing(client, fake_ai, alice, make_admin):
    await make_admin(alice)
    fake_ai.queue('{"topics": []}')
    res = await client.post("/api/v1/topics/weekly/refresh", headers=as_user(alice))
    assert res.status_code == 503
    assert (await client.get("/api/v1/topics/weekly")).json()["topics"] == []


async def test_falls_back_to_latest_stored_week(test_db):
    test_db.add(ControversialTopic(
        category="Politics", title="Old news", question="Old?",
        week_start=date(2026, 10, 11),
    ))
    await test_db.commit()

    weekly = await get_weekly_topics(test_db, today=date(2026, 10, 20))
    assert weekly.week_start == date(2026, 10, 11)
    assert [t.title for t in weekly.topics] == ["Old news"]

    earlier = await get_weekly_topics(test_db, today=date(2026, 10, 1))
    assert earlier.topics == []
