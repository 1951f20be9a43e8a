"""Weekly Topic Generator — AI-proposed controversial topics, one per category.

Invariants:
    - Refresh is admin-only
    - Invalid AI output stores nothing (AIProviderError raised before any write)
    - Refreshing replaces the current week's rows in one transaction
"""

import json
import logging
from dataclasses import dataclass
from datetime import date, datetime, timezone
from uuid import UUID

from pydantic import ValidationError
from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from arguably.core.domain_types import AppRole
from arguably.core.errors import AIProviderError, PermissionDeniedError
from arguably.core.rating_prompt import strip_code_fences
from arguably.core.weekly_topics import (
    TOPICS_SYSTEM_PROMPT, TOPICS_USER_MESSAGE, week_start,
)
from arguably.infrastructure.anthropic_client import ResilientAnthropicClient
from arguably.models.controversial_topic import ControversialTopic
from arguably.models.user_role import UserRole
from arguably.schemas.ai import TopicsPayload

logger = logging.getLogger(__name__)


@dataclass
class WeeklyTopics:
    week_start: date
    topics: list[ControversialTopic]


def parse_topics_response(text: str) -> TopicsPayload:
    """Raw model text -> validated payload, or AIProviderError."""
    try:
        return TopicsPayload.model_validate(json.loads(strip_code_fences(text)))
    except json.JSONDecodeError as e:
        raise AIProviderError(f"Topics response is not JSON: {e.msg}", "invalid_response")
    except ValidationError as e:
        raise AIProviderError(
            f"Topics response failed validation ({e.error_count()} errors)",
            "invalid_response",
        )


class TopicGenerator:
    def __init__(
        self, client: ResilientAnthropicClient, model: str, max_tokens: int = 4000,
    ):
        self.client = client
        self.model = model
        self.max_tokens = max_tokens

    async def generate(self) -> TopicsPayload:
        text = await self.client.complete_text(
            model=self.model,
            max_tokens=self.max_tokens,
            system=TOPICS_SYSTEM_PROMPT,
            user_message=TOPICS_USER_MESSAGE,
        )
        return parse_topics_response(text)


def today_utc() -> date:
    return datetime.now(timezone.utc).date()


async def is_admin(db: AsyncSession, user_id: UUID) -> bool:
    result = await db.execute(
        select(UserRole.id).where(
            UserRole.user_id == user_id, UserRole.role == AppRole.ADMIN.value,
        ),
    )
    return result.first() is not None


async def get_weekly_topics(db: AsyncSession, today: date | None = None) -> WeeklyTopics:
    """Current week's topics; before the first refresh, the most recent stored week."""
    current = week_start(today or today_utc())
    latest = (
        await db.execute(
            select(func.max(ControversialTopic.week_start))
            .where(ControversialTopic.week_start <= current),
        )
    ).scalar_one_or_none()
    if latest is None:
        return WeeklyTopics(week_start=current, topics=[])
    result = await db.execute(
        select(ControversialTopic)
        .where(ControversialTopic.week_start == latest)
        .order_by(ControversialTopic.category),
    )
    return WeeklyTopics(week_start=latest, topics=list(result.scalars().all()))


async def refresh_weekly_topics(
    db: AsyncSession,
    actor_id: UUID,
    generator: TopicGenerator,
    today: date | None = None,
) -> WeeklyTopics:
    if not await is_admin(db, actor_id):
        raise PermissionDeniedError("Only admins can refresh weekly topics.")

    payload = await generator.generate()
    current = week_start(today or today_utc())

    await db.execute(
        delete(ControversialTopic).where(ControversialTopic.week_start == current),
    )
    rows = [
        ControversialTopic(
            category=topic.category.value,
            title=topic.title,
            question=topic.question,
            description=topic.description,
            controversy=topic.controversy,
            week_start=current,
        )
        for topic in payload.topics
    ]
    db.add_all(rows)
    await db.commit()
    logger.info(
        f"Weekly topics refreshed for {current.isoformat()}",
        extra={"actor_id": str(actor_id)},
    )
    return WeeklyTopics(
        week_start=current,
        topics=sorted(rows, key=lambda t: t.category),
    )
