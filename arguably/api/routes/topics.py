"""Weekly Topic Routes — read the current week's topics, admin refresh."""

from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from arguably.api.deps import get_actor_id, get_topic_generator
from arguably.infrastructure.database import get_db
from arguably.schemas.community import TopicResponse, WeeklyTopicsResponse
from arguably.services.topic_generator import (
    TopicGenerator, WeeklyTopics, get_weekly_topics, refresh_weekly_topics,
)

router = APIRouter(prefix="/api/v1/topics", tags=["topics"])


def _to_response(weekly: WeeklyTopics) -> WeeklyTopicsResponse:
    return WeeklyTopicsResponse(
        week_start=weekly.week_start,
        topics=[TopicResponse.model_validate(t) for t in weekly.topics],
    )


@router.get("/weekly", response_model=WeeklyTopicsResponse)
async def weekly_topics(db: AsyncSession = Depends(get_db)):
    return _to_response(await get_weekly_topics(db))


@router.post("/weekly/refresh", response_model=WeeklyTopicsResponse)
async def refresh_topics(
    actor_id: UUID = Depends(get_actor_id),
    db: AsyncSession = Depends(get_db),
    generator: TopicGenerator = Depends(get_topic_generator),
):
    """Admin only: regenerate this week's topics with the AI collaborator."""
    return _to_response(await refresh_weekly_topics(db, actor_id, generator))
