"""Discussion Post Routes — create, feed, view, like toggle."""

from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from arguably.api.deps import get_actor_id
from arguably.infrastructure.database import get_db
from arguably.schemas.community import LikeToggleResponse, PostCreate, PostResponse
from arguably.services import posts

router = APIRouter(prefix="/api/v1/posts", tags=["posts"])


@router.post("", response_model=PostResponse, status_code=status.HTTP_201_CREATED)
async def create_post(
    body: PostCreate,
    actor_id: UUID = Depends(get_actor_id),
    db: AsyncSession = Depends(get_db),
):
    return await posts.create_post(db, actor_id, body)


@router.get("", response_model=list[PostResponse])
async def list_posts(
    limit: int = Query(posts.FEED_LIMIT, ge=1, le=200),
    db: AsyncSession = Depends(get_db),
):
    return await posts.list_posts(db, limit)


@router.get("/{post_id}", response_model=PostResponse)
async def get_post(post_id: UUID, db: AsyncSession = Depends(get_db)):
    return await posts.load_post(db, post_id)


@router.post("/{post_id}/like", response_model=LikeToggleResponse)
async def toggle_like(
    post_id: UUID,
    actor_id: UUID = Depends(get_actor_id),
    db: AsyncSession = Depends(get_db),
):
    toggle = await posts.toggle_like(db, post_id, actor_id)
    return LikeToggleResponse(
        post_id=toggle.post_id, liked=toggle.liked, likes_count=toggle.likes_count,
    )
