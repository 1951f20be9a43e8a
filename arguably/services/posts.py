"""Discussion Posts — topic posts and like toggling.

Invariants:
    - likes_count changes only in the same transaction as the PostLike insert/delete,
      via `likes_count = likes_count +/- 1`
    - A concurrent duplicate like loses on the unique constraint -> ConcurrencyError
"""

import logging
from dataclasses import dataclass
from uuid import UUID

from sqlalchemy import delete, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from arguably.core.errors import ConcurrencyError, ResourceNotFoundError
from arguably.models.discussion_post import DiscussionPost, PostLike
from arguably.schemas.community import PostCreate
from arguably.services.records import load_profile

logger = logging.getLogger(__name__)

FEED_LIMIT = 50


@dataclass
class LikeToggle:
    post_id: UUID
    liked: bool
    likes_count: int


async def load_post(
    db: AsyncSession, post_id: UUID, *, fresh: bool = False,
) -> DiscussionPost:
    stmt = select(DiscussionPost).where(DiscussionPost.id == post_id)
    if fresh:
        stmt = stmt.execution_options(populate_existing=True)
    post = (await db.execute(stmt)).scalar_one_or_none()
    if post is None:
        raise ResourceNotFoundError("DiscussionPost", str(post_id))
    return post


async def create_post(db: AsyncSession, actor_id: UUID, data: PostCreate) -> DiscussionPost:
    await load_profile(db, actor_id)
    post = DiscussionPost(
        user_id=actor_id, title=data.title, description=data.description,
        likes_count=0,
    )
    db.add(post)
    await db.commit()
    return post


async def list_posts(db: AsyncSession, limit: int = FEED_LIMIT) -> list[DiscussionPost]:
    result = await db.execute(
        select(DiscussionPost)
        .order_by(DiscussionPost.created_at.desc())
        .limit(limit),
    )
    return list(result.scalars().all())


async def toggle_like(db: AsyncSession, post_id: UUID, actor_id: UUID) -> LikeToggle:
    await load_post(db, post_id)
    removed = await db.execute(
        delete(PostLike).where(
            PostLike.post_id == post_id, PostLike.user_id == actor_id,
        ),
    )
    liked = removed.rowcount == 0
    try:
        if liked:
            db.add(PostLike(post_id=post_id, user_id=actor_id))
            await db.flush()
        await db.execute(
            update(DiscussionPost)
            .where(DiscussionPost.id == post_id)
            .values(likes_count=DiscussionPost.likes_count + (1 if liked else -1)),
        )
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise ConcurrencyError("Like was toggled concurrently. Try again.")

    post = await load_post(db, post_id, fresh=True)
    return LikeToggle(post_id=post.id, liked=liked, likes_count=post.likes_count)
