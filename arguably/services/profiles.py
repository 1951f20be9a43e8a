"""Profiles — sign-up, owner edits, belief search, points and rank.

Invariants:
    - A profile's id is the authenticated user id (one profile per user)
    - Usernames are unique case-insensitively
    - Total points = sum of the user's score column over every debate they took
      part in, soft-deleted debates included
"""

import json
import logging
from uuid import UUID

from sqlalchemy import String, case, cast, func, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from arguably.core.domain_types import AppRole
from arguably.core.errors import ConflictError, PermissionDeniedError
from arguably.core.ranks import RankProgress, progress_to_next_rank
from arguably.models.debate import Debate
from arguably.models.profile import Profile
from arguably.models.user_role import UserRole
from arguably.schemas.profile import ProfileCreate, ProfileUpdate, normalize_beliefs
from arguably.services.records import load_profile

logger = logging.getLogger(__name__)

# Never nulled by a PATCH, even when the body sends null
_REQUIRED_FIELDS = frozenset({"username", "beliefs"})


async def create_profile(
    db: AsyncSession, actor_id: UUID, data: ProfileCreate,
) -> Profile:
    if await db.get(Profile, actor_id) is not None:
        raise ConflictError("A profile already exists for this user.")
    await _ensure_username_free(db, data.username)

    profile = Profile(id=actor_id, **data.model_dump())
    db.add(profile)
    db.add(UserRole(user_id=actor_id, role=AppRole.USER.value))
    await _commit_profile(db, data.username)
    logger.info("Profile created", extra={"actor_id": str(actor_id)})
    return profile


async def update_profile(
    db: AsyncSession, profile_id: UUID, actor_id: UUID, data: ProfileUpdate,
) -> Profile:
    if profile_id != actor_id:
        raise PermissionDeniedError("You can only edit your own profile.")
    profile = await load_profile(db, profile_id)

    changes = data.model_dump(exclude_unset=True)
    if changes.get("username") and changes["username"].lower() != profile.username.lower():
        await _ensure_username_free(db, changes["username"])
    for field, value in changes.items():
        if value is None and field in _REQUIRED_FIELDS:
            continue
        setattr(profile, field, value)
    await _commit_profile(db, profile.username)
    return profile


async def list_profiles(db: AsyncSession, belief: str | None = None) -> list[Profile]:
    """All profiles ordered by username, optionally only those holding a belief tag."""
    stmt = select(Profile).order_by(Profile.username)
    tags = normalize_beliefs([belief]) if belief else []
    if tags:
        # JSON array rendered as text contains the tag exactly as json.dumps wrote it
        needle = _escape_like(json.dumps(tags[0]))
        stmt = stmt.where(
            cast(Profile.beliefs, String).ilike(f"%{needle}%", escape="\\"),
        )
    return list((await db.execute(stmt)).scalars().all())


async def total_points(db: AsyncSession, profile_id: UUID) -> int:
    score = case(
        (Debate.participant1_id == profile_id, Debate.participant1_score),
        else_=Debate.participant2_score,
    )
    result = await db.execute(
        select(func.coalesce(func.sum(score), 0)).where(
            or_(
                Debate.participant1_id == profile_id,
                Debate.participant2_id == profile_id,
            ),
        ),
    )
    return int(result.scalar_one())


async def profile_with_rank(
    db: AsyncSession, profile_id: UUID,
) -> tuple[Profile, int, RankProgress]:
    profile = await load_profile(db, profile_id)
    points = await total_points(db, profile_id)
    return profile, points, progress_to_next_rank(points)


async def _ensure_username_free(db: AsyncSession, username: str) -> None:
    result = await db.execute(
        select(Profile.id).where(func.lower(Profile.username) == username.lower()),
    )
    if result.first() is not None:
        raise ConflictError(f"Username '{username}' is already taken.")


async def _commit_profile(db: AsyncSession, username: str) -> None:
    # The lower(username) unique index settles races the pre-check cannot see
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise ConflictError(f"Username '{username}' is already taken.")


def _escape_like(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
